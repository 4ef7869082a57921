"""Output geometry resolution.

The size hint is a pixel-area cap: a source whose area exceeds the hint's
area is scaled down to roughly that area while keeping its aspect ratio,
and is never scaled up. Both resulting dimensions are even, since encoders
using chroma subsampling reject odd sizes.
"""

from __future__ import annotations

import logging
import math
import re

from mediatrim.domain import Geometry, SizeHint

logger = logging.getLogger(__name__)

# W:H[:force] or WxH[:force]
_SIZE_HINT_PATTERN = re.compile(
    r"^\s*(\d+)\s*[:xX]\s*(\d+)\s*(?::\s*([A-Za-z]+))?\s*$"
)


def _is_valid_dimension(value: int) -> bool:
    return value > 0 and value % 2 == 0


def parse_size_hint(value: str | None) -> SizeHint | None:
    """Parse a textual size hint.

    Args:
        value: ``W:H``, ``WxH``, optionally followed by ``:force``.

    Returns:
        SizeHint, or None if the value is absent or invalid. Invalid values
        disable the cap rather than raising.
    """
    if not value:
        return None

    match = _SIZE_HINT_PATTERN.match(str(value))
    if not match:
        logger.warning("Ignoring malformed size hint: %r", value)
        return None

    width, height = int(match.group(1)), int(match.group(2))
    if not (_is_valid_dimension(width) and _is_valid_dimension(height)):
        logger.warning(
            "Ignoring size hint %r: dimensions must be positive even integers",
            value,
        )
        return None

    return SizeHint(width=width, height=height, force=match.group(3) == "force")


def round_even(value: float) -> int:
    """Round to an even integer, symmetrically around zero.

    Truncates toward zero after adding the truncated remainder of the value
    modulo two, so an odd integer part is pushed one step away from zero:
    905.3 -> 906, 904.7 -> 904, -905.3 -> -906.
    """
    op = math.floor if value > 0 else math.ceil
    return int(op(value + op(math.fmod(value, 2))))


def resolve_size(hint: SizeHint | None, source: Geometry | None) -> Geometry | None:
    """Compute the output geometry for a size hint and source geometry.

    Args:
        hint: Size cap, or None for no cap.
        source: Source dimensions, or None if unknown.

    Returns:
        The source geometry when there is no hint or the source already fits,
        the hint itself when forced, the aspect-preserving downscale
        otherwise. None if the source is unknown and the hint is not forced.
    """
    if hint is None:
        return source
    if hint.force:
        return hint.as_geometry()
    if source is None:
        return None
    if source.pixels <= hint.width * hint.height:
        return source

    ratio = source.width / source.height
    height = math.sqrt(hint.width * hint.height / ratio)
    width = ratio * height

    resolved = Geometry(round_even(width), round_even(height))
    logger.debug(
        "Resolved size %s -> %s (cap %dx%d)", source, resolved, hint.width, hint.height
    )
    return resolved
