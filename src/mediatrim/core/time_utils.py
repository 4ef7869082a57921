"""Timestamp parsing and formatting."""

from __future__ import annotations

import math
import re

_CLOCK_PATTERN = re.compile(r"^(?:(\d+):)?(\d{1,2}):(\d{1,2}(?:\.\d+)?)$")


def parse_timestamp(value: str) -> float:
    """Parse a timestamp into seconds.

    Accepts plain seconds (``"12.5"``) or clock notation
    (``"MM:SS[.fff]"``, ``"HH:MM:SS[.fff]"``).

    Raises:
        ValueError: If the value is not a finite, non-negative timestamp.

    Example:
        >>> parse_timestamp("1:02:03.5")
        3723.5
    """
    text = value.strip()
    match = _CLOCK_PATTERN.match(text)
    if match:
        hours, minutes, seconds = match.groups()
        if int(minutes) >= 60 or float(seconds) >= 60:
            raise ValueError(f"Invalid timestamp: {value}")
        return int(hours or 0) * 3600 + int(minutes) * 60 + float(seconds)

    try:
        seconds_value = float(text)
    except ValueError:
        raise ValueError(f"Invalid timestamp: {value}") from None
    if seconds_value < 0 or not math.isfinite(seconds_value):
        raise ValueError(f"Invalid timestamp: {value}")
    return seconds_value


def format_seconds(value: float) -> str:
    """Render seconds for an ffmpeg time argument.

    Keeps the value unrounded up to 14 significant digits, enough to drop
    the noise left by float subtraction: 10.0 -> "10", 4.5 -> "4.5",
    5.3 - 1.1 -> "4.2". ffmpeg does not parse exponents, so values that
    would need one are written in fixed notation at microsecond precision.
    """
    text = f"{value:.14g}"
    if "e" in text:
        text = f"{value:.6f}".rstrip("0").rstrip(".") or "0"
    return text
