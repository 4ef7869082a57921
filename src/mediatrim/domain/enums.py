"""Domain enums for mediatrim.

This module contains enums shared by the host adapters and the command
builder.
"""

from enum import Enum


class TrackType(Enum):
    """Media type of a selectable track."""

    VIDEO = "video"
    AUDIO = "audio"
    SUBTITLE = "subtitle"


class SubtitleStrategy(Enum):
    """How the selected subtitle track is carried into the output.

    Decision order (first match wins):
    1. NONE: no subtitle selected, subtitles excluded, or no video track
    2. OVERLAY: picture-based subtitle composited onto the video
    3. BURN: text subtitle rendered into the video via an extracted file
    4. PASSTHROUGH: subtitle stream mapped directly
    """

    NONE = "none"
    OVERLAY = "overlay"
    BURN = "burn"
    PASSTHROUGH = "passthrough"


class FilterType(Enum):
    """Filter graph a filter expression belongs to."""

    VIDEO = "video"
    AUDIO = "audio"
    COMPLEX = "complex"


# Serialization order for filters, independent of insertion order
FILTER_ORDER: tuple[FilterType, ...] = (
    FilterType.VIDEO,
    FilterType.AUDIO,
    FilterType.COMPLEX,
)

# Emission order for -map arguments
MAP_ORDER: tuple[TrackType, ...] = (
    TrackType.SUBTITLE,
    TrackType.AUDIO,
    TrackType.VIDEO,
)


class OutcomeKind(Enum):
    """Classification of an external invocation result."""

    SUCCESS = "success"
    DETACHED = "detached"
    TRANSCODER_ERROR = "transcoder_error"
    INVOCATION_ERROR = "invocation_error"
    INTERNAL_ERROR = "internal_error"

    @property
    def is_success(self) -> bool:
        """True for outcomes that count as a successful run."""
        return self in (OutcomeKind.SUCCESS, OutcomeKind.DETACHED)
