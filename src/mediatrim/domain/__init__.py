"""Domain models and enums for mediatrim.

Usage:
    from mediatrim.domain import HostState, TrackInfo, TrimRequest
    from mediatrim.domain import TrackType, SubtitleStrategy
"""

from .enums import (
    FILTER_ORDER,
    MAP_ORDER,
    FilterType,
    OutcomeKind,
    SubtitleStrategy,
    TrackType,
)
from .models import (
    Geometry,
    HostState,
    SizeHint,
    TrackInfo,
    TrimMode,
    TrimRequest,
    TrimValidationError,
)

__all__ = [
    # Models
    "Geometry",
    "HostState",
    "SizeHint",
    "TrackInfo",
    "TrimMode",
    "TrimRequest",
    "TrimValidationError",
    # Enums
    "FILTER_ORDER",
    "MAP_ORDER",
    "FilterType",
    "OutcomeKind",
    "SubtitleStrategy",
    "TrackType",
]
