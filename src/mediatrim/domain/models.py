"""Domain models for mediatrim.

These records describe what the host reports about the current source
and what the user asked for. They are independent of how the transcoder
command is built.
"""

from dataclasses import dataclass, field
from pathlib import Path

from .enums import TrackType


class TrimValidationError(ValueError):
    """Raised when a trim request cannot be executed."""

    pass


@dataclass(frozen=True)
class Geometry:
    """Video dimensions in pixels."""

    width: int
    height: int

    @property
    def pixels(self) -> int:
        """Total pixel area."""
        return self.width * self.height

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


@dataclass(frozen=True)
class SizeHint:
    """User-requested resolution cap.

    The cap is a pixel area: sources larger than width*height are scaled
    down preserving aspect ratio, unless force is set, in which case the
    hint is used verbatim.
    """

    width: int
    height: int
    force: bool = False

    def as_geometry(self) -> Geometry:
        return Geometry(self.width, self.height)


@dataclass(frozen=True)
class TrackInfo:
    """One selectable media stream as reported by the host."""

    index: int
    """Absolute stream index within the input file."""

    track_type: TrackType
    codec: str | None = None
    selected: bool = False
    language: str | None = None
    title: str | None = None
    is_default: bool = False
    is_forced: bool = False
    # Audio-specific
    channel_layout: str | None = None
    # Video-specific
    width: int | None = None
    height: int | None = None


@dataclass(frozen=True)
class HostState:
    """Snapshot of everything the host knows about the current source."""

    path: Path
    tracks: tuple[TrackInfo, ...] = ()
    loop_start: float | None = None
    loop_end: float | None = None
    width: int | None = None
    height: int | None = None
    channel_layout: str | None = None

    @property
    def geometry(self) -> Geometry | None:
        """Source geometry, or None if the host did not report one."""
        if self.width and self.height:
            return Geometry(self.width, self.height)
        return None

    @property
    def has_trim_range(self) -> bool:
        return self.loop_start is not None and self.loop_end is not None


@dataclass(frozen=True)
class TrimMode:
    """Per-request mode flags."""

    no_subs: bool = False
    no_audio: bool = False
    detached: bool = False

    def describe(self) -> str:
        """Render the flags as ``[+no-subs] [-no-audio] [-detached]``."""
        flags = (
            ("no-subs", self.no_subs),
            ("no-audio", self.no_audio),
            ("detached", self.detached),
        )
        return " ".join(f"[{'+' if on else '-'}{name}]" for name, on in flags)


@dataclass(frozen=True)
class TrimRequest:
    """One user-initiated trim action."""

    start: float
    end: float
    mode: TrimMode = field(default_factory=TrimMode)

    @property
    def duration(self) -> float:
        return self.end - self.start

    def validate(self) -> None:
        """Reject requests whose end does not exceed their start.

        Raises:
            TrimValidationError: If end <= start.
        """
        if self.end <= self.start:
            raise TrimValidationError("End time must be greater than start time.")
