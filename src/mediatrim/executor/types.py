"""Trim build context and result types.

This module defines the data structures passed between the filter graph
builder, the argument assembler, the process runner and the hook engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from mediatrim.domain import (
    FilterType,
    Geometry,
    OutcomeKind,
    SubtitleStrategy,
    TrackType,
)


@dataclass
class BuildContext:
    """Working state for building one trim command.

    Filter lists are append-only; they are serialized in FILTER_ORDER no
    matter in which order filters were added.
    """

    input_path: Path
    output_path: Path
    start: float
    end: float
    ext: str

    size: Geometry | None = None
    """Geometry passed as -s:v, None when no cap is configured."""

    size_changed: bool = False
    """True when size differs from the source geometry."""

    maps: dict[TrackType, str] = field(default_factory=dict)
    filters: dict[FilterType, list[str]] = field(
        default_factory=lambda: {t: [] for t in FilterType}
    )
    exclusions: list[str] = field(default_factory=list)
    """Stream exclusion flags such as -an and -sn."""

    video_consumed: bool = False
    """The video track feeds an overlay and must not be mapped directly."""

    subtitle_strategy: SubtitleStrategy = SubtitleStrategy.NONE
    subtitle_path: Path | None = None
    fonts_dir: Path | None = None
    notices: list[str] = field(default_factory=list)
    """Informational messages produced while building."""

    @property
    def duration(self) -> float:
        return self.end - self.start

    def add_filter(self, filter_type: FilterType, expression: str) -> None:
        self.filters[filter_type].append(expression)

    def set_map(self, track_type: TrackType, value: str) -> None:
        self.maps[track_type] = value


@dataclass(frozen=True)
class CommandOutcome:
    """Result of one external invocation."""

    kind: OutcomeKind
    message: str
    output_path: Path | None = None
    elapsed_seconds: float | None = None
    stdout: str = ""
    stderr: str = ""
    returncode: int | None = None
    log_error: str | None = None
    """Set when the diagnostic log could not be written."""

    @property
    def success(self) -> bool:
        return self.kind.is_success


@dataclass(frozen=True)
class HookResult:
    """Result of one post-run hook."""

    label: str
    message: str
    success: bool

    def __str__(self) -> str:
        return f"{self.label}: {self.message}"


@dataclass
class TrimResult:
    """Everything that happened for one trim request."""

    command: list[str] = field(default_factory=list)
    outcome: CommandOutcome | None = None
    hook_results: list[HookResult] = field(default_factory=list)
    notices: list[str] = field(default_factory=list)
    rejected: str | None = None
    """Reason the request was rejected before any process ran."""

    @property
    def success(self) -> bool:
        if self.rejected is not None:
            return False
        return self.outcome is None or self.outcome.success
