"""Configuration data models.

This module defines the dataclasses holding mediatrim's resolved options.
Both records are frozen: they are built once at startup and only read
while trim requests are handled.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mediatrim.domain import SizeHint
    from mediatrim.executor.hooks import Hook

# ffmpeg verbosity levels at which anything written to stderr is an error
QUIET_LOGLEVELS = frozenset({"quiet", "panic", "fatal", "error"})


@dataclass(frozen=True)
class TrimOptions:
    """Resolved options for every trim request of this run."""

    # Tool paths
    ffmpeg: str = "ffmpeg"
    ffprobe: str = "ffprobe"

    # Encoding overrides (each emitted only when set)
    video_codec: str | None = None
    audio_codec: str | None = None
    subtitle_codec: str | None = None
    video_bitrate: str | None = "1M"
    audio_bitrate: str | None = None
    quality: str | None = None
    """Constant quality factor passed as -crf."""

    threads: int | None = None

    size_hint: str | None = "1280:720"
    """Resolution cap as ``W:H[:force]`` or ``WxH[:force]``."""

    ext: str | None = "webm"
    """Target extension. None falls back to the input's extension."""

    loglevel: str = "error"
    """ffmpeg -v verbosity."""

    overwrite: bool = False
    """Pass -y instead of -n (never clobber)."""

    # Subtitle handling
    burn_subtitles: bool = False
    extract_fonts: bool = True
    fallback_font: str | None = None

    # Directories (None = next to the output file)
    fonts_dir: Path | None = None
    subs_dir: Path | None = None
    output_dir: Path | None = None
    log_dir: Path | None = None

    hooks: str = ""
    """Post-run commands: ``cmd|arg|<output>;cmd2|arg``."""

    write_log: bool = False
    """Persist each attached invocation and its outcome next to the output."""

    @cached_property
    def parsed_size_hint(self) -> SizeHint | None:
        """Size hint parsed once; None disables the cap."""
        from mediatrim.executor.size import parse_size_hint

        return parse_size_hint(self.size_hint)

    @cached_property
    def parsed_hooks(self) -> tuple[Hook, ...]:
        """Hook list parsed once; malformed specs disable hooks."""
        from mediatrim.executor.hooks import parse_hooks_lenient

        return parse_hooks_lenient(self.hooks)

    @property
    def stderr_is_error(self) -> bool:
        """True when any stderr output from ffmpeg means failure."""
        return self.loglevel.casefold() in QUIET_LOGLEVELS


@dataclass(frozen=True)
class LoggingConfig:
    """Configuration for mediatrim's own logging."""

    level: str = "info"
    file: Path | None = None
    format: str = "text"
    include_stderr: bool = True
    max_bytes: int = 10 * 1024 * 1024
    backup_count: int = 3

    def __post_init__(self) -> None:
        """Validate configuration."""
        valid_levels = {"debug", "info", "warning", "error"}
        if self.level.casefold() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}, got {self.level}")
        valid_formats = {"text", "json"}
        if self.format.casefold() not in valid_formats:
            raise ValueError(
                f"format must be one of {valid_formats}, got {self.format}"
            )
        if self.max_bytes <= 0:
            raise ValueError("max_bytes must be positive")
        if self.backup_count < 0:
            raise ValueError("backup_count must not be negative")


@dataclass(frozen=True)
class Profile:
    """A named set of option overrides from the profile document."""

    name: str
    options: dict[str, object] = field(default_factory=dict)
    logging: dict[str, object] = field(default_factory=dict)
    description: str | None = None
