"""Trim execution package.

Module organization:
- size.py: Output geometry from a size hint (resolve_size)
- tracks.py: Track selection (select_tracks)
- filters.py: Subtitle strategy and filter graph building
- fonts.py: Embedded font recovery for burn-in
- command.py: ffmpeg argument assembly
- runner.py: Attached/detached process execution (ProcessRunner)
- hooks.py: Post-run hook parsing and execution (HookEngine)
- trim.py: TrimExecutor tying the steps together

Usage:
    from mediatrim.executor import TrimExecutor
    from mediatrim.executor import build_ffmpeg_command, resolve_size
"""

from .command import (
    build_ffmpeg_command,
    format_output_path,
    resolve_extension,
)
from .filters import (
    FilterGraphBuilder,
    decide_subtitle_strategy,
    escape_filter_value,
)
from .hooks import (
    Hook,
    HookEngine,
    HookSpecError,
    parse_hooks,
)
from .runner import ProcessRunner
from .size import parse_size_hint, resolve_size, round_even
from .tracks import select_tracks
from .trim import TrimExecutor
from .types import (
    BuildContext,
    CommandOutcome,
    HookResult,
    TrimResult,
)

__all__ = [
    # Types
    "BuildContext",
    "CommandOutcome",
    "HookResult",
    "TrimResult",
    # Size and tracks
    "parse_size_hint",
    "resolve_size",
    "round_even",
    "select_tracks",
    # Filters
    "FilterGraphBuilder",
    "decide_subtitle_strategy",
    "escape_filter_value",
    # Command building
    "build_ffmpeg_command",
    "format_output_path",
    "resolve_extension",
    # Execution
    "ProcessRunner",
    "TrimExecutor",
    # Hooks
    "Hook",
    "HookEngine",
    "HookSpecError",
    "parse_hooks",
]
