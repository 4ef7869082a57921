"""Core utilities shared across mediatrim."""

from mediatrim.core.subprocess_utils import run_command, spawn_detached
from mediatrim.core.time_utils import format_seconds, parse_timestamp

__all__ = [
    "format_seconds",
    "parse_timestamp",
    "run_command",
    "spawn_detached",
]
