"""Trim request context for structured logging.

Provides context propagation using contextvars, so every record logged
while a trim request is handled carries the request id and input path.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_trim_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "trim_id", default=None
)
_input_path: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "input_path", default=None
)


def set_trim_context(trim_id: str, input_path: Path | str | None = None) -> None:
    """Set the current trim context."""
    _trim_id.set(trim_id)
    _input_path.set(str(input_path) if input_path is not None else None)


def clear_trim_context() -> None:
    """Clear the current trim context."""
    _trim_id.set(None)
    _input_path.set(None)


def get_trim_context() -> tuple[str | None, str | None]:
    """Get current trim context.

    Returns:
        Tuple of (trim_id, input_path), either may be None.
    """
    return _trim_id.get(), _input_path.get()


@contextmanager
def trim_context(
    trim_id: str, input_path: Path | str | None = None
) -> Generator[None, None, None]:
    """Set trim context on entry and restore the previous one on exit.

    Example:
        with trim_context("a1b2c3", "/media/movie.mkv"):
            logger.info("Building command")  # includes [trim:a1b2c3]
    """
    old_trim_id = _trim_id.get()
    old_input_path = _input_path.get()
    try:
        set_trim_context(trim_id, input_path)
        yield
    finally:
        _trim_id.set(old_trim_id)
        _input_path.set(old_input_path)


class TrimContextFilter(logging.Filter):
    """Logging filter that injects trim context into log records.

    Adds trim_id and input_path attributes, and a compact trim_tag like
    ``[trim:a1b2c3] `` for the text format.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        trim_id, input_path = get_trim_context()
        record.trim_id = trim_id
        record.input_path = input_path
        record.trim_tag = f"[trim:{trim_id}] " if trim_id else ""
        return True
