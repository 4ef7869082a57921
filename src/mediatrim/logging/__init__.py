"""Structured logging module for mediatrim.

Provides configurable logging with JSON format support and file rotation.
Includes trim request context support.
"""

from mediatrim.logging.config import configure_logging
from mediatrim.logging.context import (
    TrimContextFilter,
    clear_trim_context,
    get_trim_context,
    set_trim_context,
    trim_context,
)
from mediatrim.logging.handlers import JSONFormatter

__all__ = [
    "JSONFormatter",
    "TrimContextFilter",
    "clear_trim_context",
    "configure_logging",
    "get_trim_context",
    "set_trim_context",
    "trim_context",
]
