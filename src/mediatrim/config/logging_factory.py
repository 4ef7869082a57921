"""Logging configuration factory.

This module provides a factory function for building LoggingConfig
instances with CLI overrides applied to a base configuration.
"""

from __future__ import annotations

from pathlib import Path

from mediatrim.config.models import LoggingConfig


def build_logging_config(
    base: LoggingConfig,
    *,
    level: str | None = None,
    file: Path | None = None,
    format: str | None = None,
    include_stderr: bool | None = None,
) -> LoggingConfig:
    """Build LoggingConfig by merging base config with CLI overrides.

    Args:
        base: Base logging configuration (typically from the profile).
        level: Override log level (debug, info, warning, error).
        file: Override log file path.
        format: Override log format (text, json).
        include_stderr: Override stderr inclusion.

    Returns:
        New LoggingConfig with overrides applied. Validation runs via
        LoggingConfig.__post_init__, so invalid values will raise ValueError.
    """
    return LoggingConfig(
        level=level if level is not None else base.level,
        file=file if file is not None else base.file,
        format=format if format is not None else base.format,
        include_stderr=(
            include_stderr if include_stderr is not None else base.include_stderr
        ),
        max_bytes=base.max_bytes,
        backup_count=base.backup_count,
    )


def configure_logging_from_cli(
    *,
    profile_name: str | None = None,
    profiles_path: Path | None = None,
    level: str | None = None,
    file: Path | None = None,
    format: str | None = None,
) -> None:
    """Configure logging with CLI overrides.

    Loads the selected profile's logging section, applies overrides, and
    configures logging.
    """
    from mediatrim.config.loader import get_logging_config
    from mediatrim.logging import configure_logging

    base = get_logging_config(profile_name, profiles_path)
    configure_logging(
        build_logging_config(base, level=level, file=file, format=format)
    )
