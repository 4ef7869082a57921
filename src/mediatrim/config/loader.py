"""Option loader with precedence handling.

Options are resolved with the following precedence (highest to lowest):
1. CLI arguments (passed as overrides)
2. Environment variables (MEDIATRIM_*)
3. Selected profile from the profile document
4. Default values

Environment variables:
- MEDIATRIM_FFMPEG_PATH: Path to ffmpeg executable
- MEDIATRIM_FFPROBE_PATH: Path to ffprobe executable
- MEDIATRIM_PROFILES_PATH: Path to the profile document
- MEDIATRIM_PROFILE: Name of the profile to apply (default "default")
- MEDIATRIM_DATA_DIR: Path to the data directory (overrides ~/.mediatrim/)
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import replace
from pathlib import Path
from typing import Any

from mediatrim.config.models import LoggingConfig, Profile, TrimOptions
from mediatrim.config.profiles import (
    ProfileError,
    ProfileNotFoundError,
    apply_profile,
    load_profile,
    logging_config_from_profile,
)

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path.home() / ".mediatrim"
DEFAULT_PROFILE_NAME = "default"

# Cache of resolved options keyed by (profile, path, overrides)
_options_cache: dict[tuple, tuple[TrimOptions, LoggingConfig]] = {}
_options_cache_lock = threading.Lock()


def get_data_dir() -> Path:
    """Get the mediatrim data directory.

    Can be overridden by MEDIATRIM_DATA_DIR environment variable.

    Returns:
        Path to the data directory (~/.mediatrim/ by default).
    """
    env_path = os.environ.get("MEDIATRIM_DATA_DIR")
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_DATA_DIR


def get_default_profiles_path() -> Path:
    """Get the profile document path.

    Can be overridden by MEDIATRIM_PROFILES_PATH environment variable.
    """
    env_path = os.environ.get("MEDIATRIM_PROFILES_PATH")
    if env_path:
        return Path(env_path).expanduser()
    return get_data_dir() / "profiles.yaml"


def get_default_profile_name() -> str:
    """Get the profile name to apply when none is given on the CLI."""
    return os.environ.get("MEDIATRIM_PROFILE") or DEFAULT_PROFILE_NAME


def _env_overrides() -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    ffmpeg = os.environ.get("MEDIATRIM_FFMPEG_PATH")
    if ffmpeg:
        overrides["ffmpeg"] = ffmpeg
    ffprobe = os.environ.get("MEDIATRIM_FFPROBE_PATH")
    if ffprobe:
        overrides["ffprobe"] = ffprobe
    return overrides


def _load_profile_or_none(name: str, path: Path, explicit: bool) -> Profile | None:
    """Load a profile, downgrading every failure to "no profile"."""
    try:
        return load_profile(name, path)
    except ProfileNotFoundError:
        if explicit:
            logger.warning("Profile '%s' not found in %s, using defaults", name, path)
        else:
            logger.debug("No '%s' profile in %s, using defaults", name, path)
    except ProfileError as e:
        logger.warning("%s; using defaults", e)
    return None


def resolve_options(
    profile_name: str | None = None,
    profiles_path: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> tuple[TrimOptions, LoggingConfig]:
    """Resolve options and logging configuration without caching.

    Args:
        profile_name: Profile to apply. None uses MEDIATRIM_PROFILE or
            "default".
        profiles_path: Profile document. None uses the default location.
        overrides: CLI overrides; None values are ignored.

    Returns:
        Tuple of (TrimOptions, LoggingConfig).
    """
    explicit = profile_name is not None
    name = profile_name or get_default_profile_name()
    path = profiles_path or get_default_profiles_path()

    options = TrimOptions()
    logging_config = LoggingConfig()

    profile = _load_profile_or_none(name, path, explicit)
    if profile is not None:
        options = apply_profile(profile, options)
        logging_config = logging_config_from_profile(profile, logging_config)
        logger.debug("Applied profile '%s' from %s", name, path)

    env = _env_overrides()
    if env:
        options = replace(options, **env)

    cli = {k: v for k, v in (overrides or {}).items() if v is not None}
    if cli:
        options = replace(options, **cli)

    return options, logging_config


def get_options(
    profile_name: str | None = None,
    profiles_path: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> TrimOptions:
    """Get resolved options, cached for the lifetime of the process.

    Thread-safe: uses a lock to protect concurrent access to the cache.
    """
    return _get_cached(profile_name, profiles_path, overrides)[0]


def get_logging_config(
    profile_name: str | None = None,
    profiles_path: Path | None = None,
) -> LoggingConfig:
    """Get the logging configuration of the selected profile."""
    return _get_cached(profile_name, profiles_path, None)[1]


def _get_cached(
    profile_name: str | None,
    profiles_path: Path | None,
    overrides: dict[str, Any] | None,
) -> tuple[TrimOptions, LoggingConfig]:
    key = (
        profile_name,
        profiles_path,
        tuple(sorted((overrides or {}).items())),
    )
    with _options_cache_lock:
        if key not in _options_cache:
            _options_cache[key] = resolve_options(
                profile_name, profiles_path, overrides
            )
        return _options_cache[key]


def clear_options_cache() -> None:
    """Clear the resolved options cache. Primarily useful for testing."""
    with _options_cache_lock:
        _options_cache.clear()
