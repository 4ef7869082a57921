"""Configuration profile management.

A profile document is a YAML (or JSON) file mapping profile names to flat
option mappings::

    default:
      ext: webm
      size-hint: 1280:720
    gif:
      description: Small looping clips
      ext: gif
      size-hint: 480:270
      hooks: notify-send|Trimmed|<output>

Profile values are merged over the defaults without deep-merging. Keys may
be spelled with dashes or underscores.
"""

from __future__ import annotations

import logging
from dataclasses import fields, replace
from pathlib import Path
from typing import Any

import yaml

from mediatrim.config.models import LoggingConfig, Profile, TrimOptions

logger = logging.getLogger(__name__)

# Keys inside a profile that are not TrimOptions fields
_RESERVED_KEYS = frozenset({"description", "logging"})

_PATH_FIELDS = frozenset({"fonts_dir", "subs_dir", "output_dir", "log_dir"})
_BOOL_FIELDS = frozenset(
    {"overwrite", "burn_subtitles", "extract_fonts", "write_log"}
)
_INT_FIELDS = frozenset({"threads"})
# Fields a null profile value may clear; every other field needs a value
_NULLABLE_FIELDS = frozenset(
    {
        "video_codec",
        "audio_codec",
        "subtitle_codec",
        "video_bitrate",
        "audio_bitrate",
        "quality",
        "threads",
        "size_hint",
        "ext",
        "fallback_font",
    }
    | _PATH_FIELDS
)


class ProfileError(Exception):
    """Error loading or validating a profile."""

    pass


class ProfileNotFoundError(ProfileError):
    """Profile does not exist."""

    pass


def normalize_key(key: str) -> str:
    """Normalize an option key: ``size-hint`` -> ``size_hint``."""
    return str(key).strip().casefold().replace("-", "_")


def load_profile_document(path: Path) -> dict[str, Any]:
    """Load and parse the profile document.

    Args:
        path: Path to the YAML/JSON document.

    Returns:
        Mapping of profile name to raw profile mapping. Empty if the
        file does not exist.

    Raises:
        ProfileError: If the document is not valid YAML or not a mapping.
    """
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ProfileError(f"Invalid YAML in profile document {path}: {e}") from e
    except OSError as e:
        raise ProfileError(f"Cannot read profile document {path}: {e}") from e

    if not isinstance(data, dict):
        raise ProfileError(
            f"Profile document {path} must be a mapping of profile names, "
            f"got {type(data).__name__}"
        )
    return data


def list_profiles(path: Path) -> list[str]:
    """List profile names defined in the document.

    Raises:
        ProfileError: If the document cannot be parsed.
    """
    return sorted(str(name) for name in load_profile_document(path))


def load_profile(name: str, path: Path) -> Profile:
    """Load one named profile from the document.

    Args:
        name: Profile key.
        path: Path to the profile document.

    Returns:
        Parsed Profile.

    Raises:
        ProfileNotFoundError: If the document has no such profile.
        ProfileError: If the document or the profile is malformed.
    """
    document = load_profile_document(path)
    if name not in document:
        raise ProfileNotFoundError(f"Profile not found: {name}")

    raw = document[name] or {}
    if not isinstance(raw, dict):
        raise ProfileError(
            f"Profile '{name}' must be a mapping, got {type(raw).__name__}"
        )

    options: dict[str, Any] = {}
    logging_data: dict[str, Any] = {}
    description = None
    for key, value in raw.items():
        normalized = normalize_key(key)
        if normalized == "description":
            description = str(value) if value is not None else None
        elif normalized == "logging":
            if isinstance(value, dict):
                logging_data = {normalize_key(k): v for k, v in value.items()}
            else:
                logger.warning(
                    "Ignoring non-mapping 'logging' section in profile '%s'", name
                )
        else:
            options[normalized] = value

    return Profile(
        name=name,
        options=options,
        logging=logging_data,
        description=description,
    )


def _coerce(name: str, value: Any) -> Any:
    """Convert a raw profile value to the type of the TrimOptions field.

    Raises:
        ValueError: If the value cannot be converted.
    """
    if value is None:
        if name in _NULLABLE_FIELDS:
            return None
        raise ValueError("a value is required")
    if name in _PATH_FIELDS:
        return Path(str(value)).expanduser()
    if name in _BOOL_FIELDS:
        if isinstance(value, bool):
            return value
        text = str(value).casefold()
        if text in ("yes", "true", "1", "on"):
            return True
        if text in ("no", "false", "0", "off"):
            return False
        raise ValueError(f"expected a boolean, got {value!r}")
    if name in _INT_FIELDS:
        return int(value)
    return str(value)


def apply_profile(profile: Profile, base: TrimOptions) -> TrimOptions:
    """Shallow-merge a profile's options over a base TrimOptions.

    Unknown keys and values that cannot be converted are ignored with a
    warning.

    Args:
        profile: Profile to apply.
        base: Options to merge over.

    Returns:
        New TrimOptions with the profile values applied.
    """
    known = {f.name for f in fields(TrimOptions)}
    overrides: dict[str, Any] = {}

    for key, value in profile.options.items():
        if key in _RESERVED_KEYS:
            continue
        if key not in known:
            logger.warning(
                "Ignoring unknown key '%s' in profile '%s'", key, profile.name
            )
            continue
        try:
            overrides[key] = _coerce(key, value)
        except (TypeError, ValueError) as e:
            logger.warning(
                "Ignoring invalid value for '%s' in profile '%s': %s",
                key,
                profile.name,
                e,
            )

    return replace(base, **overrides)


def logging_config_from_profile(
    profile: Profile, base: LoggingConfig
) -> LoggingConfig:
    """Build a LoggingConfig from a profile's ``logging`` section.

    Invalid sections fall back to the base configuration.
    """
    if not profile.logging:
        return base

    known = {f.name for f in fields(LoggingConfig)}
    data = {k: v for k, v in profile.logging.items() if k in known}
    if "file" in data and data["file"] is not None:
        data["file"] = Path(str(data["file"])).expanduser()

    try:
        return replace(base, **data)
    except (TypeError, ValueError, AttributeError) as e:
        logger.warning(
            "Ignoring invalid 'logging' section in profile '%s': %s", profile.name, e
        )
        return base
