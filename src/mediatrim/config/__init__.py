"""Configuration management for mediatrim.

Options are loaded with precedence handling:
1. CLI flags (highest priority)
2. Environment variables (MEDIATRIM_*)
3. Selected profile from the profile document (~/.mediatrim/profiles.yaml)
4. Default values (lowest priority)
"""

from mediatrim.config.loader import (
    clear_options_cache,
    get_data_dir,
    get_default_profiles_path,
    get_logging_config,
    get_options,
    resolve_options,
)
from mediatrim.config.logging_factory import (
    build_logging_config,
    configure_logging_from_cli,
)
from mediatrim.config.models import LoggingConfig, Profile, TrimOptions
from mediatrim.config.profiles import (
    ProfileError,
    ProfileNotFoundError,
    apply_profile,
    list_profiles,
    load_profile,
)

__all__ = [
    # Models
    "LoggingConfig",
    "Profile",
    "TrimOptions",
    # Loader
    "clear_options_cache",
    "get_data_dir",
    "get_default_profiles_path",
    "get_logging_config",
    "get_options",
    "resolve_options",
    # Profiles
    "ProfileError",
    "ProfileNotFoundError",
    "apply_profile",
    "list_profiles",
    "load_profile",
    # Logging
    "build_logging_config",
    "configure_logging_from_cli",
]
