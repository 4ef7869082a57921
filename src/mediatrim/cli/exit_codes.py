"""Exit codes for mediatrim CLI commands.

Exit code ranges:
    0: Success
    1-9: General errors (a failed or rejected trim is 1)
    10-19: Configuration errors
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for mediatrim CLI commands."""

    SUCCESS = 0

    # General errors (1-9)
    GENERAL_ERROR = 1

    # Configuration errors (10-19)
    CONFIG_ERROR = 11
    PROFILE_NOT_FOUND = 12
    HOOK_SPEC_ERROR = 13
