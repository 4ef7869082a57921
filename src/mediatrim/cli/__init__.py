"""CLI module for mediatrim."""

import logging
from pathlib import Path

import click

from mediatrim import __version__

_logging_configured: bool = False

logger = logging.getLogger(__name__)


def _configure_logging(
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
    profile_name: str | None,
    profiles_path: Path | None,
) -> None:
    """Configure logging from CLI options.

    Args:
        log_level: Override log level (debug, info, warning, error).
        log_file: Override log file path.
        log_json: Use JSON log format.
        profile_name: Profile whose logging section is the base config.
        profiles_path: Profile document holding that profile.
    """
    global _logging_configured
    if _logging_configured:
        return

    from mediatrim.config.logging_factory import configure_logging_from_cli

    configure_logging_from_cli(
        profile_name=profile_name,
        profiles_path=profiles_path,
        level=log_level,
        file=log_file,
        format="json" if log_json else None,
    )
    _logging_configured = True


@click.group()
@click.version_option(version=__version__, prog_name="mediatrim")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.option(
    "--profile",
    "profile_name",
    default=None,
    help="Profile to apply (default: $MEDIATRIM_PROFILE or 'default').",
)
@click.option(
    "--profiles-file",
    "profiles_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Profile document (default: ~/.mediatrim/profiles.yaml).",
)
@click.pass_context
def main(
    ctx: click.Context,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
    profile_name: str | None,
    profiles_path: Path | None,
) -> None:
    """mediatrim - Cut a time range out of a media file with ffmpeg."""
    ctx.ensure_object(dict)
    ctx.obj["profile_name"] = profile_name
    ctx.obj["profiles_path"] = profiles_path

    _configure_logging(log_level, log_file, log_json, profile_name, profiles_path)
    logger.debug(
        "mediatrim %s starting: profile=%s, profiles_file=%s",
        __version__,
        profile_name or "(default)",
        profiles_path or "(default)",
    )


# Defer import to avoid circular dependency
def _register_commands():
    from mediatrim.cli.hooks import hooks_group
    from mediatrim.cli.profiles import profiles_group
    from mediatrim.cli.trim import trim_command, trim_snapshot_command

    main.add_command(trim_command)
    main.add_command(trim_snapshot_command)
    main.add_command(profiles_group)
    main.add_command(hooks_group)


_register_commands()
