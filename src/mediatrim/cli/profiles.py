"""CLI commands for inspecting the profile document."""

from __future__ import annotations

import json
from pathlib import Path

import click

from mediatrim.cli.exit_codes import ExitCode
from mediatrim.config import (
    ProfileError,
    ProfileNotFoundError,
    apply_profile,
    get_default_profiles_path,
    list_profiles,
    load_profile,
)
from mediatrim.config.models import TrimOptions


def _profiles_path(ctx: click.Context) -> Path:
    obj = ctx.obj or {}
    return obj.get("profiles_path") or get_default_profiles_path()


@click.group("profiles")
def profiles_group() -> None:
    """Inspect the option profiles in the profile document."""
    pass


@profiles_group.command("list")
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    help="Output in JSON format.",
)
@click.pass_context
def list_profiles_cmd(ctx: click.Context, json_output: bool) -> None:
    """List profiles defined in the profile document.

    Examples:

        # List all profiles
        mediatrim profiles list

        # Output as JSON
        mediatrim profiles list --json
    """
    path = _profiles_path(ctx)
    try:
        names = list_profiles(path)
    except ProfileError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(ExitCode.CONFIG_ERROR)

    rows = []
    for name in names:
        try:
            profile = load_profile(name, path)
            rows.append({"name": name, "description": profile.description})
        except ProfileError as e:
            rows.append({"name": name, "description": f"(error: {e})"})

    if json_output:
        click.echo(json.dumps(rows, indent=2))
        return

    if not rows:
        click.echo(f"No profiles found in {path}")
        click.echo("\nTo create one, add a top-level mapping to that file.")
        click.echo("Example:\n\n  default:\n    size-hint: 1920:1080\n    ext: mp4")
        return

    click.echo(f"{'NAME':<20} {'DESCRIPTION':<50}")
    click.echo("-" * 71)
    for row in rows:
        desc = row["description"] or "-"
        click.echo(f"{row['name']:<20} {desc[:50]:<50}")


@profiles_group.command("show")
@click.argument("name")
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    help="Output in JSON format.",
)
@click.pass_context
def show_profile_cmd(ctx: click.Context, name: str, json_output: bool) -> None:
    """Show a profile's settings and the options it resolves to.

    Examples:

        mediatrim profiles show default
    """
    path = _profiles_path(ctx)
    try:
        profile = load_profile(name, path)
    except ProfileNotFoundError:
        click.echo(f"Error: Profile '{name}' not found in {path}", err=True)
        ctx.exit(ExitCode.PROFILE_NOT_FOUND)
    except ProfileError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(ExitCode.CONFIG_ERROR)

    if json_output:
        data = {
            "name": profile.name,
            "description": profile.description,
            "settings": {k: _jsonable(v) for k, v in profile.options.items()},
            "logging": {k: _jsonable(v) for k, v in profile.logging.items()},
        }
        click.echo(json.dumps(data, indent=2))
        return

    click.echo(f"Profile: {profile.name}")
    if profile.description:
        click.echo(f"Description: {profile.description}")
    click.echo("")
    click.echo("Settings:")
    if not profile.options:
        click.echo("  (none)")
    for key in sorted(profile.options):
        click.echo(f"  {key}: {profile.options[key]}")
    if profile.logging:
        click.echo("")
        click.echo("Logging:")
        for key in sorted(profile.logging):
            click.echo(f"  {key}: {profile.logging[key]}")

    options = apply_profile(profile, TrimOptions())
    click.echo("")
    click.echo("Effective:")
    click.echo(f"  size_hint: {options.size_hint or '-'}")
    click.echo(f"  ext: {options.ext or '(input extension)'}")
    click.echo(f"  burn_subtitles: {options.burn_subtitles}")


def _jsonable(value: object) -> object:
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return str(value)
