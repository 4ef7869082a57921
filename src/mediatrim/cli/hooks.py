"""CLI commands for post-run hooks."""

from __future__ import annotations

import shlex
from pathlib import Path

import click

from mediatrim.cli.exit_codes import ExitCode
from mediatrim.config import get_options
from mediatrim.executor.hooks import HookSpecError, parse_hooks

SAMPLE_OUTPUT = "clip [0.000-5.000].webm"


@click.group("hooks")
def hooks_group() -> None:
    """Inspect the post-run hooks of the selected profile."""
    pass


@hooks_group.command("check")
@click.option(
    "--output",
    "sample_output",
    type=click.Path(path_type=Path),
    default=SAMPLE_OUTPUT,
    show_default=True,
    help="Path substituted for <output> in the preview.",
)
@click.pass_context
def check_hooks_cmd(ctx: click.Context, sample_output: Path) -> None:
    """Parse the configured hooks and show the commands they would run.

    Unlike a trim, which disables a malformed hook list with a warning,
    this command reports the problem and exits non-zero.
    """
    obj = ctx.obj or {}
    options = get_options(obj.get("profile_name"), obj.get("profiles_path"))

    try:
        hooks = parse_hooks(options.hooks)
    except HookSpecError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(ExitCode.HOOK_SPEC_ERROR)

    if not hooks:
        click.echo("No hooks configured.")
        return

    values = {"output": str(sample_output)}
    for position, hook in enumerate(hooks, start=1):
        args = hook.render(values)
        rendered = shlex.join(args) if args else "(empty command)"
        click.echo(f"{position}. {hook.label}: {rendered}")
