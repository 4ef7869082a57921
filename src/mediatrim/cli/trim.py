"""CLI commands that trim a media file."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from mediatrim.cli.exit_codes import ExitCode
from mediatrim.config import TrimOptions, get_options
from mediatrim.core.time_utils import parse_timestamp
from mediatrim.domain import HostState, TrackType, TrimMode
from mediatrim.executor import TrimExecutor
from mediatrim.introspector import (
    HostStateError,
    MediaIntrospectionError,
    load_host_snapshot,
    probe_host_state,
)

logger = logging.getLogger(__name__)

MESSAGE_PREFIX = "[mediatrim]"


def report(message: str) -> None:
    """Print a status message the way a player OSD would show it."""
    click.echo(f"{MESSAGE_PREFIX} {message}")


def _parse_time(
    ctx: click.Context, param: click.Parameter, value: str | None
) -> float | None:
    """Validate a --start/--end value.

    Raises:
        click.BadParameter: If the value is not seconds or [HH:]MM:SS[.fff].
    """
    if value is None:
        return None
    try:
        return parse_timestamp(value)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


def mode_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by every trim command."""
    decorators = [
        click.option(
            "--no-subs",
            is_flag=True,
            help="Drop subtitles from the output.",
        ),
        click.option(
            "--no-audio",
            is_flag=True,
            help="Drop audio from the output.",
        ),
        click.option(
            "--detached",
            is_flag=True,
            help="Start ffmpeg in the background and return immediately.",
        ),
        click.option(
            "--burn-subs/--no-burn-subs",
            "burn_subs",
            default=None,
            help="Burn text subtitles into the picture (default: from profile).",
        ),
        click.option(
            "--output-dir",
            type=click.Path(file_okay=False, path_type=Path),
            default=None,
            help="Write the output here instead of next to the input.",
        ),
        click.option(
            "--dry-run",
            is_flag=True,
            help="Print the ffmpeg command without running anything.",
        ),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


def _resolve_options(
    ctx: click.Context, burn_subs: bool | None, output_dir: Path | None
) -> TrimOptions:
    obj = ctx.obj or {}
    return get_options(
        obj.get("profile_name"),
        obj.get("profiles_path"),
        overrides={"burn_subtitles": burn_subs, "output_dir": output_dir},
    )


def _run_trim(
    ctx: click.Context,
    options: TrimOptions,
    host: HostState,
    mode: TrimMode,
    dry_run: bool,
) -> None:
    executor = TrimExecutor(options, report=report, dry_run=dry_run)
    result = executor.trim_loop(host, mode)
    if not result.success:
        ctx.exit(ExitCode.GENERAL_ERROR)


@click.command("trim")
@click.argument(
    "input_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--start",
    "-s",
    callback=_parse_time,
    default=None,
    help="Range start, in seconds or [HH:]MM:SS[.fff].",
)
@click.option(
    "--end",
    "-e",
    callback=_parse_time,
    default=None,
    help="Range end, in seconds or [HH:]MM:SS[.fff].",
)
@click.option(
    "--video-stream",
    type=int,
    default=None,
    help="Stream index of the video track (negative deselects video).",
)
@click.option(
    "--audio-stream",
    type=int,
    default=None,
    help="Stream index of the audio track (negative deselects audio).",
)
@click.option(
    "--subtitle-stream",
    type=int,
    default=None,
    help="Stream index of the subtitle track (negative deselects subtitles).",
)
@mode_options
@click.pass_context
def trim_command(
    ctx: click.Context,
    input_path: Path,
    start: float | None,
    end: float | None,
    video_stream: int | None,
    audio_stream: int | None,
    subtitle_stream: int | None,
    no_subs: bool,
    no_audio: bool,
    detached: bool,
    burn_subs: bool | None,
    output_dir: Path | None,
    dry_run: bool,
) -> None:
    """Trim INPUT_PATH between --start and --end.

    Tracks are selected the way a player would (default-flagged video
    and audio; subtitles only when default or forced) unless a stream
    index is given.

    Examples:

        # Trim the first half minute into a webm next to the input
        mediatrim trim movie.mkv --start 0 --end 30

        # Burn the second subtitle stream into the picture
        mediatrim trim movie.mkv -s 1:02:03 -e 1:02:30.5 \\
            --subtitle-stream 3 --burn-subs
    """
    options = _resolve_options(ctx, burn_subs, output_dir)
    selection = {
        TrackType.VIDEO: video_stream,
        TrackType.AUDIO: audio_stream,
        TrackType.SUBTITLE: subtitle_stream,
    }

    try:
        host = probe_host_state(
            input_path, options.ffprobe, selection, start=start, end=end
        )
    except MediaIntrospectionError as e:
        logger.error("Probe failed: %s", e)
        report(f"error: {e}")
        ctx.exit(ExitCode.GENERAL_ERROR)

    mode = TrimMode(no_subs=no_subs, no_audio=no_audio, detached=detached)
    _run_trim(ctx, options, host, mode, dry_run)


@click.command("trim-snapshot")
@click.argument(
    "snapshot_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@mode_options
@click.pass_context
def trim_snapshot_command(
    ctx: click.Context,
    snapshot_path: Path,
    no_subs: bool,
    no_audio: bool,
    detached: bool,
    burn_subs: bool | None,
    output_dir: Path | None,
    dry_run: bool,
) -> None:
    """Trim the A-B loop recorded in a player property snapshot.

    SNAPSHOT_PATH is a JSON document with the player's path, ab-loop-a,
    ab-loop-b, width, height, audio-params/channels and track-list
    properties.
    """
    options = _resolve_options(ctx, burn_subs, output_dir)

    try:
        host = load_host_snapshot(snapshot_path)
    except HostStateError as e:
        logger.error("Bad snapshot: %s", e)
        report(f"error: {e}")
        ctx.exit(ExitCode.GENERAL_ERROR)

    mode = TrimMode(no_subs=no_subs, no_audio=no_audio, detached=detached)
    _run_trim(ctx, options, host, mode, dry_run)
