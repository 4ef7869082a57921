"""ffmpeg command assembly for trimming.

The argument vector is emitted in a fixed order: executable, overwrite
policy, verbosity, seek, input, duration, codec and quality flags, size,
maps (subtitle, audio, video), filters (video, audio, complex), output.
"""

from __future__ import annotations

import logging
from pathlib import Path

from mediatrim.config.models import TrimOptions
from mediatrim.core.time_utils import format_seconds
from mediatrim.domain import FILTER_ORDER, MAP_ORDER, FilterType, TrimValidationError

from .types import BuildContext

logger = logging.getLogger(__name__)

_FILTER_FLAGS: dict[FilterType, tuple[str, str]] = {
    FilterType.VIDEO: ("-filter:v", ","),
    FilterType.AUDIO: ("-filter:a", ","),
    FilterType.COMPLEX: ("-filter_complex", ";"),
}

DEFAULT_EXT = "mkv"


def resolve_extension(options: TrimOptions, input_path: Path) -> str:
    """Target extension: configured, else the input's, else mkv."""
    if options.ext:
        return options.ext.lstrip(".")
    return input_path.suffix.lstrip(".") or DEFAULT_EXT


def format_output_path(
    input_path: Path,
    start: float,
    end: float,
    ext: str,
    output_dir: Path | None = None,
) -> Path:
    """Derive the output file path for a trim.

    ``/media/Movie.mkv`` trimmed from 10 to 12.5 as webm becomes
    ``/media/Movie [10.000-12.500].webm``.
    """
    name = f"{input_path.stem} [{start:.3f}-{end:.3f}].{ext}"
    directory = output_dir if output_dir is not None else input_path.parent
    return directory / name


def build_codec_args(options: TrimOptions) -> list[str]:
    """Build codec, bitrate, quality and thread arguments that are set."""
    pairs = (
        ("-c:v", options.video_codec),
        ("-c:a", options.audio_codec),
        ("-c:s", options.subtitle_codec),
        ("-b:v", options.video_bitrate),
        ("-b:a", options.audio_bitrate),
        ("-crf", options.quality),
        ("-threads", options.threads),
    )
    args: list[str] = []
    for flag, value in pairs:
        if value is not None and value != "":
            args.extend([flag, str(value)])
    return args


def build_map_args(ctx: BuildContext) -> list[str]:
    """Build -map arguments in subtitle, audio, video order."""
    args: list[str] = []
    for track_type in MAP_ORDER:
        value = ctx.maps.get(track_type)
        if value:
            args.extend(["-map", value])
    args.extend(ctx.exclusions)
    return args


def build_filter_args(ctx: BuildContext) -> list[str]:
    """Build filter arguments in video, audio, complex order."""
    args: list[str] = []
    for filter_type in FILTER_ORDER:
        expressions = ctx.filters.get(filter_type) or []
        if expressions:
            flag, separator = _FILTER_FLAGS[filter_type]
            args.extend([flag, separator.join(expressions)])
    return args


def build_ffmpeg_command(ctx: BuildContext, options: TrimOptions) -> list[str]:
    """Build the ffmpeg argument vector for a trim.

    Args:
        ctx: Populated build context.
        options: Resolved options.

    Returns:
        List of command arguments, executable first.

    Raises:
        TrimValidationError: If the range is empty or inverted.
    """
    if ctx.end <= ctx.start:
        raise TrimValidationError("End time must be greater than start time.")

    cmd = [
        options.ffmpeg,
        "-y" if options.overwrite else "-n",
        "-v",
        options.loglevel,
        "-ss",
        format_seconds(ctx.start),
        "-i",
        str(ctx.input_path),
        "-t",
        format_seconds(ctx.duration),
    ]

    cmd.extend(build_codec_args(options))

    if ctx.size is not None:
        cmd.extend(["-s:v", str(ctx.size)])

    cmd.extend(build_map_args(ctx))
    cmd.extend(build_filter_args(ctx))
    cmd.append(str(ctx.output_path))

    logger.debug("Built ffmpeg command with %d arguments", len(cmd))
    return cmd
