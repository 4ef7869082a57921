"""Filter graph building and subtitle strategy selection.

Decides how the selected subtitle track reaches the output (overlay,
burn-in, passthrough or not at all), fills the build context's -map values
and per-type filter lists, and runs the intermediate subtitle extraction
needed for burn-in.
"""

from __future__ import annotations

import logging
from pathlib import Path

from mediatrim.config.models import TrimOptions
from mediatrim.core.time_utils import format_seconds
from mediatrim.domain import (
    FilterType,
    SubtitleStrategy,
    TrackInfo,
    TrackType,
    TrimMode,
)

from .fonts import recover_fonts
from .runner import ProcessRunner
from .types import BuildContext

logger = logging.getLogger(__name__)

# Bitmap subtitle codecs that must be composited with the overlay filter
PICTURE_SUBTITLE_CODECS = frozenset(
    {
        "hdmv_pgs_subtitle",
        "pgssub",
        "dvd_subtitle",
        "dvdsub",
        "dvb_subtitle",
        "dvbsub",
        "xsub",
    }
)

# Text subtitle codecs the subtitles filter can render
TEXT_SUBTITLE_CODECS = frozenset(
    {"subrip", "srt", "ass", "ssa", "webvtt", "vtt", "mov_text", "text"}
)

OVERLAY_LABEL = "[vsub]"

# libopus rejects the 5.1(side) layout; remapping to 5.1 is lossless
OPUS_CODECS = frozenset({"libopus", "opus"})
UNSUPPORTED_OPUS_LAYOUT = "5.1(side)"
CHANNEL_REMAP_FILTER = "channelmap=channel_layout=5.1"


def escape_filter_value(value: str) -> str:
    r"""Quote a value for use inside an ffmpeg filter graph.

    The value is wrapped in single quotes; backslashes and colons are
    escaped with a backslash. A single quote cannot be escaped inside a
    quoted string, so it is closed, emitted as ``\'`` and reopened.

    For example ``/subs/it's 1:2.ass`` becomes
    ``'/subs/it'\''s 1\:2.ass'``.
    """
    escaped = value.replace("\\", "\\\\").replace(":", "\\:")
    escaped = escaped.replace("'", "'\\''")
    return f"'{escaped}'"


def is_picture_subtitle(codec: str | None) -> bool:
    return codec is not None and codec.casefold() in PICTURE_SUBTITLE_CODECS


def is_text_subtitle(codec: str | None) -> bool:
    return codec is not None and codec.casefold() in TEXT_SUBTITLE_CODECS


def decide_subtitle_strategy(
    selected: dict[TrackType, TrackInfo],
    mode: TrimMode,
    burn_requested: bool,
) -> SubtitleStrategy:
    """Decide how the selected subtitle track is handled.

    Args:
        selected: Selected track per type.
        mode: Request mode flags.
        burn_requested: Whether text subtitles should be burned in.

    Returns:
        The first matching strategy: NONE, OVERLAY, BURN, PASSTHROUGH.
    """
    subtitle = selected.get(TrackType.SUBTITLE)
    if subtitle is None or mode.no_subs or TrackType.VIDEO not in selected:
        return SubtitleStrategy.NONE
    if is_picture_subtitle(subtitle.codec):
        return SubtitleStrategy.OVERLAY
    if burn_requested and is_text_subtitle(subtitle.codec):
        return SubtitleStrategy.BURN
    return SubtitleStrategy.PASSTHROUGH


def needs_channel_remap(
    options: TrimOptions, ext: str, channel_layout: str | None
) -> bool:
    """Check whether the 5.1(side) workaround for libopus applies.

    Applies only to that exact layout, and only when the audio codec is
    opus, or no audio codec is configured and the container is webm
    (whose default audio encoder is libopus).
    """
    if channel_layout != UNSUPPORTED_OPUS_LAYOUT:
        return False
    if options.audio_codec:
        return options.audio_codec.casefold() in OPUS_CODECS
    return ext.casefold() == "webm"


def stream_map(track: TrackInfo) -> str:
    return f"0:{track.index}"


def subtitle_file_path(options: TrimOptions, output_path: Path) -> Path:
    """Intermediate subtitle file for an output, next to it by default."""
    directory = options.subs_dir or output_path.parent
    return directory / f"{output_path.stem}.ass"


def fonts_dir_path(options: TrimOptions, output_path: Path) -> Path:
    """Fonts directory for an output, next to it by default."""
    directory = options.fonts_dir or output_path.parent
    return directory / f"{output_path.stem}.fonts"


def extraction_log_path(options: TrimOptions, subtitle_path: Path) -> Path:
    """Diagnostic log of the subtitle extraction, in log_dir if configured."""
    directory = options.log_dir or subtitle_path.parent
    return directory / f"{subtitle_path.name}.log"


def build_subtitle_extract_command(
    options: TrimOptions,
    ctx: BuildContext,
    subtitle: TrackInfo,
    subtitle_path: Path,
) -> list[str]:
    """Build the ffmpeg command extracting one subtitle stream.

    The extraction is trimmed to the same range as the main command, so
    subtitle timestamps line up with the trimmed video.
    """
    return [
        options.ffmpeg,
        "-y",
        "-v",
        options.loglevel,
        "-ss",
        format_seconds(ctx.start),
        "-i",
        str(ctx.input_path),
        "-t",
        format_seconds(ctx.duration),
        "-map",
        stream_map(subtitle),
        str(subtitle_path),
    ]


class FilterGraphBuilder:
    """Fills a BuildContext with -map values and filters.

    Subtitle handling is decided first since an overlay consumes the video
    track; audio and video follow.
    """

    def __init__(
        self,
        options: TrimOptions,
        runner: ProcessRunner | None = None,
        dry_run: bool = False,
    ) -> None:
        self.options = options
        self.runner = runner or ProcessRunner(options)
        self.dry_run = dry_run

    def build(
        self,
        ctx: BuildContext,
        selected: dict[TrackType, TrackInfo],
        mode: TrimMode,
        channel_layout: str | None = None,
        burn_subtitles: bool | None = None,
    ) -> BuildContext:
        """Populate maps and filters for one request.

        Args:
            ctx: Context to fill.
            selected: Selected track per type.
            mode: Request mode flags.
            channel_layout: Host-reported audio channel layout.
            burn_subtitles: Override options.burn_subtitles.

        Returns:
            The same context, for chaining.
        """
        burn = self.options.burn_subtitles if burn_subtitles is None else burn_subtitles
        strategy = decide_subtitle_strategy(selected, mode, burn)
        ctx.subtitle_strategy = strategy
        logger.debug("Subtitle strategy: %s", strategy.value)

        if strategy is SubtitleStrategy.OVERLAY:
            self._add_overlay(ctx, selected)
        elif strategy is SubtitleStrategy.BURN:
            self._add_burn_in(ctx, selected)
        elif strategy is SubtitleStrategy.PASSTHROUGH:
            ctx.set_map(TrackType.SUBTITLE, stream_map(selected[TrackType.SUBTITLE]))

        if mode.no_subs:
            ctx.exclusions.append("-sn")

        self._add_audio(ctx, selected, mode, channel_layout)

        video = selected.get(TrackType.VIDEO)
        if video is not None and not ctx.video_consumed:
            ctx.set_map(TrackType.VIDEO, stream_map(video))

        return ctx

    def _add_overlay(
        self, ctx: BuildContext, selected: dict[TrackType, TrackInfo]
    ) -> None:
        video = selected[TrackType.VIDEO]
        subtitle = selected[TrackType.SUBTITLE]
        ctx.add_filter(
            FilterType.COMPLEX,
            f"[{stream_map(video)}][{stream_map(subtitle)}]overlay{OVERLAY_LABEL}",
        )
        ctx.video_consumed = True
        ctx.set_map(TrackType.VIDEO, OVERLAY_LABEL)

    def _add_audio(
        self,
        ctx: BuildContext,
        selected: dict[TrackType, TrackInfo],
        mode: TrimMode,
        channel_layout: str | None,
    ) -> None:
        if mode.no_audio:
            ctx.exclusions.append("-an")
            return

        audio = selected.get(TrackType.AUDIO)
        if audio is None:
            return

        layout = channel_layout or audio.channel_layout
        if needs_channel_remap(self.options, ctx.ext, layout):
            logger.debug("Remapping %s audio to 5.1", layout)
            ctx.add_filter(FilterType.AUDIO, CHANNEL_REMAP_FILTER)
        ctx.set_map(TrackType.AUDIO, stream_map(audio))

    def _add_burn_in(
        self, ctx: BuildContext, selected: dict[TrackType, TrackInfo]
    ) -> None:
        """Extract the subtitle track and render it into the video.

        An extraction failure skips burn-in for this request and leaves a
        notice; it does not fail the trim.
        """
        subtitle = selected[TrackType.SUBTITLE]
        subtitle_path = subtitle_file_path(self.options, ctx.output_path)
        fonts_dir: Path | None = None

        if not self.dry_run:
            if not self._extract_subtitle(ctx, subtitle, subtitle_path):
                return
            if self.options.extract_fonts:
                candidate = fonts_dir_path(self.options, ctx.output_path)
                if recover_fonts(
                    self.options, self.runner, ctx.input_path, candidate
                ):
                    fonts_dir = candidate

        ctx.subtitle_path = subtitle_path
        ctx.fonts_dir = fonts_dir

        if ctx.size is not None and ctx.size_changed:
            ctx.add_filter(
                FilterType.VIDEO, f"scale={ctx.size.width}:{ctx.size.height}"
            )
        ctx.add_filter(
            FilterType.VIDEO, self._subtitles_filter(subtitle_path, fonts_dir)
        )

    def _extract_subtitle(
        self, ctx: BuildContext, subtitle: TrackInfo, subtitle_path: Path
    ) -> bool:
        try:
            subtitle_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            message = f"Subtitle extraction failed, not burning subtitles: {e}"
            logger.warning(message)
            ctx.notices.append(message)
            return False

        outcome = self.runner.run(
            build_subtitle_extract_command(self.options, ctx, subtitle, subtitle_path),
            output_path=subtitle_path,
            log_path=extraction_log_path(self.options, subtitle_path),
        )
        if outcome.log_error:
            ctx.notices.append(outcome.log_error)
        if not outcome.success:
            message = (
                f"Subtitle extraction failed, not burning subtitles: {outcome.message}"
            )
            logger.warning(message)
            ctx.notices.append(message)
            return False
        return True

    def _subtitles_filter(self, subtitle_path: Path, fonts_dir: Path | None) -> str:
        parts = [f"subtitles=filename={escape_filter_value(str(subtitle_path))}"]
        if fonts_dir is not None:
            parts.append(f"fontsdir={escape_filter_value(str(fonts_dir))}")
        elif self.options.fallback_font:
            parts.append(
                "force_style="
                + escape_filter_value(f"FontName={self.options.fallback_font}")
            )
        return ":".join(parts)
