"""Embedded font recovery for subtitle burn-in.

Styled subtitles often depend on fonts attached to the container. They are
located with an ffprobe query over attachment streams and dumped into a
directory handed to the subtitles filter.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from mediatrim.config.models import TrimOptions

from .runner import ProcessRunner

logger = logging.getLogger(__name__)

FONT_MIMETYPES = frozenset(
    {
        "application/x-truetype-font",
        "application/vnd.ms-opentype",
        "application/x-font-ttf",
    }
)


@dataclass(frozen=True)
class FontAttachment:
    """A font attachment stream in the input file."""

    index: int
    filename: str
    mimetype: str


def build_attachment_probe_command(
    options: TrimOptions, input_path: Path
) -> list[str]:
    """Build the ffprobe command listing attachment streams as JSON."""
    return [
        options.ffprobe,
        "-v",
        "error",
        "-select_streams",
        "t",
        "-show_entries",
        "stream=index:stream_tags=filename,mimetype",
        "-of",
        "json",
        str(input_path),
    ]


def parse_font_attachments(data: dict) -> list[FontAttachment]:
    """Extract font attachments from ffprobe JSON output.

    Streams without an index or filename, or whose mimetype is not a
    known font type, are skipped. Filenames are reduced to their final
    component so they cannot escape the fonts directory.
    """
    attachments: list[FontAttachment] = []
    for stream in data.get("streams") or []:
        if not isinstance(stream, dict):
            continue
        tags = stream.get("tags") or {}
        mimetype = str(tags.get("mimetype", "")).casefold()
        filename = Path(str(tags.get("filename", ""))).name
        index = stream.get("index")
        if mimetype not in FONT_MIMETYPES or not filename:
            continue
        if not isinstance(index, int):
            continue
        attachments.append(
            FontAttachment(index=index, filename=filename, mimetype=mimetype)
        )
    return attachments


def build_font_dump_command(
    options: TrimOptions,
    input_path: Path,
    attachments: list[FontAttachment],
    fonts_dir: Path,
) -> list[str]:
    """Build the ffmpeg command dumping attachments into fonts_dir.

    ffmpeg insists on an output file even when only dumping attachments,
    so a zero-length null output is added.
    """
    cmd = [options.ffmpeg, "-v", "error", "-y"]
    for attachment in attachments:
        cmd.extend(
            [
                f"-dump_attachment:{attachment.index}",
                str(fonts_dir / attachment.filename),
            ]
        )
    cmd.extend(["-i", str(input_path), "-t", "0", "-f", "null", "-"])
    return cmd


def recover_fonts(
    options: TrimOptions,
    runner: ProcessRunner,
    input_path: Path,
    fonts_dir: Path,
) -> bool:
    """Probe for font attachments and dump them into fonts_dir.

    Returns:
        True if at least one font was dumped. Any failure returns False;
        burn-in then proceeds without embedded fonts.
    """
    probe = runner.run(
        build_attachment_probe_command(options, input_path),
        label="ffprobe",
        stderr_is_error=True,
    )
    if not probe.success:
        logger.warning("Font probe failed, continuing without fonts: %s", probe.message)
        return False

    try:
        data = json.loads(probe.stdout or "{}")
    except json.JSONDecodeError as e:
        logger.warning("Invalid ffprobe output while probing fonts: %s", e)
        return False
    if not isinstance(data, dict):
        logger.warning("Unexpected ffprobe output while probing fonts")
        return False

    attachments = parse_font_attachments(data)
    if not attachments:
        logger.debug("No font attachments in %s", input_path)
        return False

    try:
        fonts_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.warning("Could not create fonts directory %s: %s", fonts_dir, e)
        return False

    dump = runner.run(
        build_font_dump_command(options, input_path, attachments, fonts_dir),
        label="ffmpeg",
        stderr_is_error=True,
    )
    if not dump.success:
        logger.warning("Font dump failed, continuing without fonts: %s", dump.message)
        return False

    logger.info("Recovered %d font(s) into %s", len(attachments), fonts_dir)
    return True
