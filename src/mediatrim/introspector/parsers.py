"""Pure parsing functions for host-reported state.

These functions turn ffprobe JSON output and media player property
snapshots into HostState records. All functions are pure (no I/O) for
easy testing.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from pathlib import Path
from typing import Any

from mediatrim.domain import HostState, TrackInfo, TrackType

from .interface import HostStateError

logger = logging.getLogger(__name__)

_FFPROBE_TYPES: dict[str, TrackType] = {
    "video": TrackType.VIDEO,
    "audio": TrackType.AUDIO,
    "subtitle": TrackType.SUBTITLE,
}

# Player track-list type names
_SNAPSHOT_TYPES: dict[str, TrackType] = {
    "video": TrackType.VIDEO,
    "audio": TrackType.AUDIO,
    "sub": TrackType.SUBTITLE,
    "subtitle": TrackType.SUBTITLE,
}

# Cover art is reported as a video stream but is not a video track
_ATTACHED_PIC = "attached_pic"


def _optional_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _optional_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    return result if math.isfinite(result) else None


def parse_ffprobe_stream(stream: dict) -> TrackInfo | None:
    """Parse one ffprobe stream into an unselected TrackInfo.

    Returns:
        TrackInfo, or None for streams that are not video, audio or
        subtitle tracks (attachments, data, cover art).
    """
    track_type = _FFPROBE_TYPES.get(str(stream.get("codec_type", "")))
    if track_type is None:
        return None

    disposition = stream.get("disposition") or {}
    if track_type is TrackType.VIDEO and disposition.get(_ATTACHED_PIC) == 1:
        return None

    index = _optional_int(stream.get("index"))
    if index is None:
        return None

    tags = stream.get("tags") or {}
    return TrackInfo(
        index=index,
        track_type=track_type,
        codec=stream.get("codec_name"),
        language=tags.get("language"),
        title=tags.get("title"),
        is_default=disposition.get("default") == 1,
        is_forced=disposition.get("forced") == 1,
        channel_layout=stream.get("channel_layout"),
        width=_optional_int(stream.get("width")),
        height=_optional_int(stream.get("height")),
    )


def _default_selection(tracks: list[TrackInfo], track_type: TrackType) -> int | None:
    """Pick the stream a player would select by default for a type."""
    candidates = [t for t in tracks if t.track_type is track_type]
    if not candidates:
        return None
    if track_type is TrackType.SUBTITLE:
        flagged = [t for t in candidates if t.is_default or t.is_forced]
        return flagged[0].index if flagged else None
    flagged = [t for t in candidates if t.is_default]
    return (flagged or candidates)[0].index


def parse_ffprobe_output(
    path: Path,
    data: dict,
    selection: dict[TrackType, int | None] | None = None,
    start: float | None = None,
    end: float | None = None,
) -> HostState:
    """Build a HostState from ffprobe JSON output.

    Args:
        path: Probed file.
        data: Parsed ffprobe JSON (``-show_streams -show_format``).
        selection: Explicit stream index per type. A negative index
            deselects the type; missing types use the default selection.
        start: Trim start, if known.
        end: Trim end, if known.

    Returns:
        HostState with one selected track per type at most.
    """
    tracks = [
        track
        for track in (parse_ffprobe_stream(s) for s in data.get("streams") or [])
        if track is not None
    ]

    chosen: dict[TrackType, int | None] = {}
    for track_type in TrackType:
        explicit = (selection or {}).get(track_type)
        if explicit is None:
            chosen[track_type] = _default_selection(tracks, track_type)
        elif explicit < 0:
            chosen[track_type] = None
        else:
            if not any(
                t.index == explicit and t.track_type is track_type for t in tracks
            ):
                logger.warning(
                    "No %s stream with index %d in %s",
                    track_type.value,
                    explicit,
                    path,
                )
            chosen[track_type] = explicit

    selected_tracks = tuple(
        replace(t, selected=chosen.get(t.track_type) == t.index) for t in tracks
    )

    video = next(
        (t for t in selected_tracks if t.selected and t.track_type is TrackType.VIDEO),
        None,
    )
    audio = next(
        (t for t in selected_tracks if t.selected and t.track_type is TrackType.AUDIO),
        None,
    )

    return HostState(
        path=path,
        tracks=selected_tracks,
        loop_start=start,
        loop_end=end,
        width=video.width if video else None,
        height=video.height if video else None,
        channel_layout=audio.channel_layout if audio else None,
    )


def parse_snapshot_track(entry: dict) -> TrackInfo | None:
    """Parse one entry of a player's track-list property."""
    track_type = _SNAPSHOT_TYPES.get(str(entry.get("type", "")))
    if track_type is None:
        return None

    index = _optional_int(entry.get("ff-index"))
    if index is None:
        logger.debug("Skipping track without ff-index: %s", entry)
        return None

    return TrackInfo(
        index=index,
        track_type=track_type,
        codec=entry.get("codec"),
        selected=bool(entry.get("selected", False)),
        language=entry.get("lang"),
        title=entry.get("title"),
        is_default=bool(entry.get("default", False)),
        is_forced=bool(entry.get("forced", False)),
        channel_layout=entry.get("demux-channels"),
        width=_optional_int(entry.get("demux-w")),
        height=_optional_int(entry.get("demux-h")),
    )


def parse_host_snapshot(data: Any) -> HostState:
    """Build a HostState from a player property snapshot.

    Expected keys: ``path``, ``ab-loop-a``, ``ab-loop-b``, ``width``,
    ``height``, ``audio-params/channels`` and ``track-list``.

    Raises:
        HostStateError: If the snapshot is not a mapping or has no path.
    """
    if not isinstance(data, dict):
        raise HostStateError(
            f"Host snapshot must be a mapping, got {type(data).__name__}"
        )

    path = data.get("path")
    if not path or not isinstance(path, str):
        raise HostStateError("Host snapshot has no 'path'")

    track_list = data.get("track-list") or []
    if not isinstance(track_list, list):
        raise HostStateError("Host snapshot 'track-list' must be a list")

    tracks = tuple(
        track
        for track in (
            parse_snapshot_track(e) for e in track_list if isinstance(e, dict)
        )
        if track is not None
    )

    return HostState(
        path=Path(path),
        tracks=tracks,
        loop_start=_optional_float(data.get("ab-loop-a")),
        loop_end=_optional_float(data.get("ab-loop-b")),
        width=_optional_int(data.get("width")),
        height=_optional_int(data.get("height")),
        channel_layout=data.get("audio-params/channels"),
    )
