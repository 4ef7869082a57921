"""Host adapters backed by ffprobe and by player snapshots."""

from __future__ import annotations

import json
import logging
import subprocess  # nosec B404 - only for TimeoutExpired
from pathlib import Path

from mediatrim.core.subprocess_utils import run_command
from mediatrim.domain import HostState, TrackType

from .interface import HostStateError, MediaIntrospectionError
from .parsers import parse_ffprobe_output, parse_host_snapshot

logger = logging.getLogger(__name__)


class FFprobeIntrospector:
    """Builds HostState records by probing files with ffprobe."""

    def __init__(self, ffprobe_path: str = "ffprobe") -> None:
        self._ffprobe_path = ffprobe_path

    def get_host_state(
        self,
        path: Path,
        selection: dict[TrackType, int | None] | None = None,
        start: float | None = None,
        end: float | None = None,
    ) -> HostState:
        """Probe a file and select tracks the way a player would.

        Raises:
            MediaIntrospectionError: If the file cannot be probed.
        """
        if not path.exists():
            raise MediaIntrospectionError(f"File not found: {path}")

        data = self._run_ffprobe(path)
        return parse_ffprobe_output(path, data, selection, start, end)

    def _run_ffprobe(self, path: Path) -> dict:
        args = [
            self._ffprobe_path,
            "-v",
            "error",
            "-print_format",
            "json",
            "-show_streams",
            "-show_format",
            str(path),
        ]
        try:
            stdout, stderr, returncode = run_command(args, timeout=60)
        except subprocess.TimeoutExpired as e:
            raise MediaIntrospectionError(
                f"ffprobe timed out for {path} after {e.timeout}s"
            ) from e
        except OSError as e:
            raise MediaIntrospectionError(f"Cannot run ffprobe: {e}") from e

        if returncode != 0:
            raise MediaIntrospectionError(
                f"ffprobe failed for {path}: {stderr.strip() or returncode}"
            )

        try:
            data = json.loads(stdout)
        except json.JSONDecodeError as e:
            raise MediaIntrospectionError(
                f"Invalid ffprobe output for {path}: {e}"
            ) from e

        if not isinstance(data, dict) or "streams" not in data:
            raise MediaIntrospectionError(
                f"Missing 'streams' in ffprobe output for {path}. "
                "File may be corrupted or not a valid media file."
            )
        return data


def probe_host_state(
    path: Path,
    ffprobe_path: str = "ffprobe",
    selection: dict[TrackType, int | None] | None = None,
    start: float | None = None,
    end: float | None = None,
) -> HostState:
    """Probe a file into a HostState with player-like default selection."""
    return FFprobeIntrospector(ffprobe_path).get_host_state(
        path, selection, start, end
    )


def load_host_snapshot(snapshot_path: Path) -> HostState:
    """Load a player property snapshot from a JSON file.

    Raises:
        HostStateError: If the file cannot be read or is malformed.
    """
    try:
        data = json.loads(snapshot_path.read_text(encoding="utf-8"))
    except OSError as e:
        raise HostStateError(f"Cannot read host snapshot {snapshot_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise HostStateError(f"Invalid host snapshot {snapshot_path}: {e}") from e

    state = parse_host_snapshot(data)
    logger.debug("Loaded host snapshot for %s", state.path)
    return state
