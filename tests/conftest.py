"""Shared test fixtures for mediatrim."""

import json
import logging
import shutil
import tempfile
from pathlib import Path

import pytest

from mediatrim.config import TrimOptions, clear_options_cache
from mediatrim.domain import HostState, TrackInfo
from mediatrim.logging import TrimContextFilter

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path_factory, monkeypatch):
    """Keep tests away from the user's profiles and environment."""
    data_dir = tmp_path_factory.mktemp("mediatrim-data")
    monkeypatch.setenv("MEDIATRIM_DATA_DIR", str(data_dir))
    for name in (
        "MEDIATRIM_FFMPEG_PATH",
        "MEDIATRIM_FFPROBE_PATH",
        "MEDIATRIM_PROFILES_PATH",
        "MEDIATRIM_PROFILE",
    ):
        monkeypatch.delenv(name, raising=False)
    clear_options_cache()

    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if any(isinstance(f, TrimContextFilter) for f in handler.filters):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
    clear_options_cache()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test isolation."""
    dir_path = tempfile.mkdtemp()
    yield Path(dir_path)
    shutil.rmtree(dir_path, ignore_errors=True)


@pytest.fixture
def options() -> TrimOptions:
    """Default options."""
    return TrimOptions()


@pytest.fixture
def ffprobe_fixtures_dir() -> Path:
    """Return the path to the ffprobe fixtures directory."""
    return FIXTURES_DIR / "ffprobe"


@pytest.fixture
def snapshot_fixtures_dir() -> Path:
    """Return the path to the player snapshot fixtures directory."""
    return FIXTURES_DIR / "snapshots"


def load_ffprobe_fixture(name: str) -> dict:
    """Load an ffprobe JSON fixture by name.

    Args:
        name: Name of the fixture file (without .json extension).

    Returns:
        Parsed JSON data from the fixture.
    """
    fixture_path = FIXTURES_DIR / "ffprobe" / f"{name}.json"
    return json.loads(fixture_path.read_text())


@pytest.fixture
def ffprobe_fixture():
    """The load_ffprobe_fixture helper."""
    return load_ffprobe_fixture


class RecordingRun:
    """Stand-in for run_command that records calls and replays results.

    Each call pops the next queued result; once the queue is empty the
    default result is returned. A queued exception instance is raised.
    """

    def __init__(self, *results, default=("", "", 0)):
        self.calls: list[list[str]] = []
        self._results = list(results)
        self._default = default

    def __call__(self, args, **kwargs):
        self.calls.append([str(a) for a in args])
        result = self._results.pop(0) if self._results else self._default
        if isinstance(result, BaseException):
            raise result
        return result


@pytest.fixture
def run_factory() -> type[RecordingRun]:
    """The RecordingRun class, for tests that queue results."""
    return RecordingRun


@pytest.fixture
def recording_run() -> RecordingRun:
    """A run function that always succeeds silently."""
    return RecordingRun()


def make_host(
    *tracks: TrackInfo,
    path: str = "/media/movie.mkv",
    start: float | None = 10.0,
    end: float | None = 15.0,
    width: int | None = 1920,
    height: int | None = 1080,
    channel_layout: str | None = "stereo",
) -> HostState:
    """Build a HostState with sensible defaults."""
    return HostState(
        path=Path(path),
        tracks=tracks,
        loop_start=start,
        loop_end=end,
        width=width,
        height=height,
        channel_layout=channel_layout,
    )


@pytest.fixture
def host_factory():
    """The make_host helper."""
    return make_host
