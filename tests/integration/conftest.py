"""Fixtures for CLI integration tests."""

import json
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest


class FakeProcesses:
    """Replaces subprocess.run and subprocess.Popen for the CLI.

    ffprobe invocations return the given probe data; every other command
    returns the next queued (stdout, stderr, returncode) result, or a
    silent success once the queue is empty.
    """

    def __init__(self, probe_data: dict) -> None:
        self.probe_data = probe_data
        self.results: list[tuple[str, str, int]] = []
        self.calls: list[list[str]] = []
        self.spawned: list[list[str]] = []

    def run(self, args, **kwargs):
        self.calls.append(list(args))
        if Path(args[0]).name == "ffprobe":
            return subprocess.CompletedProcess(
                args, 0, json.dumps(self.probe_data), ""
            )
        stdout, stderr, returncode = (
            self.results.pop(0) if self.results else ("", "", 0)
        )
        return subprocess.CompletedProcess(args, returncode, stdout, stderr)

    def popen(self, args, **kwargs):
        self.spawned.append(list(args))

        class _Process:
            pid = 9999

        return _Process()

    def commands(self, name: str) -> list[list[str]]:
        return [c for c in self.calls if Path(c[0]).name == name]


@pytest.fixture
def fake_processes(ffprobe_fixture, monkeypatch):
    """Patch process creation; probe data defaults to movie_pgs."""
    monkeypatch.setattr("mediatrim.cli._logging_configured", True)
    fake = FakeProcesses(ffprobe_fixture("movie_pgs"))
    with (
        patch("mediatrim.core.subprocess_utils.subprocess.run", side_effect=fake.run),
        patch(
            "mediatrim.core.subprocess_utils.subprocess.Popen",
            side_effect=fake.popen,
        ),
    ):
        yield fake


@pytest.fixture
def media_file(temp_dir: Path) -> Path:
    """An (empty) input file the CLI can point at."""
    path = temp_dir / "movie.mkv"
    path.write_bytes(b"")
    return path
