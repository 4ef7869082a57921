"""Integration tests for the trim and trim-snapshot commands."""

import shlex
from pathlib import Path

import pytest
from click.testing import CliRunner

from mediatrim.cli import main

PREFIX = "[mediatrim] "


def _messages(output: str) -> list[str]:
    return [
        line[len(PREFIX) :] for line in output.splitlines() if line.startswith(PREFIX)
    ]


def _printed_command(output: str) -> list[str]:
    (line,) = [m for m in _messages(output) if m.startswith("ffmpeg ")]
    return shlex.split(line)


class TestTrimCommand:
    """Tests for mediatrim trim."""

    def test_dry_run_prints_command(self, fake_processes, media_file: Path) -> None:
        """Overlay, channel remap and size cap all reach the command."""
        result = CliRunner().invoke(
            main, ["trim", str(media_file), "-s", "10", "-e", "15", "--dry-run"]
        )

        assert result.exit_code == 0, result.output
        output = media_file.parent / "movie [10.000-15.000].webm"
        assert _printed_command(result.output) == [
            "ffmpeg",
            "-n",
            "-v",
            "error",
            "-ss",
            "10",
            "-i",
            str(media_file),
            "-t",
            "5",
            "-b:v",
            "1M",
            "-s:v",
            "1280x720",
            "-map",
            "0:1",
            "-map",
            "[vsub]",
            "-filter:a",
            "channelmap=channel_layout=5.1",
            "-filter_complex",
            "[0:0][0:3]overlay[vsub]",
            str(output),
        ]
        assert fake_processes.commands("ffmpeg") == []
        assert fake_processes.spawned == []

    def test_clock_timestamps(self, fake_processes, media_file: Path) -> None:
        result = CliRunner().invoke(
            main,
            ["trim", str(media_file), "-s", "1:00", "-e", "1:02.5", "--dry-run"],
        )

        assert result.exit_code == 0, result.output
        cmd = _printed_command(result.output)
        assert cmd[cmd.index("-ss") + 1] == "60"
        assert cmd[cmd.index("-t") + 1] == "2.5"

    def test_successful_trim(self, fake_processes, media_file: Path) -> None:
        result = CliRunner().invoke(
            main, ["trim", str(media_file), "-s", "0", "-e", "5"]
        )

        assert result.exit_code == 0, result.output
        messages = _messages(result.output)
        assert messages[0] == "Running... [-no-subs] [-no-audio] [-detached]"
        output = media_file.parent / "movie [0.000-5.000].webm"
        assert messages[1].startswith(f"Output: {output} (")
        assert len(fake_processes.commands("ffmpeg")) == 1

    def test_end_before_start_rejected(self, fake_processes, media_file: Path) -> None:
        result = CliRunner().invoke(
            main, ["trim", str(media_file), "--start", "10", "--end", "5"]
        )

        assert result.exit_code == 1
        assert _messages(result.output) == [
            "End time must be greater than start time."
        ]
        assert fake_processes.commands("ffmpeg") == []

    def test_missing_range(self, fake_processes, media_file: Path) -> None:
        result = CliRunner().invoke(main, ["trim", str(media_file), "--end", "5"])

        assert result.exit_code == 1
        assert _messages(result.output) == ["A-B loop not defined."]

    @pytest.mark.parametrize("value", ["soon", "inf"])
    def test_invalid_timestamp(
        self, fake_processes, media_file: Path, value: str
    ) -> None:
        result = CliRunner().invoke(
            main, ["trim", str(media_file), "--start", "0", "--end", value]
        )

        assert result.exit_code == 2
        assert "Invalid timestamp" in result.output
        assert fake_processes.calls == []

    def test_missing_input(self, fake_processes, temp_dir: Path) -> None:
        result = CliRunner().invoke(
            main, ["trim", str(temp_dir / "nope.mkv"), "-s", "0", "-e", "1"]
        )
        assert result.exit_code == 2

    def test_transcoder_failure(self, fake_processes, media_file: Path) -> None:
        fake_processes.results.append(("", "Conversion failed!", 1))

        result = CliRunner().invoke(
            main, ["trim", str(media_file), "-s", "0", "-e", "5"]
        )

        assert result.exit_code == 1
        assert "ffmpeg error: Conversion failed!" in _messages(result.output)

    def test_probe_failure(self, fake_processes, media_file: Path) -> None:
        fake_processes.probe_data = []

        result = CliRunner().invoke(
            main, ["trim", str(media_file), "-s", "0", "-e", "5"]
        )

        assert result.exit_code == 1
        assert _messages(result.output)[0].startswith("error: Missing 'streams'")

    def test_mode_flags(self, fake_processes, media_file: Path) -> None:
        result = CliRunner().invoke(
            main,
            [
                "trim",
                str(media_file),
                "-s",
                "0",
                "-e",
                "5",
                "--no-subs",
                "--no-audio",
                "--dry-run",
            ],
        )

        cmd = _printed_command(result.output)
        assert cmd[cmd.index("-map") : cmd.index("-map") + 4] == [
            "-map",
            "0:0",
            "-sn",
            "-an",
        ]
        assert "-filter_complex" not in cmd

    def test_stream_selection(self, fake_processes, media_file: Path) -> None:
        result = CliRunner().invoke(
            main,
            [
                "trim",
                str(media_file),
                "-s",
                "0",
                "-e",
                "5",
                "--audio-stream",
                "2",
                "--subtitle-stream",
                "-1",
                "--dry-run",
            ],
        )

        cmd = _printed_command(result.output)
        maps = [cmd[i + 1] for i, arg in enumerate(cmd) if arg == "-map"]
        assert maps == ["0:2", "0:0"]
        assert "-filter:a" not in cmd

    def test_detached(self, fake_processes, media_file: Path) -> None:
        result = CliRunner().invoke(
            main, ["trim", str(media_file), "-s", "0", "-e", "5", "--detached"]
        )

        assert result.exit_code == 0, result.output
        assert len(fake_processes.spawned) == 1
        assert fake_processes.commands("ffmpeg") == []
        messages = _messages(result.output)
        assert messages[0].endswith("[+detached]")
        assert messages[1].startswith("Running ffmpeg detached. Output: ")

    def test_output_dir(self, fake_processes, media_file: Path, temp_dir) -> None:
        out_dir = temp_dir / "clips"

        result = CliRunner().invoke(
            main,
            [
                "trim",
                str(media_file),
                "-s",
                "0",
                "-e",
                "5",
                "--output-dir",
                str(out_dir),
                "--dry-run",
            ],
        )

        cmd = _printed_command(result.output)
        assert cmd[-1] == str(out_dir / "movie [0.000-5.000].webm")


class TestProfilesAndHooks:
    """Tests for profile-driven trims."""

    def test_profile_options_and_hooks(
        self, fake_processes, media_file: Path, temp_dir: Path
    ) -> None:
        profiles = temp_dir / "profiles.yaml"
        profiles.write_text(
            "clips:\n"
            "  ext: mp4\n"
            "  size-hint: null\n"
            "  hooks: notify|<output>;echo|${output}\n"
        )
        fake_processes.results.extend(
            [("", "", 0), ("", "notify: not found", 127), ("done\n", "", 0)]
        )

        result = CliRunner().invoke(
            main,
            [
                "--profiles-file",
                str(profiles),
                "--profile",
                "clips",
                "trim",
                str(media_file),
                "-s",
                "0",
                "-e",
                "5",
            ],
        )

        assert result.exit_code == 0, result.output
        output = str(media_file.parent / "movie [0.000-5.000].mp4")
        (ffmpeg_cmd,) = fake_processes.commands("ffmpeg")
        assert ffmpeg_cmd[-1] == output
        assert "-s:v" not in ffmpeg_cmd
        assert fake_processes.commands("notify") == [["notify", output]]
        assert fake_processes.commands("echo") == [["echo", output]]
        messages = _messages(result.output)
        assert messages[-2:] == ["notify: notify: not found", "echo: done"]

    def test_burn_subs_flag(self, fake_processes, ffprobe_fixture, media_file) -> None:
        """Text subtitles are extracted and burned when requested."""
        fake_processes.probe_data = ffprobe_fixture("episode_ass")

        result = CliRunner().invoke(
            main,
            [
                "trim",
                str(media_file),
                "-s",
                "0",
                "-e",
                "5",
                "--subtitle-stream",
                "2",
                "--burn-subs",
            ],
        )

        assert result.exit_code == 0, result.output
        extract, transcode = fake_processes.commands("ffmpeg")
        sub_path = media_file.parent / "movie [0.000-5.000].ass"
        assert extract[-3:] == ["-map", "0:2", str(sub_path)]
        vf = transcode[transcode.index("-filter:v") + 1]
        assert vf == f"scale=1488:620,subtitles=filename='{sub_path}'"
        assert "0:2" not in transcode


class TestTrimSnapshotCommand:
    """Tests for mediatrim trim-snapshot."""

    def test_snapshot_dry_run(self, fake_processes, snapshot_fixtures_dir) -> None:
        result = CliRunner().invoke(
            main,
            ["trim-snapshot", str(snapshot_fixtures_dir / "ab_loop.json"), "--dry-run"],
        )

        assert result.exit_code == 0, result.output
        assert _printed_command(result.output) == [
            "ffmpeg",
            "-n",
            "-v",
            "error",
            "-ss",
            "61.5",
            "-i",
            "/media/anime/episode.mkv",
            "-t",
            "13.75",
            "-b:v",
            "1M",
            "-s:v",
            "1280x720",
            "-map",
            "0:3",
            "-map",
            "0:1",
            "-map",
            "0:0",
            "/media/anime/episode [61.500-75.250].webm",
        ]
        assert fake_processes.calls == []

    def test_snapshot_without_loop(self, fake_processes, snapshot_fixtures_dir) -> None:
        result = CliRunner().invoke(
            main, ["trim-snapshot", str(snapshot_fixtures_dir / "no_loop.json")]
        )

        assert result.exit_code == 1
        assert _messages(result.output) == ["A-B loop not defined."]

    def test_malformed_snapshot(self, fake_processes, temp_dir: Path) -> None:
        path = temp_dir / "snap.json"
        path.write_text('{"ab-loop-a": 1}')

        result = CliRunner().invoke(main, ["trim-snapshot", str(path)])

        assert result.exit_code == 1
        assert _messages(result.output) == ["error: Host snapshot has no 'path'"]
