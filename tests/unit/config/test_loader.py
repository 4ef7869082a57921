"""Tests for option resolution and precedence."""

from pathlib import Path

import pytest

from mediatrim.config import (
    TrimOptions,
    clear_options_cache,
    get_data_dir,
    get_default_profiles_path,
    get_logging_config,
    get_options,
    resolve_options,
)
from mediatrim.config.loader import get_default_profile_name

DOCUMENT = """\
default:
  ext: mp4
  ffmpeg: /profile/ffmpeg
  logging:
    level: warning
fast:
  video-bitrate: 4M
  threads: 8
"""


@pytest.fixture
def profiles_file(temp_dir: Path) -> Path:
    path = temp_dir / "profiles.yaml"
    path.write_text(DOCUMENT)
    return path


class TestPaths:
    """Tests for data directory and document location."""

    def test_data_dir_from_env(self, monkeypatch, temp_dir: Path) -> None:
        monkeypatch.setenv("MEDIATRIM_DATA_DIR", str(temp_dir))
        assert get_data_dir() == temp_dir

    def test_default_data_dir(self, monkeypatch) -> None:
        monkeypatch.delenv("MEDIATRIM_DATA_DIR")
        assert get_data_dir() == Path.home() / ".mediatrim"

    def test_profiles_path_in_data_dir(self, monkeypatch, temp_dir: Path) -> None:
        monkeypatch.setenv("MEDIATRIM_DATA_DIR", str(temp_dir))
        assert get_default_profiles_path() == temp_dir / "profiles.yaml"

    def test_profiles_path_from_env(self, monkeypatch, temp_dir: Path) -> None:
        monkeypatch.setenv("MEDIATRIM_PROFILES_PATH", str(temp_dir / "p.yml"))
        assert get_default_profiles_path() == temp_dir / "p.yml"

    def test_profile_name(self, monkeypatch) -> None:
        assert get_default_profile_name() == "default"
        monkeypatch.setenv("MEDIATRIM_PROFILE", "fast")
        assert get_default_profile_name() == "fast"


class TestResolveOptions:
    """Tests for resolve_options precedence."""

    def test_defaults_without_document(self, temp_dir: Path) -> None:
        options, logging_config = resolve_options(
            profiles_path=temp_dir / "missing.yaml"
        )

        assert options == TrimOptions()
        assert logging_config.level == "info"

    def test_default_profile_applied(self, profiles_file: Path) -> None:
        options, logging_config = resolve_options(profiles_path=profiles_file)

        assert options.ext == "mp4"
        assert options.ffmpeg == "/profile/ffmpeg"
        assert logging_config.level == "warning"

    def test_named_profile(self, profiles_file: Path) -> None:
        options, _ = resolve_options("fast", profiles_file)

        assert options.video_bitrate == "4M"
        assert options.threads == 8
        assert options.ext == "webm"

    def test_profile_from_env(self, monkeypatch, profiles_file: Path) -> None:
        monkeypatch.setenv("MEDIATRIM_PROFILE", "fast")
        options, _ = resolve_options(profiles_path=profiles_file)
        assert options.threads == 8

    def test_document_from_env(self, monkeypatch, profiles_file: Path) -> None:
        monkeypatch.setenv("MEDIATRIM_PROFILES_PATH", str(profiles_file))
        options, _ = resolve_options()
        assert options.ext == "mp4"

    def test_missing_profile_uses_defaults(self, profiles_file: Path, caplog) -> None:
        options, _ = resolve_options("movies", profiles_file)

        assert options == TrimOptions()
        assert "Profile 'movies' not found" in caplog.text

    def test_malformed_document_uses_defaults(self, temp_dir: Path, caplog) -> None:
        path = temp_dir / "profiles.yaml"
        path.write_text("default: {ext: [\n")

        options, _ = resolve_options(profiles_path=path)

        assert options == TrimOptions()
        assert "using defaults" in caplog.text

    def test_env_overrides_profile(self, monkeypatch, profiles_file: Path) -> None:
        monkeypatch.setenv("MEDIATRIM_FFMPEG_PATH", "/env/ffmpeg")
        monkeypatch.setenv("MEDIATRIM_FFPROBE_PATH", "/env/ffprobe")

        options, _ = resolve_options(profiles_path=profiles_file)

        assert options.ffmpeg == "/env/ffmpeg"
        assert options.ffprobe == "/env/ffprobe"

    def test_cli_overrides_env(self, monkeypatch, profiles_file: Path) -> None:
        monkeypatch.setenv("MEDIATRIM_FFMPEG_PATH", "/env/ffmpeg")

        options, _ = resolve_options(
            profiles_path=profiles_file,
            overrides={"ffmpeg": "/cli/ffmpeg", "ext": None},
        )

        assert options.ffmpeg == "/cli/ffmpeg"
        assert options.ext == "mp4"


class TestCaching:
    """Tests for get_options caching."""

    def test_options_are_cached(self, profiles_file: Path) -> None:
        first = get_options(profiles_path=profiles_file)
        profiles_file.write_text("default:\n  ext: mkv\n")

        assert get_options(profiles_path=profiles_file) is first

    def test_clear_cache(self, profiles_file: Path) -> None:
        get_options(profiles_path=profiles_file)
        profiles_file.write_text("default:\n  ext: mkv\n")
        clear_options_cache()

        assert get_options(profiles_path=profiles_file).ext == "mkv"

    def test_overrides_are_part_of_key(self, profiles_file: Path) -> None:
        plain = get_options(profiles_path=profiles_file)
        burned = get_options(
            profiles_path=profiles_file, overrides={"burn_subtitles": True}
        )

        assert plain.burn_subtitles is False
        assert burned.burn_subtitles is True

    def test_logging_config(self, profiles_file: Path) -> None:
        assert get_logging_config(profiles_path=profiles_file).level == "warning"
