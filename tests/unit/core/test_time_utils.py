"""Tests for timestamp parsing and formatting."""

import pytest

from mediatrim.core.time_utils import format_seconds, parse_timestamp


class TestParseTimestamp:
    """Tests for parse_timestamp."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("0", 0.0),
            ("12.5", 12.5),
            (" 90 ", 90.0),
            ("1:30", 90.0),
            ("01:02:03", 3723.0),
            ("1:02:03.5", 3723.5),
            ("0:00.250", 0.25),
            ("100:00:00", 360000.0),
        ],
    )
    def test_valid(self, value: str, expected: float) -> None:
        assert parse_timestamp(value) == pytest.approx(expected)

    @pytest.mark.parametrize(
        "value",
        ["", "abc", "-5", "1:60", "1:61:00", "1:2:3:4", "nan", "1:-2", "-inf"],
    )
    def test_invalid(self, value: str) -> None:
        with pytest.raises(ValueError, match="Invalid timestamp"):
            parse_timestamp(value)

    @pytest.mark.parametrize("value", ["inf", "Infinity", "1e999"])
    def test_infinite_rejected(self, value: str) -> None:
        """Infinite values would become "-t inf" and an "inf" file name."""
        with pytest.raises(ValueError, match="Invalid timestamp"):
            parse_timestamp(value)


class TestFormatSeconds:
    """Tests for format_seconds."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (10.0, "10"),
            (0, "0"),
            (0.0, "0"),
            (4.5, "4.5"),
            (1 / 3, "0.33333333333333"),
            (61.25, "61.25"),
            (5.0004, "5.0004"),
            (5.3 - 1.1, "4.2"),
            (0.00001, "0.00001"),
            (3723.5, "3723.5"),
            (100, "100"),
        ],
    )
    def test_format(self, value: float, expected: str) -> None:
        assert format_seconds(value) == expected
