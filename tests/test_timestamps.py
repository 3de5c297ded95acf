import pytest

from dttools.cleaner.timestamps import TimestampParseError, normalize_timestamp, parse_timestamp


class TestParseTimestamp:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("2026-01-05T14:00:00", "2026-01-05 14:00:00"),
            ("2026-01-05T14:00:00.250", "2026-01-05 14:00:00"),
            ("2026-01-05T14:00:00.123456", "2026-01-05 14:00:00"),
            ("2026-01-05T14:00:00.123456789", "2026-01-05 14:00:00"),
            ("2026-01-05 14:00:00", "2026-01-05 14:00:00"),
            ("2026/01/05 14:00:00", "2026-01-05 14:00:00"),
            ("  2026/1/5 04:05:06  ", "2026-01-05 04:05:06"),
        ],
    )
    def test_supported_layouts(self, text, expected):
        assert parse_timestamp(text) == expected

    @pytest.mark.parametrize(
        "text",
        ["", "2026-01-05", "20260105140000", "2026/01/05T14:00:00", "yesterday noon", "2026-13-05 14:00:00"],
    )
    def test_rejected(self, text):
        with pytest.raises(TimestampParseError):
            parse_timestamp(text)

    def test_error_is_value_error(self):
        assert issubclass(TimestampParseError, ValueError)


class TestNormalizeTimestamp:
    def test_passes_through_on_failure(self):
        assert normalize_timestamp("bad time") == "bad time"

    def test_normalizes(self):
        assert normalize_timestamp("2026-01-05T14:00:00") == "2026-01-05 14:00:00"

    def test_nanosecond_fraction_normalized(self):
        assert normalize_timestamp("2026-01-05T14:00:59.999999999") == "2026-01-05 14:00:59"
