"""Tests for common.datetime module."""

from datetime import datetime, timedelta, timezone

from common.datetime import to_iso, utc_now, utc_now_iso


class TestToIso:
    def test_millisecond_precision_utc(self) -> None:
        dt = datetime(2024, 1, 1, 12, 0, 0, 123456, tzinfo=timezone.utc)
        assert to_iso(dt) == "2024-01-01T12:00:00.123+00:00"

    def test_naive_assumed_utc(self) -> None:
        assert to_iso(datetime(2024, 1, 1, 12, 0, 0)) == "2024-01-01T12:00:00.000+00:00"

    def test_converts_offset_to_utc(self) -> None:
        dt = datetime(2024, 1, 1, 14, 0, 0, tzinfo=timezone(timedelta(hours=2)))
        assert to_iso(dt) == "2024-01-01T12:00:00.000+00:00"

    def test_string_order_matches_time_order(self) -> None:
        earlier = datetime(2024, 1, 1, 9, 59, 59, tzinfo=timezone.utc)
        later = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
        assert to_iso(earlier) < to_iso(later)


class TestUtcNow:
    def test_is_timezone_aware(self) -> None:
        assert utc_now().tzinfo is not None

    def test_iso_is_current(self) -> None:
        before = to_iso(datetime.now(timezone.utc))
        assert utc_now_iso() >= before
