"""Tests for server clock conversions."""

from datetime import datetime, timedelta, timezone

from fintrack.utils.server_time import (
    SERVER_TZ,
    from_storage,
    month_bounds,
    seconds_until,
    to_server_time,
    to_storage,
)


def test_server_zone_is_utc_plus_seven():
    assert SERVER_TZ.utcoffset(None) == timedelta(hours=7)


def test_naive_input_is_taken_as_server_time():
    dt = to_server_time(datetime(2026, 1, 1, 9, 0))
    assert dt.utcoffset() == timedelta(hours=7)
    assert dt.hour == 9


def test_aware_input_is_converted():
    dt = to_server_time(datetime(2026, 1, 1, 0, 0, tzinfo=timezone.utc))
    assert dt.hour == 7


def test_storage_round_trip_keeps_instant():
    original = datetime(2026, 3, 1, 0, 30, 15, tzinfo=SERVER_TZ)
    stored = to_storage(original)
    assert stored == datetime(2026, 2, 28, 17, 30, 15)
    assert stored.tzinfo is None
    assert from_storage(stored) == original


def test_seconds_until_never_negative():
    now = datetime(2026, 1, 1, 12, 0, tzinfo=SERVER_TZ)
    assert seconds_until(now + timedelta(minutes=5), now) == 300
    assert seconds_until(now - timedelta(minutes=5), now) == 0


def test_month_bounds_in_utc():
    start, end = month_bounds(12, 2026)
    assert start == datetime(2026, 11, 30, 17, 0)
    assert end == datetime(2026, 12, 31, 17, 0)
