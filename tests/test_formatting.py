"""
Tests for date and price formatting
"""

from datetime import datetime, timedelta, timezone

from noravenolife.utils.formatting import (
    format_distance_to_now, format_event_time, format_price, parse_datetime, to_naive_utc
)

def test_format_event_time():
    value = datetime(2030, 6, 15, 21, 30)

    assert format_event_time(value) == "Sat, Jun 15 at 9:30 PM"
    assert format_event_time(value, with_time=False) == "Sat, Jun 15, 2030"
    assert format_event_time(None) == "Invalid date"

def test_format_distance_to_now():
    now = datetime(2030, 1, 1, 12, 0)

    assert format_distance_to_now(now + timedelta(days=3), now) == "in 3 days"
    assert format_distance_to_now(now - timedelta(hours=2), now) == "2 hours ago"
    assert format_distance_to_now(now + timedelta(minutes=1), now) == "in 1 minute"

def test_format_price():
    assert format_price(None) == "N/A"
    assert format_price(0) == "Free"
    assert format_price(35) == "$35.00"
    assert format_price(1250.5) == "$1,250.50"

def test_parse_datetime():
    assert parse_datetime("2030-06-15T20:00:00Z") == datetime(2030, 6, 15, 20, 0)
    assert parse_datetime("2030-06-15T22:00:00+02:00") == datetime(2030, 6, 15, 20, 0)
    assert parse_datetime("") is None

def test_to_naive_utc():
    aware = datetime(2030, 1, 1, 1, 0, tzinfo=timezone(timedelta(hours=1)))

    assert to_naive_utc(aware) == datetime(2030, 1, 1, 0, 0)
    assert to_naive_utc(None) is None
