"""Tests for input validation helpers."""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from jobs_done.error_handling import InvalidDuration, InvalidTimestamp
from jobs_done.utils.validation import parse_duration, parse_timestamp, to_local_naive


def test_parse_local_timestamp():
    assert parse_timestamp("2025-01-01T10:00:00") == datetime(2025, 1, 1, 10, 0)


def test_parse_date_only():
    assert parse_timestamp("2025-01-01") == datetime(2025, 1, 1)


@pytest.mark.parametrize(
    "value,aware",
    [
        ("2025-01-01T10:00:00Z", datetime(2025, 1, 1, 10, tzinfo=UTC)),
        (
            "2025-01-01T10:00:00+02:00",
            datetime(2025, 1, 1, 10, tzinfo=timezone(timedelta(hours=2))),
        ),
    ],
)
def test_parse_aware_timestamp(value, aware):
    assert parse_timestamp(value) == aware.astimezone().replace(tzinfo=None)


@pytest.mark.parametrize("value", ["", "   ", "now", "2025-02-30T00:00:00", None])
def test_invalid_timestamp(value):
    with pytest.raises(InvalidTimestamp):
        parse_timestamp(value)


@pytest.mark.parametrize(
    "value", ["9999-12-31T23:59:59-12:00", "0001-01-01T00:00:00+14:00"]
)
def test_timestamp_out_of_range_in_local_time(value):
    with pytest.raises(InvalidTimestamp) as exc_info:
        parse_timestamp(value)
    assert isinstance(exc_info.value.original_error, OverflowError)


def test_to_local_naive_keeps_naive_values():
    value = datetime(2025, 1, 1, 12)
    assert to_local_naive(value) is value


@pytest.mark.parametrize("value,expected", [("0", 0), ("12", 12), (" 7 ", 7), ("+3", 3), (5, 5)])
def test_parse_duration(value, expected):
    assert parse_duration(value) == expected


@pytest.mark.parametrize("value", ["-1", "1.5", "", "ten", None, -4, True])
def test_invalid_duration(value):
    with pytest.raises(InvalidDuration):
        parse_duration(value)
