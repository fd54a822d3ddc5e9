"""Input validation utilities for jobs-done."""

import re
from datetime import datetime

from jobs_done.error_handling import InvalidDuration, InvalidTimestamp

_DURATION_PATTERN = re.compile(r"^\+?\d+$")


def to_local_naive(value: datetime) -> datetime:
    """Convert a datetime to naive local wall-clock time.

    Naive values are assumed to already be local and are returned unchanged.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def parse_timestamp(value: str) -> datetime:
    """Parse an explicit ``--since`` timestamp.

    Args:
        value: ISO-8601 timestamp, either local (no offset) or with a UTC
            designator / offset such as ``Z`` or ``+02:00``

    Returns:
        Naive datetime in local time

    Raises:
        InvalidTimestamp: If the value cannot be parsed

    Examples:
        >>> parse_timestamp("2025-01-01T10:00:00")
        datetime.datetime(2025, 1, 1, 10, 0)
    """
    if value is None or not str(value).strip():
        raise InvalidTimestamp(str(value))

    text = str(value).strip()
    try:
        return to_local_naive(datetime.fromisoformat(text))
    except (ValueError, OverflowError) as e:
        raise InvalidTimestamp(str(value), original_error=e) from e


def parse_duration(value, unit: str = "hours") -> int:
    """Validate a relative window length.

    Args:
        value: Raw value from the command line (string or int)
        unit: Unit name used in the error message

    Returns:
        The non-negative integer value

    Raises:
        InvalidDuration: If the value is not a non-negative integer
    """
    if isinstance(value, bool):
        raise InvalidDuration(value, unit)
    if isinstance(value, int):
        if value < 0:
            raise InvalidDuration(value, unit)
        return value

    text = str(value).strip() if value is not None else ""
    if not _DURATION_PATTERN.match(text):
        raise InvalidDuration(value, unit)
    return int(text)
