"""Bounds checks for date and time fields decoded from directory names."""

from __future__ import annotations


def validate_date(year: int, month: int, day: int) -> bool:
    """Return True when the calendar fields are within accepted bounds.

    Day-of-month is not checked against the length of the month, so
    ``2023-02-30`` passes and is normalized when the timestamp is built.
    """
    return 1970 < year < 3000 and 0 < month < 13 and 0 < day < 32


def validate_time(hour: int, minute: int, second: int) -> bool:
    """Return True when the time-of-day fields are within accepted bounds.

    A second value of 60 is allowed for leap seconds.
    """
    return 0 <= hour < 24 and 0 <= minute < 60 and 0 <= second <= 60


__all__ = ["validate_date", "validate_time"]
