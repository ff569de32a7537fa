"""Construction of trips and dives from validated directory fields."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from divelog.log import Dive, DiveLog, Trip


def utc_timestamp(
    year: int, month: int, day: int, hour: int = 0, minute: int = 0, second: int = 0
) -> datetime:
    """Return a UTC timestamp, normalizing out-of-range days and leap seconds.

    ``2023-02-30`` becomes March 2nd and ``10:30:60`` becomes ``10:31:00``.
    """
    start_of_month = datetime(year, month, 1, tzinfo=timezone.utc)
    return start_of_month + timedelta(days=day - 1, hours=hour, minutes=minute, seconds=second)


def create_trip(log: DiveLog, year: int, month: int, day: int) -> Trip:
    """Create a trip anchored at midnight UTC of the given date and register it."""
    trip = Trip(when=utc_timestamp(year, month, day))
    log.record_trip(trip)
    return trip


def create_dive(log: DiveLog, when: datetime, trip: Optional[Trip] = None) -> Dive:
    """Create a dive, attach it to ``trip`` when given, and register it.

    Args:
        log: Record store that takes ownership of the dive.
        when: Start of the dive.
        trip: Trip currently active for the walk, if any.

    Returns:
        Dive: The registered dive.
    """
    dive = log.alloc_dive(when)
    if trip is not None:
        log.add_dive_to_trip(dive, trip)
    log.record_dive(dive)
    return dive


__all__ = ["create_dive", "create_trip", "utc_timestamp"]
