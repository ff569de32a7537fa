"""In-memory dive log that owns every dive and trip produced by a load."""

from __future__ import annotations

import logging
from datetime import datetime

from .models import Dive, DiveRecord, LogSnapshot, Trip, TripRecord

LOGGER = logging.getLogger(__name__)


class DiveLog:
    """Record store receiving dives and trips as they are discovered."""

    def __init__(self) -> None:
        self.dives: list[Dive] = []
        self.trips: list[Trip] = []

    def alloc_dive(self, when: datetime) -> Dive:
        """Return a new, unregistered dive starting at ``when``."""
        return Dive(when=when)

    def add_dive_to_trip(self, dive: Dive, trip: Trip) -> None:
        """Attach ``dive`` to ``trip``, detaching it from any previous trip.

        Args:
            dive: Dive to attach.
            trip: Trip receiving the dive.
        """
        if dive.trip is trip:
            return
        if dive.trip is not None:
            dive.trip.dives.remove(dive)
        dive.trip = trip
        trip.dives.append(dive)

    def record_dive(self, dive: Dive) -> None:
        """Register a completed dive with the log."""
        self.dives.append(dive)
        LOGGER.debug("Recorded dive at %s", dive.when.isoformat())

    def record_trip(self, trip: Trip) -> None:
        """Register a trip with the log."""
        self.trips.append(trip)
        LOGGER.debug("Recorded trip at %s", trip.when.date().isoformat())

    def snapshot(self) -> LogSnapshot:
        """Return a serializable snapshot of the log.

        Returns:
            LogSnapshot: Trips and dives in registration order, with trip
            membership expressed as indices.
        """
        index = {id(trip): position for position, trip in enumerate(self.trips)}
        return LogSnapshot(
            trips=[TripRecord(when=trip.when, dive_count=len(trip.dives)) for trip in self.trips],
            dives=[
                DiveRecord(
                    when=dive.when,
                    number=dive.number,
                    trip=index.get(id(dive.trip)) if dive.trip is not None else None,
                )
                for dive in self.dives
            ],
        )


__all__ = [
    "DiveLog",
    "Dive",
    "Trip",
    "DiveRecord",
    "TripRecord",
    "LogSnapshot",
]
