"""Dive and trip models plus their serializable snapshots."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


@dataclass(eq=False)
class Trip:
    """A date-anchored collection of dives.

    Attributes:
        when: Midnight (UTC) of the trip's anchor date.
        dives: Member dives in the order they were attached.
    """

    when: datetime
    dives: list["Dive"] = field(default_factory=list, repr=False)


@dataclass(eq=False)
class Dive:
    """A single timestamped dive.

    Attributes:
        when: Start of the dive (UTC, no timezone information is stored).
        number: Ordinal number taken from the dive's content file, if any.
        trip: Trip the dive belongs to, if any.
    """

    when: datetime
    number: Optional[int] = None
    trip: Optional[Trip] = field(default=None, repr=False)


class TripRecord(BaseModel):
    """Serializable view of a trip."""

    when: datetime
    dive_count: int = 0


class DiveRecord(BaseModel):
    """Serializable view of a dive.

    Attributes:
        when: Start of the dive.
        number: Ordinal number, if known.
        trip: Index of the owning trip within ``LogSnapshot.trips``.
    """

    when: datetime
    number: Optional[int] = None
    trip: Optional[int] = None


class LogSnapshot(BaseModel):
    """Aggregate, comparable view of a loaded dive log."""

    trips: List[TripRecord] = Field(default_factory=list)
    dives: List[DiveRecord] = Field(default_factory=list)


__all__ = ["Trip", "Dive", "TripRecord", "DiveRecord", "LogSnapshot"]
