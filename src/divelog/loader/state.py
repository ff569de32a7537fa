"""Tracking of the trip and dive that later entries of a walk belong to."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Literal, Optional

from divelog.log import Dive, Trip

LOGGER = logging.getLogger(__name__)

TripScoping = Literal["legacy", "tree"]

# Length of a "yyyy/mm/" path: a dive directly below a month directory.
MONTH_PATH_LENGTH = len("yyyy/mm/")


class TraversalState:
    """Hold the active trip and dive while a tree is walked in pre-order.

    Neither slot owns its object; both point into the dive log. With the
    default ``"legacy"`` scoping a trip stays active for every later dive
    directory until one is found directly below a ``yyyy/mm/`` path, and a
    dive stays active until the next dive directory. With ``"tree"``
    scoping :meth:`scope` also restores both slots once the subtree of the
    directory that set them has been walked.
    """

    def __init__(self, *, scoping: TripScoping = "legacy") -> None:
        self.scoping = scoping
        self.active_trip: Optional[Trip] = None
        self.active_dive: Optional[Dive] = None

    @contextmanager
    def scope(self) -> Iterator[None]:
        """Bound state changes made while visiting a directory to its subtree."""
        saved = (self.active_trip, self.active_dive)
        try:
            yield
        finally:
            if self.scoping == "tree":
                self.active_trip, self.active_dive = saved

    def enter_trip(self, trip: Trip) -> None:
        """Make ``trip`` the active trip; the active dive is left as is."""
        self.active_trip = trip

    def trip_for_dive(self, root: str) -> Optional[Trip]:
        """Return the trip a dive found below ``root`` belongs to.

        A dive directly below ``yyyy/mm/`` is never part of a trip, so the
        active trip is dropped first.
        """
        if len(root) == MONTH_PATH_LENGTH and self.active_trip is not None:
            LOGGER.debug("Leaving trip at %s", root)
            self.active_trip = None
        return self.active_trip

    def enter_dive(self, dive: Dive) -> None:
        """Make ``dive`` the target of subsequent content files."""
        self.active_dive = dive


__all__ = ["MONTH_PATH_LENGTH", "TraversalState", "TripScoping"]
