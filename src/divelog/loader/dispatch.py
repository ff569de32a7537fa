"""Routing of content files to the parsers for dives, dive computers and trips."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from divelog.log import Dive, Trip
from divelog.store import ReadError, TreeEntry, TreeStore

from .models import Diagnostic
from .naming import leading_digits
from .state import TraversalState

LOGGER = logging.getLogger(__name__)

DIVECOMPUTER_PREFIX = "Divecomputer"
DIVE_PREFIX = "Dive"
TRIP_FILENAME = "00-Trip"

DiveParser = Callable[[Dive, bytes], None]
DivecomputerParser = Callable[[Dive, str, bytes], None]
TripParser = Callable[[Trip, bytes], None]


def _ignore_dive(dive: Dive, data: bytes) -> None:
    LOGGER.debug("Dive file for %s: %d bytes", dive.when.isoformat(), len(data))


def _ignore_divecomputer(dive: Dive, suffix: str, data: bytes) -> None:
    LOGGER.debug(
        "Divecomputer%s for %s: %d bytes", suffix, dive.when.isoformat(), len(data)
    )


def _ignore_trip(trip: Trip, data: bytes) -> None:
    LOGGER.debug("Trip file for %s: %d bytes", trip.when.date().isoformat(), len(data))


@dataclass(slots=True)
class ContentHandlers:
    """Parsers receiving the content of recognized files.

    The defaults only log what they receive.

    Attributes:
        dive: Called with the active dive and the ``Dive`` file content.
        divecomputer: Called with the active dive, the text after
            ``Divecomputer`` in the file name, and the file content.
        trip: Called with the active trip and the ``00-Trip`` file content.
    """

    dive: DiveParser = _ignore_dive
    divecomputer: DivecomputerParser = _ignore_divecomputer
    trip: TripParser = _ignore_trip


def parse_dive_number(suffix: str) -> Optional[int]:
    """Return the dive number encoded after ``Dive`` in a file name.

    A single leading separator is skipped, so ``Dive5`` and ``Dive-5`` both
    yield 5. Returns None for an empty or non-numeric suffix.
    """
    if suffix and not suffix[0].isdigit():
        suffix = suffix[1:]
    digits = leading_digits(suffix)
    return int(digits) if digits else None


class ContentDispatcher:
    """Route file entries to content handlers using the walk's active state."""

    def __init__(self, store: TreeStore, handlers: ContentHandlers | None = None) -> None:
        self.store = store
        self.handlers = handlers or ContentHandlers()

    def dispatch(self, root: str, entry: TreeEntry, state: TraversalState) -> Diagnostic | None:
        """Handle one file entry.

        Args:
            root: Slash-terminated path of the directory holding the entry.
            entry: File entry to handle.
            state: Walk state; only read, never modified.

        Returns:
            Diagnostic | None: A diagnostic when the content could not be read
            or the file is not recognized, otherwise None.
        """
        name = entry.name
        dive = state.active_dive
        trip = state.active_trip

        if dive is not None and name.startswith(DIVECOMPUTER_PREFIX):
            suffix = name[len(DIVECOMPUTER_PREFIX) :]
            data = self._read(root, entry, "divecomputer")
            if isinstance(data, Diagnostic):
                return data
            self.handlers.divecomputer(dive, suffix, data)
            return None

        if dive is not None and name.startswith(DIVE_PREFIX):
            data = self._read(root, entry, "dive")
            if isinstance(data, Diagnostic):
                return data
            number = parse_dive_number(name[len(DIVE_PREFIX) :])
            if number is not None:
                dive.number = number
            self.handlers.dive(dive, data)
            return None

        if trip is not None and name == TRIP_FILENAME:
            data = self._read(root, entry, "trip")
            if isinstance(data, Diagnostic):
                return data
            self.handlers.trip(trip, data)
            return None

        message = (
            f"Unknown file {root}{name} "
            f"(active dive: {'yes' if dive is not None else 'no'}, "
            f"active trip: {'yes' if trip is not None else 'no'})"
        )
        LOGGER.warning(message)
        return Diagnostic(kind="unknown-file", path=f"{root}{name}", message=message)

    def _read(self, root: str, entry: TreeEntry, what: str) -> bytes | Diagnostic:
        try:
            return self.store.read_blob(entry)
        except ReadError as exc:
            message = f"Unable to read {what} file {root}{entry.name}: {exc}"
            LOGGER.warning(message)
            return Diagnostic(kind="read-error", path=f"{root}{entry.name}", message=message)


__all__ = [
    "ContentDispatcher",
    "ContentHandlers",
    "DIVECOMPUTER_PREFIX",
    "DIVE_PREFIX",
    "TRIP_FILENAME",
    "parse_dive_number",
]
