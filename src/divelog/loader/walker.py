"""Pre-order walk over a dive log tree."""

from __future__ import annotations

import logging

from divelog.log import DiveLog
from divelog.store import ReadError, TreeEntry, TreeStore

from .dispatch import ContentDispatcher
from .factory import create_dive, create_trip, utc_timestamp
from .models import Diagnostic
from .naming import DiveDirectory, Rejected, TripDirectory, classify_directory
from .state import TraversalState
from .validation import validate_date, validate_time

LOGGER = logging.getLogger(__name__)


class TreeWalker:
    """Walk a tree in pre-order, building trips and dives from directory names.

    Children are visited in the store's name order, each directory before
    its subtree. Files never stop the walk; a rejected directory stops only
    the descent into that directory.
    """

    def __init__(
        self,
        store: TreeStore,
        log: DiveLog,
        state: TraversalState,
        dispatcher: ContentDispatcher,
    ) -> None:
        self.store = store
        self.log = log
        self.state = state
        self.dispatcher = dispatcher
        self.diagnostics: list[Diagnostic] = []
        self.skipped = 0

    def walk(self, tree_id: str) -> None:
        """Walk the tree rooted at ``tree_id``.

        Raises:
            ReadError: If the root tree itself cannot be listed.
        """
        self._walk_entries(self.store.list_tree(tree_id), "")

    def _walk_entries(self, entries: list[TreeEntry], root: str) -> None:
        for entry in entries:
            if not entry.is_tree:
                diagnostic = self.dispatcher.dispatch(root, entry, self.state)
                if diagnostic is not None:
                    self.diagnostics.append(diagnostic)
                continue

            with self.state.scope():
                if self.visit_directory(root, entry.name):
                    self._walk_subtree(entry, root)

    def _walk_subtree(self, entry: TreeEntry, root: str) -> None:
        path = f"{root}{entry.name}/"
        try:
            entries = self.store.list_tree(entry.oid)
        except ReadError as exc:
            message = f"Unable to read directory {path}: {exc}"
            LOGGER.warning(message)
            self.diagnostics.append(Diagnostic(kind="read-error", path=path, message=message))
            return
        self._walk_entries(entries, path)

    def visit_directory(self, root: str, name: str) -> bool:
        """Classify a directory, update the walk state, and report whether to descend.

        Args:
            root: Slash-terminated path of the parent directory.
            name: Directory name.

        Returns:
            bool: True when the directory's subtree should be walked.
        """
        decoded = classify_directory(root, name)

        if isinstance(decoded, Rejected):
            return self._skip(root, name, decoded.reason)

        if isinstance(decoded, TripDirectory):
            if not validate_date(decoded.year, decoded.month, decoded.day):
                return self._skip(root, name, "trip date out of range")
            trip = create_trip(self.log, decoded.year, decoded.month, decoded.day)
            self.state.enter_trip(trip)
            LOGGER.debug("Trip %s at %s%s", trip.when.date().isoformat(), root, name)
            return True

        if isinstance(decoded, DiveDirectory):
            if not validate_time(decoded.hour, decoded.minute, decoded.second):
                return self._skip(root, name, "dive time out of range")
            if not validate_date(decoded.year, decoded.month, decoded.day):
                return self._skip(root, name, "dive date out of range")
            when = utc_timestamp(
                decoded.year,
                decoded.month,
                decoded.day,
                decoded.hour,
                decoded.minute,
                decoded.second,
            )
            dive = create_dive(self.log, when, self.state.trip_for_dive(root))
            self.state.enter_dive(dive)
            LOGGER.debug("Dive %s at %s%s", when.isoformat(), root, name)
            return True

        return True

    def _skip(self, root: str, name: str, reason: str) -> bool:
        LOGGER.debug("Skipping %s%s: %s", root, name, reason)
        self.skipped += 1
        return False


__all__ = ["TreeWalker"]
