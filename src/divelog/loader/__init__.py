"""Load dive logs from git repositories.

``GitLoader.load`` accepts a location string of the form
``"git /path/to/repo[:branch]"``, resolves the branch to its root tree and
walks the tree, turning trip and dive directories into entries of a
:class:`~divelog.log.DiveLog`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from divelog.config.models import LoaderSettings, StoreSettings
from divelog.log import DiveLog
from divelog.store import BranchNotFound, GitStore, OpenError, ReadError, TreeStore

from .dispatch import ContentDispatcher, ContentHandlers
from .models import Diagnostic, LoadResult
from .state import TraversalState
from .walker import TreeWalker

LOGGER = logging.getLogger(__name__)

StoreFactory = Callable[[str], TreeStore]


class LoadError(Exception):
    """Raised when a repository, branch or root tree cannot be resolved."""


@dataclass(frozen=True, slots=True)
class Location:
    """Repository path and optional branch parsed from a location string."""

    path: str
    branch: Optional[str] = None


def parse_location(where: str, marker: str = "git") -> Location:
    """Split a location string into repository path and branch.

    A marker followed by whitespace is skipped along with that whitespace,
    so bare paths are accepted too. Trailing whitespace is trimmed and the
    text after the last ``:`` names the branch.

    Args:
        where: Location string such as ``"git ~/dives:main"``.
        marker: Prefix marker to strip when present.

    Returns:
        Location: Parsed path and branch (None when absent or empty).
    """
    text = where
    if marker and where.startswith(marker) and where[len(marker) : len(marker) + 1].isspace():
        text = where[len(marker) :]
    text = text.strip()
    path, separator, branch = text.rpartition(":")
    if not separator:
        return Location(path=text)
    return Location(path=path, branch=branch or None)


class GitLoader:
    """Resolve a location to a tree and build a dive log from it."""

    def __init__(
        self,
        *,
        loader: LoaderSettings | None = None,
        store: StoreSettings | None = None,
        handlers: ContentHandlers | None = None,
        store_factory: StoreFactory | None = None,
    ) -> None:
        """Initialize the loader.

        Args:
            loader: Tree interpretation settings.
            store: Object store settings.
            handlers: Parsers for dive, dive computer and trip content.
            store_factory: Callable opening a store for a repository path;
                defaults to :meth:`GitStore.open` with the configured executable.
        """
        self.loader_settings = loader or LoaderSettings()
        self.store_settings = store or StoreSettings()
        self.handlers = handlers or ContentHandlers()
        self._store_factory = store_factory or self._open_git

    def load(self, where: str, *, log: DiveLog | None = None) -> LoadResult:
        """Load the dive log named by a location string.

        Args:
            where: Location string, optionally prefixed with the marker and
                suffixed with ``:branch``.
            log: Dive log to add to; a new one is created when omitted.

        Returns:
            LoadResult: The populated log plus diagnostics.

        Raises:
            LoadError: If the repository, branch or root tree cannot be
                resolved. Dives already added to ``log`` stay there.
        """
        location = parse_location(where, self.loader_settings.location_marker)
        branch = location.branch or self.store_settings.default_branch

        try:
            store = self._store_factory(location.path)
        except OpenError as exc:
            LOGGER.error(
                "Unable to open git repository at '%s' (branch '%s')", location.path, branch
            )
            raise LoadError(
                f"Unable to open git repository at '{location.path}' (branch '{branch}'): {exc}"
            ) from exc

        try:
            tree_id = store.resolve_branch(branch)
        except BranchNotFound as exc:
            LOGGER.error("%s in '%s'", exc, location.path)
            raise LoadError(f"{exc} in repository '{location.path}'") from exc

        return self.load_tree(store, tree_id, location=location.path, branch=branch, log=log)

    def load_tree(
        self,
        store: TreeStore,
        tree_id: str,
        *,
        location: str = "",
        branch: str = "",
        log: DiveLog | None = None,
    ) -> LoadResult:
        """Walk an already resolved tree.

        Raises:
            LoadError: If the root tree cannot be read.
        """
        log = log if log is not None else DiveLog()
        state = TraversalState(scoping=self.loader_settings.trip_scoping)
        walker = TreeWalker(store, log, state, ContentDispatcher(store, self.handlers))

        LOGGER.info("Loading dives from %s (branch '%s', tree %s)", location, branch, tree_id)
        try:
            walker.walk(tree_id)
        except ReadError as exc:
            LOGGER.error("Could not read tree of branch '%s' in '%s'", branch, location)
            raise LoadError(
                f"Could not read tree of branch '{branch}' in repository '{location}'"
            ) from exc

        result = LoadResult(
            location=location,
            branch=branch,
            tree_id=tree_id,
            log=log,
            diagnostics=walker.diagnostics,
            skipped=walker.skipped,
        )
        LOGGER.info(
            "Loaded %d dives in %d trips (%d diagnostics)",
            len(log.dives),
            len(log.trips),
            len(result.diagnostics),
        )
        return result

    def _open_git(self, path: str) -> TreeStore:
        return GitStore.open(path, executable=self.store_settings.git_executable)


__all__ = [
    "ContentHandlers",
    "Diagnostic",
    "GitLoader",
    "LoadError",
    "LoadResult",
    "Location",
    "parse_location",
]
