"""Shared fixtures: in-memory tree stores and throwaway git repositories."""

from __future__ import annotations

import itertools
import shutil
import subprocess
from pathlib import Path
from typing import Any, Callable, Iterable

import pytest

from divelog.config.models import LoaderSettings
from divelog.loader import ContentHandlers, GitLoader, LoadResult
from divelog.store import BranchNotFound, ReadError, TreeEntry


class MemoryStore:
    """Tree store built from nested dictionaries.

    Dictionary values become directories, ``str``/``bytes`` values become
    blobs. ``None`` marks a blob that cannot be read and ``...`` marks a
    directory that cannot be listed.
    """

    def __init__(self, tree: dict[str, Any], *, branches: Iterable[str] = ("main", "HEAD")) -> None:
        self._ids = itertools.count()
        self._trees: dict[str, list[TreeEntry]] = {}
        self._blobs: dict[str, bytes | None] = {}
        self.root = self._add_tree(tree)
        self.branches = {name: self.root for name in branches}
        self.reads: list[str] = []

    def _add_tree(self, tree: dict[str, Any]) -> str:
        entries: list[TreeEntry] = []
        for name, value in tree.items():
            if value is ...:
                entries.append(TreeEntry(name=name, kind="tree", oid=f"missing-{next(self._ids)}"))
            elif isinstance(value, dict):
                entries.append(TreeEntry(name=name, kind="tree", oid=self._add_tree(value)))
            else:
                oid = f"blob-{next(self._ids)}"
                self._blobs[oid] = value.encode("utf-8") if isinstance(value, str) else value
                entries.append(TreeEntry(name=name, kind="blob", oid=oid))
        # Git orders trees as if their names ended with "/".
        entries.sort(key=lambda entry: entry.name + "/" if entry.is_tree else entry.name)
        oid = f"tree-{next(self._ids)}"
        self._trees[oid] = entries
        return oid

    def resolve_branch(self, name: str) -> str:
        try:
            return self.branches[name]
        except KeyError:
            raise BranchNotFound(f"Unable to look up branch '{name}'") from None

    def list_tree(self, tree_id: str) -> list[TreeEntry]:
        try:
            return list(self._trees[tree_id])
        except KeyError:
            raise ReadError(f"Unable to read tree {tree_id}") from None

    def read_blob(self, entry: TreeEntry) -> bytes:
        data = self._blobs.get(entry.oid)
        if data is None:
            raise ReadError(f"Unable to read blob {entry.oid}")
        self.reads.append(entry.name)
        return data


class RecordingHandlers:
    """Content handlers that remember every call they receive."""

    def __init__(self) -> None:
        self.dives: list[tuple[Any, bytes]] = []
        self.divecomputers: list[tuple[Any, str, bytes]] = []
        self.trips: list[tuple[Any, bytes]] = []

    def as_handlers(self) -> ContentHandlers:
        return ContentHandlers(
            dive=lambda dive, data: self.dives.append((dive, data)),
            divecomputer=lambda dive, suffix, data: self.divecomputers.append((dive, suffix, data)),
            trip=lambda trip, data: self.trips.append((trip, data)),
        )


@pytest.fixture
def build_store() -> Callable[..., MemoryStore]:
    """Return a factory for in-memory tree stores."""
    return MemoryStore


@pytest.fixture
def load_store() -> Callable[..., LoadResult]:
    """Return a helper walking a memory store's root tree."""

    def _load(
        store: MemoryStore,
        *,
        scoping: str = "legacy",
        handlers: ContentHandlers | None = None,
    ) -> LoadResult:
        loader = GitLoader(loader=LoaderSettings(trip_scoping=scoping), handlers=handlers)
        return loader.load_tree(store, store.root, location="memory", branch="main")

    return _load


@pytest.fixture
def recording_handlers() -> RecordingHandlers:
    return RecordingHandlers()


def _git(repo: Path, *args: str) -> None:
    subprocess.run(["git", *args], cwd=repo, check=True, capture_output=True)


def _write_tree(directory: Path, tree: dict[str, Any]) -> None:
    for name, value in tree.items():
        target = directory / name
        if isinstance(value, dict):
            target.mkdir()
            _write_tree(target, value)
        elif isinstance(value, bytes):
            target.write_bytes(value)
        else:
            target.write_text(value, encoding="utf-8")


@pytest.fixture
def git_repo(tmp_path: Path) -> Callable[..., Path]:
    """Return a factory committing a nested dictionary to a new git repository.

    Tests using this fixture are skipped when no git executable is available.
    """
    if shutil.which("git") is None:
        pytest.skip("git executable not available")

    def _create(tree: dict[str, Any], *, branch: str = "main") -> Path:
        repo = tmp_path / "repo"
        repo.mkdir()
        _git(repo, "init", "-q")
        _git(repo, "symbolic-ref", "HEAD", f"refs/heads/{branch}")
        _write_tree(repo, tree)
        _git(repo, "add", "-A")
        _git(
            repo,
            "-c",
            "user.name=Dive Log",
            "-c",
            "user.email=divelog@example.com",
            "-c",
            "commit.gpgsign=false",
            "commit",
            "-q",
            "-m",
            "Dive log",
        )
        return repo

    return _create
