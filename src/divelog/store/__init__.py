"""Read access to the versioned object store holding dive logs."""

from __future__ import annotations

from .errors import BranchNotFound, OpenError, ReadError, StoreError
from .git import DEFAULT_GIT_EXECUTABLE, GitCommandError, GitStore
from .models import EntryKind, TreeEntry, TreeStore

__all__ = [
    "BranchNotFound",
    "DEFAULT_GIT_EXECUTABLE",
    "EntryKind",
    "GitCommandError",
    "GitStore",
    "OpenError",
    "ReadError",
    "StoreError",
    "TreeEntry",
    "TreeStore",
]
