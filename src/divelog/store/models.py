"""Data models describing entries of a versioned tree."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Protocol

EntryKind = Literal["tree", "blob", "commit"]


@dataclass(frozen=True, slots=True)
class TreeEntry:
    """A single child of a tree object.

    Attributes:
        name: Entry name within its parent tree (a single path segment).
        kind: Object type the entry points at.
        oid: Content identifier of the referenced object.
    """

    name: str
    kind: EntryKind
    oid: str

    @property
    def is_tree(self) -> bool:
        """Return True when the entry is a directory."""
        return self.kind == "tree"


class TreeStore(Protocol):
    """Read-only view of a content-addressed tree/blob store."""

    def resolve_branch(self, name: str) -> str:
        """Return the root tree identifier for a branch.

        Raises:
            BranchNotFound: If the branch or its tree cannot be resolved.
        """
        ...

    def list_tree(self, tree_id: str) -> list[TreeEntry]:
        """Return the children of a tree in the store's canonical name order.

        Raises:
            ReadError: If the tree cannot be read.
        """
        ...

    def read_blob(self, entry: TreeEntry) -> bytes:
        """Return the content of a blob entry.

        Raises:
            ReadError: If the blob cannot be read.
        """
        ...


__all__ = ["EntryKind", "TreeEntry", "TreeStore"]
