"""Git-backed tree store driven through the ``git`` executable."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Iterator, Sequence

from .errors import BranchNotFound, OpenError, ReadError, StoreError
from .models import TreeEntry

LOGGER = logging.getLogger(__name__)

DEFAULT_GIT_EXECUTABLE = "git"


class GitCommandError(StoreError):
    """Raised when a git plumbing command exits with a failure status."""

    def __init__(self, args: Sequence[str], returncode: int, stderr: str) -> None:
        self.returncode = returncode
        self.stderr = stderr.strip()
        super().__init__(f"git {' '.join(args)} failed ({returncode}): {self.stderr}")


class GitStore:
    """Read trees and blobs out of a git repository.

    Only plumbing commands are used (``rev-parse``, ``ls-tree`` and
    ``cat-file``), so the working tree is never touched and bare
    repositories are supported.
    """

    def __init__(self, git_dir: Path, *, executable: str = DEFAULT_GIT_EXECUTABLE) -> None:
        """Initialize the store for an already located git directory.

        Args:
            git_dir: Path to the repository's git directory.
            executable: Name or path of the git executable.
        """
        self.git_dir = git_dir
        self.executable = executable
        self._listings: dict[str, list[TreeEntry]] = {}

    @classmethod
    def open(cls, location: str | Path, *, executable: str = DEFAULT_GIT_EXECUTABLE) -> "GitStore":
        """Open the repository found at ``location``.

        Args:
            location: Working tree or git directory of the repository.
            executable: Name or path of the git executable.

        Returns:
            GitStore: Store bound to the repository's git directory.

        Raises:
            OpenError: If the location is missing or is not a git repository.
        """
        path = Path(location).expanduser()
        if not path.is_dir():
            raise OpenError(f"No directory at '{path}'")
        try:
            output = _run([executable, "rev-parse", "--absolute-git-dir"], cwd=path)
        except GitCommandError as exc:
            raise OpenError(f"'{path}' is not a git repository: {exc.stderr}") from exc
        except OSError as exc:
            raise OpenError(f"Unable to run '{executable}': {exc}") from exc
        git_dir = Path(output.decode("utf-8", "surrogateescape").strip())
        LOGGER.debug("Opened git repository %s", git_dir)
        return cls(git_dir, executable=executable)

    def resolve_branch(self, name: str) -> str:
        """Return the root tree id of a local branch, or of ``HEAD``.

        Raises:
            BranchNotFound: If the branch is unknown or does not peel to a tree.
        """
        ref = name if name == "HEAD" else f"refs/heads/{name}"
        try:
            commit = self._rev_parse(ref)
        except GitCommandError as exc:
            raise BranchNotFound(f"Unable to look up branch '{name}'") from exc
        try:
            return self._rev_parse(f"{commit}^{{tree}}")
        except GitCommandError as exc:
            raise BranchNotFound(f"Could not look up tree of branch '{name}'") from exc

    def list_tree(self, tree_id: str) -> list[TreeEntry]:
        """Return the direct children of ``tree_id`` in git's tree order.

        The first call for a tree lists its whole subtree with a single
        ``ls-tree -r -t`` and caches every directory found, so a walk costs
        one git process instead of one per directory. When the recursive
        listing fails only ``tree_id`` itself is listed, leaving broken
        subtrees to fail when they are reached.

        Raises:
            ReadError: If the tree cannot be listed.
        """
        if tree_id not in self._listings:
            try:
                self._cache_subtree(tree_id)
            except GitCommandError as exc:
                LOGGER.debug("Recursive listing of %s failed: %s", tree_id, exc)
                try:
                    output = self._run_git(["ls-tree", "-z", tree_id])
                except GitCommandError as inner:
                    raise ReadError(f"Unable to read tree {tree_id}") from inner
                self._listings[tree_id] = [entry for _, entry in _parse_ls_tree(output)]
        return list(self._listings[tree_id])

    def _cache_subtree(self, tree_id: str) -> None:
        output = self._run_git(["ls-tree", "-r", "-t", "-z", tree_id])
        children: dict[str, list[TreeEntry]] = {"": []}
        tree_paths = {"": tree_id}
        for path, entry in _parse_ls_tree(output):
            parent = path.rpartition("/")[0]
            children.setdefault(parent, []).append(entry)
            if entry.is_tree:
                tree_paths[path] = entry.oid
        for path, oid in tree_paths.items():
            self._listings.setdefault(oid, children.get(path, []))

    def read_blob(self, entry: TreeEntry) -> bytes:
        """Return the bytes of a blob entry.

        Raises:
            ReadError: If the object is missing or is not a blob.
        """
        try:
            return self._run_git(["cat-file", "blob", entry.oid])
        except GitCommandError as exc:
            raise ReadError(f"Unable to read blob {entry.oid} ({entry.name})") from exc

    def _rev_parse(self, revision: str) -> str:
        output = self._run_git(["rev-parse", "--verify", "--quiet", revision])
        return output.decode("ascii").strip()

    def _run_git(self, args: list[str]) -> bytes:
        """Run a git command against this repository and return stdout."""
        try:
            return _run([self.executable, "--git-dir", str(self.git_dir), *args])
        except OSError as exc:
            raise GitCommandError(args, -1, str(exc)) from exc


def _run(command: list[str], *, cwd: Path | None = None) -> bytes:
    result = subprocess.run(command, cwd=cwd, capture_output=True, check=False)
    if result.returncode != 0:
        raise GitCommandError(
            command[1:], result.returncode, result.stderr.decode("utf-8", "replace")
        )
    return result.stdout


def _parse_ls_tree(output: bytes) -> Iterator[tuple[str, TreeEntry]]:
    """Yield ``(path, entry)`` pairs from ``ls-tree -z`` output."""
    for record in output.split(b"\0"):
        if not record:
            continue
        header, _, raw_path = record.partition(b"\t")
        _mode, kind, oid = header.decode("ascii").split(" ")
        path = raw_path.decode("utf-8", "surrogateescape")
        name = path.rpartition("/")[2]
        yield path, TreeEntry(name=name, kind=kind, oid=oid)  # type: ignore[arg-type]
