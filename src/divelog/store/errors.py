"""Versioned object store errors."""


class StoreError(Exception):
    """Base exception for object store operations."""


class OpenError(StoreError):
    """Raised when a repository cannot be opened at the requested location."""


class BranchNotFound(StoreError):
    """Raised when a reference cannot be resolved to a root tree."""


class ReadError(StoreError):
    """Raised when a tree or blob cannot be read from the store."""
