"""Load dive logs stored as directory trees in git repositories."""

from importlib import metadata as _metadata

from divelog.loader import GitLoader, LoadError, LoadResult, parse_location
from divelog.log import Dive, DiveLog, Trip

__all__ = [
    "__version__",
    "Dive",
    "DiveLog",
    "GitLoader",
    "LoadError",
    "LoadResult",
    "Trip",
    "parse_location",
]


def __getattr__(name: str):
    if name == "__version__":
        return _metadata.version("divelog")
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
