"""Directory naming grammar of git dive logs.

All structural metadata lives in directory names::

    yyyy/                                   year, descended into
    yyyy/mm/                                month, descended into
    yyyy/mm/dd-name[~hex]/                  trip starting on day dd
    [[yyyy-]mm-]dd-nnn-hh:mm:ss[~hex]/      dive

Year and month missing from a dive name come from the ``yyyy/mm`` path
leading up to it. Anything from a ``~`` onwards is a uniqueness suffix.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Tuple, Union

UNIQUE_SUFFIX_MARKER = "~"

# Widths of the fixed fields, walked backwards from the time of day.
TIME_WIDTH = len("hh:mm:ss")
DAY_FIELD_WIDTH = len("dd-nnn-")
MONTH_FIELD_WIDTH = len("mm-")
YEAR_FIELD_WIDTH = len("yyyy-")

_DIGITS = re.compile(r"[0-9]*")
_PATH_PREFIX = re.compile(r"([0-9]+)/([0-9]+)")
_TIME_OF_DAY = re.compile(r"([0-9]+):([0-9]+):([0-9]+)")


@dataclass(frozen=True, slots=True)
class Transparent:
    """A bare year or month directory; descend without creating anything."""


@dataclass(frozen=True, slots=True)
class Rejected:
    """A directory that is not dive data; neither it nor its subtree is loaded."""

    reason: str


@dataclass(frozen=True, slots=True)
class TripDirectory:
    """Fields decoded from a trip directory name and its path."""

    year: int
    month: int
    day: int


@dataclass(frozen=True, slots=True)
class DiveDirectory:
    """Fields decoded from a dive directory name and its path."""

    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int


DirectoryKind = Union[Transparent, Rejected, TripDirectory, DiveDirectory]

TRANSPARENT = Transparent()


def leading_digits(text: str, start: int = 0) -> str:
    """Return the run of ASCII digits starting at ``start``."""
    match = _DIGITS.match(text, start)
    return match.group() if match else ""


def nonunique_length(name: str) -> int:
    """Return the length of ``name`` without its ``~`` uniqueness suffix."""
    marker = name.find(UNIQUE_SUFFIX_MARKER)
    return len(name) if marker < 0 else marker


def parse_path_prefix(root: str) -> Optional[Tuple[int, int]]:
    """Return ``(year, month)`` from a path starting with ``yyyy/mm``."""
    match = _PATH_PREFIX.match(root)
    if match is None:
        return None
    return int(match.group(1)), int(match.group(2))


def classify_directory(root: str, name: str) -> DirectoryKind:
    """Classify a directory by its name and the path leading up to it.

    Args:
        root: Slash-terminated path of the parent directory (``""`` at the top).
        name: Directory name.

    Returns:
        DirectoryKind: ``Transparent`` for year/month directories, the decoded
        fields for trip and dive directories, or ``Rejected``. Decoded fields
        are not range checked.
    """
    digits = len(leading_digits(name))
    if digits not in (2, 4):
        return Rejected("does not start with two or four digits")
    if digits == len(name):
        return TRANSPARENT
    if name[digits] != "-":
        return Rejected("leading digits are not followed by '-'")

    # At least "dd-" precedes any suffix, so the length is 3 or more.
    length = nonunique_length(name)
    if name[length - 3] == ":":
        return _decode_dive_directory(root, name, length - TIME_WIDTH)

    if digits != 2:
        return Rejected("four leading digits but no time of day")
    return _decode_trip_directory(root, name)


def _number_at(text: str, offset: int) -> Optional[int]:
    digits = leading_digits(text, offset)
    return int(digits) if digits else None


def _decode_trip_directory(root: str, name: str) -> DirectoryKind:
    prefix = parse_path_prefix(root)
    if prefix is None:
        return Rejected("trip directory outside a yyyy/mm path")
    year, month = prefix
    return TripDirectory(year=year, month=month, day=int(name[:2]))


def _decode_dive_directory(root: str, name: str, time_offset: int) -> DirectoryKind:
    day_offset = time_offset - DAY_FIELD_WIDTH
    month_offset = day_offset - MONTH_FIELD_WIDTH
    year_offset = month_offset - YEAR_FIELD_WIDTH

    if day_offset < 0:
        return Rejected("dive name has no day of month")
    if name[time_offset - 1] != "-":
        return Rejected("time of day is not preceded by '-'")

    time_match = _TIME_OF_DAY.match(name, time_offset)
    if time_match is None:
        return Rejected("malformed time of day")
    hour, minute, second = (int(value) for value in time_match.groups())

    year: Optional[int]
    month: Optional[int]
    if year_offset < 0:
        prefix = parse_path_prefix(root)
        if prefix is None:
            return Rejected("dive without year or month outside a yyyy/mm path")
        year, month = prefix
    else:
        year = _number_at(name, year_offset)
    if month_offset >= 0:
        month = _number_at(name, month_offset)
    day = _number_at(name, day_offset)

    if year is None or month is None or day is None:
        return Rejected("non-numeric date field")
    return DiveDirectory(
        year=year, month=month, day=day, hour=hour, minute=minute, second=second
    )


__all__ = [
    "DirectoryKind",
    "DiveDirectory",
    "Rejected",
    "TRANSPARENT",
    "Transparent",
    "TripDirectory",
    "classify_directory",
    "leading_digits",
    "nonunique_length",
    "parse_path_prefix",
]
