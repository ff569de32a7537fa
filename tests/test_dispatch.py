"""Tests for routing content files to their parsers."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

import pytest

from divelog.loader.dispatch import ContentDispatcher, parse_dive_number
from divelog.loader.state import TraversalState
from divelog.log import Dive, Trip


@pytest.mark.parametrize(
    ("suffix", "expected"),
    [("5", 5), ("-5", 5), ("12abc", 12), ("", None), ("-", None), ("x", None)],
)
def test_parse_dive_number(suffix: str, expected: Optional[int]) -> None:
    assert parse_dive_number(suffix) == expected


def test_dive_files_set_ordinal_numbers(build_store, load_store) -> None:
    store = build_store(
        {
            "2023": {
                "07": {
                    "15-001-10:30:00": {"Dive5": "dive"},
                    "16-001-10:30:00": {"Dive": "dive"},
                    "17-001-10:30:00": {"Dive-7": "dive"},
                }
            }
        }
    )

    result = load_store(store)

    assert [dive.number for dive in result.log.dives] == [5, None, 7]


def test_content_is_forwarded_to_handlers(build_store, load_store, recording_handlers) -> None:
    store = build_store(
        {
            "2023": {
                "07": {
                    "13-someTrip": {
                        "00-Trip": "trip data",
                        "13-001-10:30:00": {
                            "Dive5": "dive data",
                            "Divecomputer-x": "dc x",
                            "Divecomputer1": "dc 1",
                        },
                    }
                }
            }
        }
    )

    result = load_store(store, handlers=recording_handlers.as_handlers())

    dive = result.log.dives[0]
    assert recording_handlers.trips == [(result.log.trips[0], b"trip data")]
    assert recording_handlers.dives == [(dive, b"dive data")]
    assert recording_handlers.divecomputers == [
        (dive, "-x", b"dc x"),
        (dive, "1", b"dc 1"),
    ]


def test_unknown_file_is_reported_without_state_change(build_store, load_store) -> None:
    store = build_store({"2023": {"07": {"15-001-10:30:00": {"Dive3": "d", "Unrelated.txt": "?"}}}})

    result = load_store(store)

    assert result.log.dives[0].number == 3
    [diagnostic] = result.diagnostics
    assert diagnostic.kind == "unknown-file"
    assert diagnostic.path == "2023/07/15-001-10:30:00/Unrelated.txt"
    assert "active dive: yes" in diagnostic.message
    assert "active trip: no" in diagnostic.message


def test_content_files_need_an_active_owner(build_store, load_store) -> None:
    store = build_store({"2023": {"07": {"00-Trip": "trip", "Divecomputer": "dc", "Dive1": "d"}}})

    result = load_store(store)

    assert sorted(item.path for item in result.diagnostics) == [
        "2023/07/00-Trip",
        "2023/07/Dive1",
        "2023/07/Divecomputer",
    ]
    assert all(item.kind == "unknown-file" for item in result.diagnostics)
    assert store.reads == []


def test_unreadable_content_is_reported_and_walk_continues(
    build_store, load_store, recording_handlers
) -> None:
    store = build_store(
        {
            "2023": {
                "07": {
                    "15-001-10:30:00": {"Dive5": None, "Divecomputer": "dc"},
                    "16-001-10:30:00": {"Dive6": "dive"},
                }
            }
        }
    )

    result = load_store(store, handlers=recording_handlers.as_handlers())

    assert [dive.number for dive in result.log.dives] == [None, 6]
    assert [(item.kind, item.path) for item in result.diagnostics] == [
        ("read-error", "2023/07/15-001-10:30:00/Dive5")
    ]
    assert len(recording_handlers.divecomputers) == 1
    assert len(recording_handlers.dives) == 1


def test_dispatch_only_reads_state(build_store) -> None:
    store = build_store({"00-Trip": "trip", "Dive": "dive"})
    state = TraversalState()
    trip = Trip(when=datetime(2023, 7, 13, tzinfo=timezone.utc))
    dive = Dive(when=datetime(2023, 7, 13, 10, tzinfo=timezone.utc))
    state.enter_trip(trip)
    state.enter_dive(dive)
    dispatcher = ContentDispatcher(store)

    results = [dispatcher.dispatch("", entry, state) for entry in store.list_tree(store.root)]

    assert results == [None, None]
    assert state.active_trip is trip
    assert state.active_dive is dive
    assert store.reads == ["00-Trip", "Dive"]


def test_non_numeric_dive_file_keeps_existing_number(build_store, load_store) -> None:
    store = build_store(
        {"2023": {"07": {"15-001-10:30:00": {"Dive5": "dive", "Dive_notes": "notes"}}}}
    )

    result = load_store(store)

    assert result.log.dives[0].number == 5
    assert store.reads == ["Dive5", "Dive_notes"]
