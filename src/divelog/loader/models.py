"""Result models produced by a dive log load."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Literal

from pydantic import BaseModel

from divelog.log import DiveLog

DiagnosticKind = Literal["read-error", "unknown-file"]


class Diagnostic(BaseModel):
    """A non-fatal problem found while walking a tree.

    Attributes:
        kind: Category of the problem.
        path: Full path of the affected entry.
        message: Human-readable description.
    """

    kind: DiagnosticKind
    path: str
    message: str


@dataclass(slots=True)
class LoadResult:
    """Outcome of loading a dive log from a store.

    Attributes:
        location: Repository location the log was loaded from.
        branch: Branch whose tree was walked.
        tree_id: Identifier of the root tree.
        log: Dive log holding every trip and dive found.
        diagnostics: Read failures and unrecognized files.
        skipped: Number of directories excluded by the naming grammar.
    """

    location: str
    branch: str
    tree_id: str
    log: DiveLog
    diagnostics: List[Diagnostic] = field(default_factory=list)
    skipped: int = 0

    @property
    def counts(self) -> dict[str, int]:
        """Return summary metrics for the load."""
        return {
            "trips": len(self.log.trips),
            "dives": len(self.log.dives),
            "skipped": self.skipped,
            "diagnostics": len(self.diagnostics),
        }

    def json_payload(self, *, details: bool = True) -> dict[str, Any]:
        """Return a JSON-ready payload describing the load."""
        payload: dict[str, Any] = {
            "context": {
                "location": self.location,
                "branch": self.branch,
                "tree": self.tree_id,
            },
            "counts": self.counts,
            "diagnostics": [item.model_dump(mode="json") for item in self.diagnostics],
        }
        if details:
            payload.update(self.log.snapshot().model_dump(mode="json"))
        return payload


__all__ = ["Diagnostic", "DiagnosticKind", "LoadResult"]
