"""
Reconcile component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from src.components.assignments import MissingName
from src.components.queries import QueryOutcome
from src.rules.models import QueryAssignments

# --- Input Models ---


@dataclass(frozen=True)
class RunCycleInput:
    """Input for one reconciliation cycle."""

    config: QueryAssignments


# --- Output Models ---


@dataclass(frozen=True)
class AssignmentReport:
    """What one assignment did during a cycle."""

    assignment_number: int
    skipped: bool = False
    missing: list[MissingName] = field(default_factory=list)
    queries: tuple[QueryOutcome, ...] = ()
    working_set: tuple[str, ...] = ()
    updated: tuple[str, ...] = ()
    unchanged: tuple[str, ...] = ()
    failed: tuple[str, ...] = ()


@dataclass(frozen=True)
class CycleReport:
    """Outcome of a full reconciliation cycle."""

    assignments: tuple[AssignmentReport, ...] = ()
    errors: list[str] = field(default_factory=list)
    skipped: bool = False

    @property
    def updated_count(self) -> int:
        return sum(len(a.updated) for a in self.assignments)
