"""
Assignments component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from src.core.entities import TermKind
from src.rules.models import Assignment

# --- Validation Error ---


@dataclass(frozen=True)
class MissingName:
    """A set/unset name that is not in the current taxonomy."""

    assignment_number: int
    kind: TermKind
    name: str

    def __str__(self) -> str:
        return f"{self.kind.label} {self.name} not known"


# --- Input Models ---


@dataclass(frozen=True)
class ValidateAssignmentInput:
    """Input for validating one assignment against a snapshot."""

    assignment: Assignment
    assignment_number: int  # 1-based, as shown in logs


# --- Output Models ---


@dataclass(frozen=True)
class ValidateAssignmentOutput:
    """Output from validating an assignment."""

    missing: list[MissingName] = field(default_factory=list)
    is_valid: bool = True
