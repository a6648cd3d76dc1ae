"""
Queries component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

from src.rules.models import Query, QueryMode

# --- Retention ---


class Retention(Enum):
    """Decision for one matched recipe. A recipe never matched is dropped too."""

    KEEP = "keep"
    DROP = "drop"


# Recipe slug -> latest decision, in first-match order.
RetentionSet = dict[str, Retention]


QueryStatus = Literal["applied", "skipped", "unknown_mode", "failed"]


@dataclass(frozen=True)
class QueryOutcome:
    """What happened to one query of an assignment."""

    query_number: int
    mode: QueryMode
    status: QueryStatus
    matched: int = 0
    error: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class EvaluateQueriesInput:
    """Input for evaluating an assignment's queries."""

    queries: tuple[Query, ...]
    assignment_number: int
    timeout_seconds: float


# --- Output Models ---


@dataclass(frozen=True)
class EvaluateQueriesOutput:
    """Output of query evaluation."""

    retention: RetentionSet
    outcomes: tuple[QueryOutcome, ...] = field(default_factory=tuple)

    @property
    def failed_queries(self) -> tuple[QueryOutcome, ...]:
        return tuple(o for o in self.outcomes if o.status == "failed")
