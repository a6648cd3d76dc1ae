"""
Assignments component - Validate assignments against the taxonomy snapshot.

An assignment only runs if every name in its four set/unset lists exists in
the current snapshot. Any missing name skips that assignment for this cycle;
other assignments are unaffected.
"""

from __future__ import annotations

import logging

from src.components.taxonomy import TaxonomySnapshot
from src.core.entities import TermKind
from src.rules.models import Assignment

from .models import MissingName, ValidateAssignmentInput, ValidateAssignmentOutput

logger = logging.getLogger(__name__)


def _referenced_names(assignment: Assignment) -> list[tuple[TermKind, str]]:
    """Every (kind, name) pair the assignment refers to, in config order."""
    refs: list[tuple[TermKind, str]] = []
    for kind, actions in (
        (TermKind.CATEGORY, assignment.categories),
        (TermKind.TAG, assignment.tags),
    ):
        refs.extend((kind, name) for name in actions.set)
        refs.extend((kind, name) for name in actions.unset)
    return refs


def run_validate(
    inp: ValidateAssignmentInput,
    *,
    snapshot: TaxonomySnapshot,
) -> ValidateAssignmentOutput:
    """
    Check every referenced category and tag name against the snapshot.

    Pure apart from logging: each missing name is logged individually.

    Args:
        inp: Input containing the assignment and its 1-based number.
        snapshot: Taxonomy snapshot of the current cycle.

    Returns:
        ValidateAssignmentOutput listing missing names (empty if valid).
    """
    missing: list[MissingName] = []

    for kind, name in _referenced_names(inp.assignment):
        if name in snapshot.index(kind):
            continue
        entry = MissingName(assignment_number=inp.assignment_number, kind=kind, name=name)
        logger.warning("skipping assignment %d, %s", inp.assignment_number, entry)
        missing.append(entry)

    return ValidateAssignmentOutput(missing=missing, is_valid=len(missing) == 0)
