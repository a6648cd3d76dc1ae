"""
Reconcile component - One full pass over all query assignments.

Control flow per cycle:
    taxonomy snapshot -> for each assignment:
        validate -> evaluate queries -> resolve retention -> update recipes

Failure scopes:
- Taxonomy fetch error: the whole cycle is skipped
- Unknown category/tag name: that assignment is skipped
- Query error: that query contributes nothing
- Recipe fetch/write error: that recipe is skipped

The next cycle starts from scratch, so anything missed converges later.
"""

from __future__ import annotations

import logging

from src.components.assignments import ValidateAssignmentInput, run_validate
from src.components.queries import EvaluateQueriesInput, resolve, run_evaluate
from src.components.taxonomy import LoadSnapshotInput, TaxonomySnapshot, run_load_snapshot
from src.components.updater import RecipeDelta, UpdateRecipesInput, run_update
from src.core.ports.store import RecipeStorePort
from src.rules.models import Assignment

from .models import AssignmentReport, CycleReport, RunCycleInput

logger = logging.getLogger(__name__)


def run_assignment(
    assignment: Assignment,
    assignment_number: int,
    *,
    snapshot: TaxonomySnapshot,
    store: RecipeStorePort,
    timeout_seconds: float,
    assignment_count: int = 0,
) -> AssignmentReport:
    """
    Validate, evaluate and apply a single assignment.

    Args:
        assignment: The assignment to run.
        assignment_number: 1-based position in the configuration.
        snapshot: Taxonomy snapshot shared by the cycle.
        store: Recipe store port.
        timeout_seconds: Per-call timeout for every store call.
        assignment_count: Total assignments, for progress logs.

    Returns:
        AssignmentReport describing what happened.
    """
    validation = run_validate(
        ValidateAssignmentInput(assignment=assignment, assignment_number=assignment_number),
        snapshot=snapshot,
    )
    if not validation.is_valid:
        return AssignmentReport(
            assignment_number=assignment_number,
            skipped=True,
            missing=validation.missing,
        )

    evaluation = run_evaluate(
        EvaluateQueriesInput(
            queries=assignment.queries,
            assignment_number=assignment_number,
            timeout_seconds=timeout_seconds,
        ),
        search=store,
    )
    working_set = resolve(evaluation.retention)

    updates = run_update(
        UpdateRecipesInput(
            slugs=working_set,
            delta=RecipeDelta.from_assignment(assignment, snapshot),
            assignment_number=assignment_number,
            assignment_count=assignment_count,
            timeout_seconds=timeout_seconds,
        ),
        store=store,
    )

    return AssignmentReport(
        assignment_number=assignment_number,
        queries=evaluation.outcomes,
        working_set=working_set,
        updated=updates.updated,
        unchanged=updates.unchanged,
        failed=updates.failed,
    )


def run_cycle(
    inp: RunCycleInput,
    *,
    store: RecipeStorePort,
) -> CycleReport:
    """
    Run one reconciliation cycle.

    A single taxonomy snapshot is loaded and shared by all assignments,
    which then run sequentially in configuration order.

    Args:
        inp: Input containing the query assignment configuration.
        store: Recipe store port.

    Returns:
        CycleReport; ``skipped`` is set when the taxonomy could not be loaded.
    """
    config = inp.config
    loaded = run_load_snapshot(
        LoadSnapshotInput(timeout_seconds=config.timeout_secs),
        source=store,
    )
    if not loaded.success or loaded.snapshot is None:
        logger.error("skipping cycle, taxonomy unavailable")
        return CycleReport(errors=loaded.errors, skipped=True)

    count = len(config.assignments)
    reports = tuple(
        run_assignment(
            assignment,
            number,
            snapshot=loaded.snapshot,
            store=store,
            timeout_seconds=config.timeout_secs,
            assignment_count=count,
        )
        for number, assignment in enumerate(config.assignments, start=1)
    )

    report = CycleReport(assignments=reports)
    logger.info(
        "cycle finished: %d assignments, %d skipped, %d recipes updated",
        count,
        sum(1 for r in reports if r.skipped),
        report.updated_count,
    )
    return report
