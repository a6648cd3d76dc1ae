"""
Queries component - Evaluate an assignment's filter queries.

Builds the retention set for one assignment by running its queries in
declared order against the recipe store, then resolves it into the working
set of recipes to update.

Invariants:
- I1: Queries run sequentially in declared order
- I2: The last query matching a recipe decides its retention
- I3: A failing query contributes nothing; later queries still run
- I4: Only KEEP entries reach the working set
"""

from __future__ import annotations

import logging
from urllib.parse import urlencode

from src.core.ports.store import Deadline, StoreError
from src.rules.models import Query, QueryMode

from .models import (
    EvaluateQueriesInput,
    EvaluateQueriesOutput,
    QueryOutcome,
    Retention,
    RetentionSet,
)
from .ports import RecipeSearchPort

logger = logging.getLogger(__name__)

_DECISIONS = {QueryMode.ADD: Retention.KEEP, QueryMode.REMOVE: Retention.DROP}


def _run_query(
    query: Query,
    query_number: int,
    inp: EvaluateQueriesInput,
    search: RecipeSearchPort,
    retention: RetentionSet,
) -> QueryOutcome:
    mode = query.resolved_mode

    if mode is QueryMode.SKIP:
        logger.info(
            "skipping query %d of assignment %d due to mode setting",
            query_number,
            inp.assignment_number,
        )
        return QueryOutcome(query_number=query_number, mode=mode, status="skipped")

    if mode is QueryMode.UNKNOWN:
        logger.warning(
            "skipping query %d of assignment %d, unknown mode %r",
            query_number,
            inp.assignment_number,
            query.mode,
        )
        return QueryOutcome(query_number=query_number, mode=mode, status="unknown_mode")

    logger.info(
        "built string for query %d of assignment %d: %s",
        query_number,
        inp.assignment_number,
        urlencode(query.params),
    )
    try:
        slugs = search.search_recipe_ids(query.params, Deadline.after(inp.timeout_seconds))
    except StoreError as e:
        logger.error(
            "failed to retrieve recipes for query %d of assignment %d: %s",
            query_number,
            inp.assignment_number,
            e,
        )
        return QueryOutcome(query_number=query_number, mode=mode, status="failed", error=str(e))

    decision = _DECISIONS[mode]
    for slug in slugs:
        retention[slug] = decision

    logger.info(
        "%d recipes matched query %d of assignment %d in mode %s",
        len(slugs),
        query_number,
        inp.assignment_number,
        mode.value,
    )
    return QueryOutcome(query_number=query_number, mode=mode, status="applied", matched=len(slugs))


def run_evaluate(
    inp: EvaluateQueriesInput,
    *,
    search: RecipeSearchPort,
) -> EvaluateQueriesOutput:
    """
    Run the queries of one assignment and accumulate the retention set.

    Args:
        inp: Input containing the queries, assignment number and per-call timeout.
        search: Port used to execute filtered searches.

    Returns:
        EvaluateQueriesOutput with the retention set and per-query outcomes.
    """
    retention: RetentionSet = {}
    outcomes = tuple(
        _run_query(query, number, inp, search, retention)
        for number, query in enumerate(inp.queries, start=1)
    )
    return EvaluateQueriesOutput(retention=retention, outcomes=outcomes)


def resolve(retention: RetentionSet) -> tuple[str, ...]:
    """
    Working set of an assignment: the slugs whose final decision is KEEP.

    Dropped and never-mentioned slugs are excluded. Order follows first match.
    """
    return tuple(slug for slug, decision in retention.items() if decision is Retention.KEEP)
