"""
Scheduler component - Periodic query assignment reconciliation.

Wires the reconcile cycle to a ReconcileScheduler for a given configuration
and store. The host gets back a cancellation token and sends it once to stop.
"""

from __future__ import annotations

import logging

from src.components.reconcile import CycleReport, RunCycleInput, run_cycle
from src.core.ports.store import RecipeStorePort
from src.rules.models import QueryAssignments

from ._impl import ReconcileScheduler
from .models import CancellationToken
from .ports import ClockPort

logger = logging.getLogger(__name__)


def create_scheduler(
    config: QueryAssignments,
    *,
    store: RecipeStorePort,
    token: CancellationToken | None = None,
    clock: ClockPort | None = None,
) -> ReconcileScheduler | None:
    """
    Build a scheduler running reconciliation cycles for ``config``.

    Returns:
        The scheduler, or None when no assignments are configured.
    """
    if not config.enabled:
        logger.info("no query assignments configured, assignment loop disabled")
        return None

    def cycle() -> CycleReport:
        return run_cycle(RunCycleInput(config=config), store=store)

    return ReconcileScheduler(
        cycle,
        repeat_seconds=config.repeat_secs,
        token=token,
        clock=clock,
    )


def run_start(
    config: QueryAssignments,
    *,
    store: RecipeStorePort,
    token: CancellationToken | None = None,
) -> ReconcileScheduler | None:
    """
    Create and start the assignment loop.

    Returns:
        The running scheduler (its ``token`` cancels it), or None if disabled.
    """
    scheduler = create_scheduler(config, store=store, token=token)
    if scheduler is not None:
        scheduler.start()
    return scheduler
