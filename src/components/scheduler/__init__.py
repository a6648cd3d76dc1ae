"""
Scheduler component - Periodic query assignment reconciliation.
"""

from ._impl import ReconcileScheduler, compute_next_wait
from .component import create_scheduler, run_start
from .models import CancellationToken, CycleTiming
from .ports import ClockPort, CyclePort

__all__ = [
    # Entry points
    "create_scheduler",
    "run_start",
    # Loop
    "ReconcileScheduler",
    "compute_next_wait",
    # Models
    "CancellationToken",
    "CycleTiming",
    # Ports
    "ClockPort",
    "CyclePort",
]
