"""
Reconcile component - One full pass over all query assignments.
"""

from .component import run_assignment, run_cycle
from .models import AssignmentReport, CycleReport, RunCycleInput

__all__ = [
    "run_assignment",
    "run_cycle",
    "AssignmentReport",
    "CycleReport",
    "RunCycleInput",
]
