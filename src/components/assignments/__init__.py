"""
Assignments component - Validate assignments against the taxonomy snapshot.
"""

from .component import run_validate
from .models import MissingName, ValidateAssignmentInput, ValidateAssignmentOutput

__all__ = [
    "run_validate",
    "MissingName",
    "ValidateAssignmentInput",
    "ValidateAssignmentOutput",
]
