"""
Queries component - Evaluate filter queries into a working set of recipes.
"""

from .component import resolve, run_evaluate
from .models import (
    EvaluateQueriesInput,
    EvaluateQueriesOutput,
    QueryOutcome,
    QueryStatus,
    Retention,
    RetentionSet,
)
from .ports import RecipeSearchPort

__all__ = [
    # Entry points
    "resolve",
    "run_evaluate",
    # Models
    "EvaluateQueriesInput",
    "EvaluateQueriesOutput",
    "QueryOutcome",
    "QueryStatus",
    "Retention",
    "RetentionSet",
    # Ports
    "RecipeSearchPort",
]
