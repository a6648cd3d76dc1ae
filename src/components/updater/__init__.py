"""
Updater component - Apply organiser changes to matched recipes.
"""

from .component import apply_actions, plan_recipe, run_update
from .models import (
    OrganiserDelta,
    RecipeDelta,
    RecipePlan,
    RecipeResult,
    RecipeStatus,
    UpdateRecipesInput,
    UpdateRecipesOutput,
)
from .ports import RecipeWriterPort

__all__ = [
    # Entry points
    "apply_actions",
    "plan_recipe",
    "run_update",
    # Models
    "OrganiserDelta",
    "RecipeDelta",
    "RecipePlan",
    "RecipeResult",
    "RecipeStatus",
    "UpdateRecipesInput",
    "UpdateRecipesOutput",
    # Ports
    "RecipeWriterPort",
]
