"""
Updater component port definitions.
"""

from __future__ import annotations

from typing import Protocol

from src.core.entities import Recipe, TaxonomyTerm
from src.core.ports.store import Deadline


class RecipeWriterPort(Protocol):
    """Recipe detail retrieval and organiser write-back."""

    def fetch_recipe(self, slug: str, deadline: Deadline) -> Recipe:
        """Fetch a recipe with its categories and tags."""
        ...

    def write_recipe_taxonomy(
        self,
        recipe: Recipe,
        categories: list[TaxonomyTerm],
        tags: list[TaxonomyTerm],
        deadline: Deadline,
    ) -> None:
        """Replace the recipe's categories and tags."""
        ...
