"""
Queries component port definitions.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol

from src.core.ports.store import Deadline


class RecipeSearchPort(Protocol):
    """Filtered recipe search."""

    def search_recipe_ids(self, params: Mapping[str, str], deadline: Deadline) -> list[str]:
        """Return slugs of every recipe matching the filter params."""
        ...
