"""
Updater component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from src.components.taxonomy import TaxonomySnapshot
from src.core.entities import TaxonomyTerm
from src.rules.models import Assignment

# --- Delta Models ---


@dataclass(frozen=True)
class OrganiserDelta:
    """Resolved terms to add to and remove from one collection."""

    add: tuple[TaxonomyTerm, ...] = ()
    remove: tuple[TaxonomyTerm, ...] = ()


@dataclass(frozen=True)
class RecipeDelta:
    """Category and tag changes an assignment applies to each recipe."""

    categories: OrganiserDelta
    tags: OrganiserDelta

    @classmethod
    def from_assignment(cls, assignment: Assignment, snapshot: TaxonomySnapshot) -> RecipeDelta:
        """Resolve the assignment's set/unset names to concrete terms."""
        return cls(
            categories=OrganiserDelta(
                add=tuple(snapshot.categories.resolve(assignment.categories.set)),
                remove=tuple(snapshot.categories.resolve(assignment.categories.unset)),
            ),
            tags=OrganiserDelta(
                add=tuple(snapshot.tags.resolve(assignment.tags.set)),
                remove=tuple(snapshot.tags.resolve(assignment.tags.unset)),
            ),
        )


@dataclass(frozen=True)
class RecipePlan:
    """New collections for one recipe and whether each differs from the original."""

    categories: list[TaxonomyTerm]
    tags: list[TaxonomyTerm]
    categories_changed: bool
    tags_changed: bool

    @property
    def changed(self) -> bool:
        return self.categories_changed or self.tags_changed


# --- Input Models ---


@dataclass(frozen=True)
class UpdateRecipesInput:
    """Input for updating the working set of one assignment."""

    slugs: tuple[str, ...]
    delta: RecipeDelta
    assignment_number: int
    timeout_seconds: float
    assignment_count: int = 0


# --- Output Models ---


RecipeStatus = Literal["updated", "unchanged", "failed"]


@dataclass(frozen=True)
class RecipeResult:
    """Outcome for one recipe."""

    slug: str
    status: RecipeStatus
    error: str | None = None


@dataclass(frozen=True)
class UpdateRecipesOutput:
    """Output of the update pass."""

    results: tuple[RecipeResult, ...] = field(default_factory=tuple)

    def _with_status(self, status: RecipeStatus) -> tuple[str, ...]:
        return tuple(r.slug for r in self.results if r.status == status)

    @property
    def updated(self) -> tuple[str, ...]:
        return self._with_status("updated")

    @property
    def unchanged(self) -> tuple[str, ...]:
        return self._with_status("unchanged")

    @property
    def failed(self) -> tuple[str, ...]:
        return self._with_status("failed")
