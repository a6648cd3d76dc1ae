"""
Domain entities for the Mealie query assignment reconciler.

Taxonomy terms (categories and tags) and the slice of a recipe that the
reconciler reads and writes. Everything else on a recipe is owned by the
recipe store and never touched here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

__all__ = [
    "Recipe",
    "TaxonomyTerm",
    "TermKind",
    "collapse_whitespace",
    "term_names",
]


def collapse_whitespace(value: str) -> str:
    """Collapse runs of whitespace into single spaces and trim."""
    return " ".join(value.split())


class TermKind(str, Enum):
    """Kind of taxonomy term, valued by the store's organiser path segment."""

    CATEGORY = "categories"
    TAG = "tags"

    @property
    def label(self) -> str:
        return "category" if self is TermKind.CATEGORY else "tag"


@dataclass(frozen=True)
class TaxonomyTerm:
    """
    A named category or tag known to the recipe store.

    Equality for set arithmetic is by name; see ``term_names``.
    """

    id: str
    name: str
    slug: str = ""
    kind: TermKind = TermKind.CATEGORY

    def to_payload(self) -> dict[str, str]:
        """Serialise for a recipe write-back."""
        return {"id": self.id, "name": self.name, "slug": self.slug}


@dataclass(frozen=True)
class Recipe:
    """Recipe with its current category and tag collections."""

    id: str
    slug: str
    name: str = ""
    categories: tuple[TaxonomyTerm, ...] = field(default_factory=tuple)
    tags: tuple[TaxonomyTerm, ...] = field(default_factory=tuple)


def term_names(terms: tuple[TaxonomyTerm, ...] | list[TaxonomyTerm]) -> frozenset[str]:
    """Name set of a term collection; duplicates collapse."""
    return frozenset(term.name for term in terms)
