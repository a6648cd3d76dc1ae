"""
Taxonomy component input/output models.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from src.core.entities import TaxonomyTerm, TermKind

# --- Snapshot Models ---


@dataclass(frozen=True)
class TermIndex:
    """All known terms of one kind, indexed by name."""

    kind: TermKind
    terms: tuple[TaxonomyTerm, ...]
    names: frozenset[str]
    by_name: Mapping[str, TaxonomyTerm]

    @classmethod
    def from_terms(cls, kind: TermKind, terms: Iterable[TaxonomyTerm]) -> TermIndex:
        collected = tuple(terms)
        by_name = {term.name: term for term in collected}
        return cls(
            kind=kind,
            terms=collected,
            names=frozenset(by_name),
            by_name=by_name,
        )

    def __contains__(self, name: object) -> bool:
        return name in self.names

    def resolve(self, names: Iterable[str]) -> list[TaxonomyTerm]:
        """Terms for the known names, in the given order. Unknown names are dropped."""
        return [self.by_name[name] for name in names if name in self.by_name]


@dataclass(frozen=True)
class TaxonomySnapshot:
    """Categories and tags known to the store at the start of one cycle."""

    categories: TermIndex
    tags: TermIndex

    def index(self, kind: TermKind) -> TermIndex:
        return self.categories if kind is TermKind.CATEGORY else self.tags


# --- Input Models ---


@dataclass(frozen=True)
class LoadSnapshotInput:
    """Input for loading a taxonomy snapshot."""

    timeout_seconds: float


# --- Output Models ---


@dataclass(frozen=True)
class LoadSnapshotOutput:
    """Output for snapshot loading."""

    snapshot: TaxonomySnapshot | None
    errors: list[str] = field(default_factory=list)
    success: bool = True
