"""
Taxonomy component port definitions.
"""

from __future__ import annotations

from typing import Protocol

from src.core.entities import TaxonomyTerm, TermKind
from src.core.ports.store import Deadline


class TaxonomySourcePort(Protocol):
    """Source of organiser terms (categories, tags)."""

    def fetch_taxonomy(self, kind: TermKind, deadline: Deadline) -> list[TaxonomyTerm]:
        """Fetch every term of one kind across all pages."""
        ...
