"""
Recipe Store Interface.

Protocol-based interface for the external recipe store (Mealie) that the
reconciler reads taxonomy and recipes from and writes organiser changes to.

Key requirements:
- Every call is bound to its own ``Deadline``
- Paginated listings are aggregated inside the adapter
- Failures surface as ``StoreError``; an expired deadline as
  ``StoreTimeoutError``

Implementation strategies:
1. MealieStoreAdapter: HTTP client for the Mealie REST API
2. In-memory fakes (tests)
"""

from __future__ import annotations

import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from src.core.entities import Recipe, TaxonomyTerm, TermKind


@dataclass(frozen=True)
class Deadline:
    """
    Absolute deadline on the monotonic clock.

    A fresh deadline is derived from the configured per-call timeout for every
    external call. Pages fetched inside one call share that call's deadline.
    """

    expires_at: float
    clock: Callable[[], float] = time.monotonic

    @classmethod
    def after(cls, seconds: float, clock: Callable[[], float] = time.monotonic) -> Deadline:
        return cls(expires_at=clock() + seconds, clock=clock)

    def remaining(self) -> float:
        """Seconds left, never negative."""
        return max(self.expires_at - self.clock(), 0.0)

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0.0

    def check(self, operation: str) -> None:
        """Raise StoreTimeoutError if the deadline has passed."""
        if self.expired:
            raise StoreTimeoutError(operation)


class RecipeStorePort(Protocol):
    """
    Recipe store interface consumed by the reconciliation core.

    Implementations:
    - MealieStoreAdapter: Mealie REST API over HTTP
    """

    def fetch_taxonomy(self, kind: TermKind, deadline: Deadline) -> list[TaxonomyTerm]:
        """
        Fetch every known term of one kind, across all pages.

        Raises:
            StoreError: if any page fails
        """
        ...

    def search_recipe_ids(self, params: Mapping[str, str], deadline: Deadline) -> list[str]:
        """
        Run a filtered recipe search and return the matching recipe slugs.

        Args:
            params: Filter keys and values, translated into the store's
                native query string
            deadline: Deadline for the whole (paginated) search
        """
        ...

    def fetch_recipe(self, slug: str, deadline: Deadline) -> Recipe:
        """Fetch one recipe with its full category and tag collections."""
        ...

    def write_recipe_taxonomy(
        self,
        recipe: Recipe,
        categories: list[TaxonomyTerm],
        tags: list[TaxonomyTerm],
        deadline: Deadline,
    ) -> None:
        """
        Replace the recipe's categories and tags with the given lists.

        Raises:
            StoreError: if the store rejects or fails the write
        """
        ...


# --- Error Types ---


class StoreError(Exception):
    """Base exception for recipe store failures."""

    pass


class StoreTimeoutError(StoreError):
    """A store call ran past its deadline."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"Deadline exceeded during {operation}")


class StoreResponseError(StoreError):
    """The store answered with an unexpected status code or body."""

    def __init__(self, operation: str, status_code: int, body: str = "") -> None:
        self.operation = operation
        self.status_code = status_code
        self.body = body
        super().__init__(f"{operation}: unexpected status code {status_code}: {body}")
