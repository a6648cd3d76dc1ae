"""
Taxonomy component - Per-cycle snapshot of known categories and tags.

The snapshot is rebuilt from the store at the start of every cycle and never
cached across cycles. Failing to fetch either kind makes the whole cycle
unusable; the caller skips it and retries on the next tick.

Invariants:
- I1: Terms are unique by name within their kind
- I2: One snapshot is shared by all assignments of a cycle
"""

from __future__ import annotations

import logging

from src.core.entities import TaxonomyTerm, TermKind
from src.core.ports.store import Deadline, StoreError

from .models import LoadSnapshotInput, LoadSnapshotOutput, TaxonomySnapshot, TermIndex
from .ports import TaxonomySourcePort

logger = logging.getLogger(__name__)


class TaxonomyFetchError(Exception):
    """Raised when the terms of one kind cannot be retrieved."""

    def __init__(self, kind: TermKind, cause: Exception) -> None:
        self.kind = kind
        self.cause = cause
        super().__init__(f"failed to retrieve {kind.value}: {cause}")


def fetch_terms(
    source: TaxonomySourcePort,
    kind: TermKind,
    timeout_seconds: float,
) -> list[TaxonomyTerm]:
    """
    Fetch all terms of one kind under a fresh deadline.

    Raises:
        TaxonomyFetchError: if any page fetch fails or the deadline expires.
    """
    deadline = Deadline.after(timeout_seconds)
    try:
        return source.fetch_taxonomy(kind, deadline)
    except StoreError as e:
        raise TaxonomyFetchError(kind, e) from e


def run_load_snapshot(
    inp: LoadSnapshotInput,
    *,
    source: TaxonomySourcePort,
) -> LoadSnapshotOutput:
    """
    Load categories and tags into a TaxonomySnapshot.

    Both kinds are always attempted so that every failure is reported.

    Args:
        inp: Input containing the per-call timeout.
        source: Port used to fetch the terms.

    Returns:
        LoadSnapshotOutput with the snapshot, or errors if any kind failed.
    """
    indexes: dict[TermKind, TermIndex] = {}
    errors: list[str] = []

    for kind in (TermKind.CATEGORY, TermKind.TAG):
        try:
            terms = fetch_terms(source, kind, inp.timeout_seconds)
        except TaxonomyFetchError as e:
            logger.error("%s", e)
            errors.append(str(e))
            continue
        index = TermIndex.from_terms(kind, terms)
        logger.info("known %s: %s", kind.value, ", ".join(t.name for t in index.terms))
        indexes[kind] = index

    if errors:
        return LoadSnapshotOutput(snapshot=None, errors=errors, success=False)

    return LoadSnapshotOutput(
        snapshot=TaxonomySnapshot(
            categories=indexes[TermKind.CATEGORY],
            tags=indexes[TermKind.TAG],
        ),
    )
