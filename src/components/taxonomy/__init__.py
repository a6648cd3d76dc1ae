"""
Taxonomy component - Per-cycle snapshot of known categories and tags.
"""

from .component import TaxonomyFetchError, fetch_terms, run_load_snapshot
from .models import LoadSnapshotInput, LoadSnapshotOutput, TaxonomySnapshot, TermIndex
from .ports import TaxonomySourcePort

__all__ = [
    # Entry points
    "fetch_terms",
    "run_load_snapshot",
    # Models
    "LoadSnapshotInput",
    "LoadSnapshotOutput",
    "TaxonomySnapshot",
    "TermIndex",
    # Ports
    "TaxonomySourcePort",
    # Exceptions
    "TaxonomyFetchError",
]
