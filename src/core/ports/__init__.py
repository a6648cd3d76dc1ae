# Mealie query assignment reconciler - Ports (Protocol Interfaces)
# Abstract interfaces for adapters; no implementations here

from src.core.ports.store import (
    Deadline,
    RecipeStorePort,
    StoreError,
    StoreResponseError,
    StoreTimeoutError,
)

__all__ = [
    "Deadline",
    "RecipeStorePort",
    "StoreError",
    "StoreResponseError",
    "StoreTimeoutError",
]
