"""
Scheduler component port definitions.
"""

from __future__ import annotations

from typing import Protocol


class ClockPort(Protocol):
    """Monotonic clock used to measure cycle duration."""

    def monotonic(self) -> float:
        """Seconds on a clock that never goes backwards."""
        ...


class CyclePort(Protocol):
    """One unit of scheduled work."""

    def __call__(self) -> object:
        """Run one full cycle."""
        ...
