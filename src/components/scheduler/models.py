"""
Scheduler component models.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass


class CancellationToken:
    """
    One-shot cancellation signal shared by the host and the scheduler loop.

    The loop only observes it while waiting between cycles.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request the loop to stop. Further calls are no-ops."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block up to ``timeout`` seconds; True if cancelled."""
        return self._event.wait(timeout=timeout)


@dataclass(frozen=True)
class CycleTiming:
    """Timing of one finished cycle."""

    cycle_number: int
    elapsed_seconds: float
    next_wait_seconds: float
