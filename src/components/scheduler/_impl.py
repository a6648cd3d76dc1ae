"""
ReconcileScheduler - Background loop driving reconciliation cycles.

Runs one daemon thread that waits on the cancellation token with a timeout,
runs a cycle when the timeout elapses, and rearms the timer.

Key behaviors:
- The first cycle runs immediately
- Next wait is max(repeat - elapsed, 0): an overrunning cycle is followed
  immediately by the next one
- Cycles never overlap
- Cancellation is observed only between cycles; a running cycle completes
- A failing cycle is logged and the loop carries on
"""

from __future__ import annotations

import logging
import threading

from .models import CancellationToken, CycleTiming
from .ports import ClockPort, CyclePort

logger = logging.getLogger(__name__)


def compute_next_wait(repeat_seconds: float, elapsed_seconds: float) -> float:
    """Wait before the next cycle, compensating for the time the last one took."""
    return max(repeat_seconds - elapsed_seconds, 0.0)


class ReconcileScheduler:
    """
    Drives a cycle callable on a drift-compensated timer.

    Usage:
        scheduler = ReconcileScheduler(cycle, repeat_seconds=3600)
        token = scheduler.start()
        ...
        token.cancel()
        scheduler.join()
    """

    def __init__(
        self,
        cycle: CyclePort,
        repeat_seconds: float,
        token: CancellationToken | None = None,
        clock: ClockPort | None = None,
    ) -> None:
        """
        Initialize scheduler.

        Args:
            cycle: Callable running one full reconciliation cycle
            repeat_seconds: Requested interval between cycle starts
            token: Cancellation token; a new one is created if None
            clock: Monotonic clock (defaults to SystemClock)
        """
        if clock is None:
            from src.adapters.clock import SystemClock

            clock = SystemClock()

        self._cycle = cycle
        self._repeat_seconds = repeat_seconds
        self._token = token or CancellationToken()
        self._clock = clock
        self._thread: threading.Thread | None = None
        self._history: list[CycleTiming] = []

    @property
    def token(self) -> CancellationToken:
        return self._token

    @property
    def history(self) -> tuple[CycleTiming, ...]:
        """Timing of every finished cycle."""
        return tuple(self._history)

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> CancellationToken:
        """Start the background loop and return its cancellation token."""
        if self._thread is None:
            self._thread = threading.Thread(
                target=self.run_forever,
                name="query-assignments",
                daemon=True,
            )
            self._thread.start()
            logger.info(
                "assignment loop started (repeat interval: %.1fs)", self._repeat_seconds
            )
        return self._token

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the loop to exit after cancellation. True if it has."""
        if self._thread is None:
            return True
        self._thread.join(timeout=timeout)
        return not self._thread.is_alive()

    def run_once(self) -> CycleTiming:
        """Run a single cycle and compute the wait before the next one."""
        started = self._clock.monotonic()
        try:
            self._cycle()
        except Exception:
            logger.exception("Error in reconciliation cycle")
        elapsed = self._clock.monotonic() - started

        timing = CycleTiming(
            cycle_number=len(self._history) + 1,
            elapsed_seconds=elapsed,
            next_wait_seconds=compute_next_wait(self._repeat_seconds, elapsed),
        )
        self._history.append(timing)
        logger.info(
            "cycle %d took %.1fs, next cycle in %.1fs",
            timing.cycle_number,
            timing.elapsed_seconds,
            timing.next_wait_seconds,
        )
        return timing

    def run_forever(self) -> None:
        """Loop until cancelled. Blocks the calling thread."""
        next_wait = 0.0
        while not self._token.wait(next_wait):
            next_wait = self.run_once().next_wait_seconds
        logger.info("assignment loop stopped")
