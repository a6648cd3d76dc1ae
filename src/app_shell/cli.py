import argparse
import logging
import signal
from types import FrameType

from src.adapters.clock import SystemClock
from src.adapters.mealie_store import MealieStoreAdapter
from src.app_shell.config import Settings, SettingsError
from src.components.reconcile import RunCycleInput, run_cycle
from src.components.scheduler import CancellationToken, create_scheduler
from src.core.ports.store import StoreError
from src.rules.loader import AssignmentConfigError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("cli")

JOIN_POLL_SECONDS = 1.0


def wait_for_store(
    store: MealieStoreAdapter,
    grace_secs: int,
    clock: SystemClock | None = None,
) -> bool:
    """Try the connectivity check once per second for up to grace_secs attempts."""
    clock = clock or SystemClock()
    for attempt in range(1, max(grace_secs, 1) + 1):
        try:
            store.check()
            return True
        except StoreError as e:
            logger.warning(
                "cannot connect to mealie, retrying at most %d more times every 1s: %s",
                max(grace_secs - attempt, 0),
                e,
            )
        if attempt < grace_secs:
            clock.sleep(1.0)
    return False


def install_signal_handlers(token: CancellationToken) -> None:
    """Cancel the loop on SIGINT (user) and SIGTERM (OS)."""

    def handle(signum: int, frame: FrameType | None) -> None:
        logger.info("caught signal %s", signal.Signals(signum).name)
        token.cancel()

    signal.signal(signal.SIGINT, handle)
    signal.signal(signal.SIGTERM, handle)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Keep Mealie categories and tags in sync with query assignments"
    )
    parser.add_argument("--once", action="store_true", help="Run a single cycle and exit")
    args = parser.parse_args(argv)

    try:
        settings = Settings()
    except (SettingsError, AssignmentConfigError, FileNotFoundError) as e:
        logger.error("config not sane: %s", e)
        return 1

    logging.getLogger().setLevel(settings.log_level)
    logger.info("using config: %r", settings)

    store = MealieStoreAdapter(settings.mealie_url, settings.mealie_token)
    try:
        if not wait_for_store(store, settings.startup_grace_secs):
            logger.error("mealie connection cannot be established")
            return 1

        if args.once:
            if not settings.assignments.enabled:
                logger.info("no query assignments configured, nothing to do")
                return 0
            report = run_cycle(RunCycleInput(config=settings.assignments), store=store)
            return 1 if report.skipped else 0

        token = CancellationToken()
        scheduler = create_scheduler(settings.assignments, store=store, token=token)
        if scheduler is None:
            return 0

        install_signal_handlers(token)
        scheduler.start()
        while not scheduler.join(timeout=JOIN_POLL_SECONDS):
            pass
        return 0
    finally:
        store.close()


if __name__ == "__main__":
    raise SystemExit(main())
