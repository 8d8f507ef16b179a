"""Run the site monitor until interrupted."""

import logging
import sys
import time

from dotenv import load_dotenv

import scheduler
from sitelib.config import ConfigError, Settings, load_settings
from sitelib.watcher import SiteWatcher

logger = logging.getLogger(__name__)

SWEEP_JOB = "sweep"
RECOVERY_JOB = "recovery_watch"
ALIVE_JOB = "alive_self"


def schedule_jobs(settings: Settings, watcher: SiteWatcher) -> None:
    """Register the sweep, recovery watch and liveness jobs."""

    scheduler.add_job(SWEEP_JOB, watcher.sweep, settings.interval * 60)
    logger.info(
        "Checking sites every %s minutes. Next check is at %s",
        settings.interval,
        scheduler.next_run_time(SWEEP_JOB),
    )

    scheduler.add_job(RECOVERY_JOB, watcher.watch_recovery, settings.nervous_interval * 60)
    logger.info(
        "Checking sites known to be down every %s minutes. Next check is at %s",
        settings.nervous_interval,
        scheduler.next_run_time(RECOVERY_JOB),
    )

    try:
        trigger = scheduler.parse_cron(settings.cron_alive)
    except ValueError as exc:
        logger.warning(
            "Invalid CRON_ALIVE_SELF format (%s). Ignoring self-alive notification.", exc
        )
        return
    scheduler.add_cron_job(ALIVE_JOB, watcher.announce_alive, trigger)
    logger.info(
        "Notifying that the service is alive every: %s (next at %s)",
        settings.cron_alive,
        scheduler.next_run_time(ALIVE_JOB),
    )


def _wait_forever(poll: float = 1.0) -> None:
    try:
        while scheduler.any_running():
            time.sleep(poll)
    except KeyboardInterrupt:
        logger.info("Stopping site monitor")
    finally:
        scheduler.stop_all()


def main() -> None:
    """Entry point for running the monitor with ``python site_monitor.py``."""

    load_dotenv()
    try:
        settings = load_settings()
    except ConfigError as exc:
        logging.basicConfig(level=logging.INFO)
        logger.error("%s", exc)
        sys.exit(1)

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Checking Sites: %s", settings.sites)

    watcher = SiteWatcher.from_settings(settings)
    schedule_jobs(settings, watcher)

    # Interval jobs run once right away, establishing the initial state
    scheduler.start_all()
    _wait_forever()


if __name__ == "__main__":
    main()
