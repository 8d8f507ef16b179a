"""Edge-triggered site watching on two cadences.

The sweep checks every site that is believed to be up and reports the ones
that went down. The recovery watch checks only the sites in the down-set,
usually on a much shorter interval, and reports the ones that came back.
A site is a candidate for exactly one of the two jobs at any time, so each
transition produces a single notification.
"""

import logging
from typing import Callable, List, Optional, Sequence

from .config import (
    DEFAULT_TEMPLATE_ALIVE,
    DEFAULT_TEMPLATE_DOWN,
    DEFAULT_TEMPLATE_UP,
    Settings,
)
from .monitor import CheckResult, check_sites
from .notify import Notifier
from .state import DownSet

logger = logging.getLogger(__name__)

Checker = Callable[[Sequence[str], float, bool], List[CheckResult]]


class SiteWatcher:
    """Owns the down-set and runs the sweep, recovery and liveness jobs."""

    def __init__(
        self,
        sites: Sequence[str],
        notifier: Notifier,
        down_sites: Optional[DownSet] = None,
        timeout: float = 5.0,
        strict: bool = False,
        template_down: str = DEFAULT_TEMPLATE_DOWN,
        template_up: str = DEFAULT_TEMPLATE_UP,
        template_alive: str = DEFAULT_TEMPLATE_ALIVE,
        checker: Checker = check_sites,
    ) -> None:
        self.sites = list(sites)
        self.notifier = notifier
        self.down_sites = down_sites if down_sites is not None else DownSet()
        self.timeout = timeout
        self.strict = strict
        self.template_down = template_down
        self.template_up = template_up
        self.template_alive = template_alive
        self.checker = checker

    def sweep(self) -> List[str]:
        """Check sites not known to be down; notify about new failures."""
        logger.info("Checking sites...")
        candidates = [site for site in self.sites if not self.down_sites.is_down(site)]
        results = self.checker(candidates, self.timeout, self.strict)

        failed = [result.site for result in results if not result.is_up]
        if not failed:
            return []

        # Only sites that actually entered the set are reported
        went_down = self.down_sites.mark_down(failed)
        if went_down:
            logger.info("Sites went down: %s", ", ".join(went_down))
            self.notifier.notify_sites(went_down, self.template_down)
        return went_down

    def watch_recovery(self) -> List[str]:
        """Check sites known to be down; notify about recoveries."""
        logger.info("Checking sites known to be down...")
        candidates = sorted(self.down_sites.snapshot())
        if not candidates:
            return []
        results = self.checker(candidates, self.timeout, self.strict)

        recovered = [result.site for result in results if result.is_up]
        if not recovered:
            return []

        came_back = self.down_sites.mark_up(recovered)
        if came_back:
            logger.info("Sites are up again: %s", ", ".join(came_back))
            self.notifier.notify_sites(came_back, self.template_up)
        return came_back

    def announce_alive(self) -> bool:
        """Send the liveness message regardless of site state."""
        logger.info("Notifying that the service is alive...")
        return self.notifier.send(self.template_alive)

    @classmethod
    def from_settings(
        cls, settings: Settings, notifier: Optional[Notifier] = None
    ) -> "SiteWatcher":
        """Build a watcher (and its notifier) from loaded settings."""
        if notifier is None:
            notifier = Notifier(settings.bot_token, settings.chat_id)
        return cls(
            settings.sites,
            notifier,
            timeout=settings.probe_timeout,
            strict=settings.strict_down_check,
            template_down=settings.template_down,
            template_up=settings.template_up,
            template_alive=settings.template_alive,
        )
