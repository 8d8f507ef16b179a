"""Health check for plain site reachability."""

import logging

import requests

logger = logging.getLogger(__name__)


def is_up_status(status_code: int, strict: bool = False) -> bool:
    """Return True if ``status_code`` counts as up under the given policy.

    In strict mode a site that answered at all is considered up, even with a
    3xx, 4xx or 5xx status. Only a missing response means the site is down.
    """
    if 200 <= status_code < 300:
        return True
    return strict and 300 <= status_code < 600


def probe(site: str, timeout: float = 5.0, strict: bool = False) -> bool:
    """Request ``site`` once and report whether it is up.

    Only the status line and headers are awaited; the body is never read,
    so a slow or endless body cannot hold the check past ``timeout``.
    """
    try:
        with requests.get(site, timeout=timeout, stream=True) as response:
            status = response.status_code
    except Exception as exc:
        logger.debug("No response from %s: %s", site, exc)
        return False

    up = is_up_status(status, strict)
    if not up:
        logger.debug("%s answered with status %s", site, status)
    return up
