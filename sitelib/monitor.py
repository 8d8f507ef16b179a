"""Batch site checks used by the scheduled jobs."""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Sequence

from health_checks.site_check import probe


@dataclass
class CheckResult:
    """Verdict for a single site from one batch of checks."""

    site: str
    is_up: bool


def check_sites(
    sites: Sequence[str],
    timeout: float = 5.0,
    strict: bool = False,
) -> List[CheckResult]:
    """Probe every site in parallel and return one result per site.

    All probes are started before any result is read, and the call only
    returns once every probe has finished. Results keep the input order.
    """

    sites = list(sites)
    if not sites:
        return []

    # One worker per site so no probe waits behind another
    with ThreadPoolExecutor(max_workers=len(sites)) as executor:
        verdicts = list(
            executor.map(lambda site: probe(site, timeout, strict), sites)
        )

    return [CheckResult(site, is_up) for site, is_up in zip(sites, verdicts)]
