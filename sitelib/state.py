"""Thread-safe tracking of the sites currently believed to be down."""

import threading
from typing import Iterable, List, Set


class DownSet:
    """Set of sites observed down and not yet observed up again."""

    def __init__(self, sites: Iterable[str] = ()) -> None:
        self._sites: Set[str] = set(sites)
        self._lock = threading.Lock()

    def mark_down(self, sites: Iterable[str]) -> List[str]:
        """Add ``sites`` and return the ones that were not already down."""
        added: List[str] = []
        with self._lock:
            for site in sites:
                if site not in self._sites:
                    self._sites.add(site)
                    added.append(site)
        return added

    def mark_up(self, sites: Iterable[str]) -> List[str]:
        """Remove ``sites`` and return the ones that were actually down."""
        removed: List[str] = []
        with self._lock:
            for site in sites:
                if site in self._sites:
                    self._sites.discard(site)
                    removed.append(site)
        return removed

    def snapshot(self) -> Set[str]:
        with self._lock:
            return set(self._sites)

    def is_down(self, site: str) -> bool:
        with self._lock:
            return site in self._sites

    def __contains__(self, site: object) -> bool:
        with self._lock:
            return site in self._sites

    def __len__(self) -> int:
        with self._lock:
            return len(self._sites)
