"""Visited URL bookkeeping."""

import threading


class VisitedURLs:
    """Append-only set of URLs with an atomic check-and-insert."""

    def __init__(self):
        self._urls: set[str] = set()
        self._lock = threading.Lock()

    def reserve(self, url: str) -> bool:
        """Add url to the set. Returns False if it was already present."""
        with self._lock:
            if url in self._urls:
                return False
            self._urls.add(url)
            return True

    def snapshot(self) -> frozenset[str]:
        """Return the visited URLs at this moment."""
        with self._lock:
            return frozenset(self._urls)

    def __contains__(self, url: str) -> bool:
        with self._lock:
            return url in self._urls

    def __len__(self) -> int:
        with self._lock:
            return len(self._urls)
