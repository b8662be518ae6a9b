"""
Result Cache

Time-to-live store mapping a URL to its last validation outcome. Freshness
is checked on every lookup, so a periodic sweep only bounds memory and is
never needed for correctness.
"""

import logging
import threading
import time
from typing import Callable, Dict, Optional

from .data_models import CacheEntry, CacheStats

logger = logging.getLogger(__name__)

DEFAULT_TTL = 5 * 60.0


class ResultCache:
    """Thread-safe TTL cache of validation outcomes keyed by URL."""

    def __init__(
        self,
        ttl: float = DEFAULT_TTL,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the cache.

        Args:
            ttl: Seconds an entry stays fresh
            clock: Monotonic time source, injectable for tests
        """
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def lookup(self, url: str) -> Optional[CacheEntry]:
        """Return the fresh entry for url, evicting it if it has expired."""
        now = self._clock()
        with self._lock:
            entry = self._entries.get(url)
            if entry is None:
                return None
            if not entry.is_fresh(now, self.ttl):
                del self._entries[url]
                return None
            return entry

    def store(self, url: str, valid: bool, message: str) -> CacheEntry:
        """Replace whatever is cached for url with a new entry."""
        entry = CacheEntry(valid=valid, message=message, timestamp=self._clock())
        with self._lock:
            self._entries[url] = entry
        return entry

    def sweep(self) -> int:
        """
        Remove all expired entries.

        Returns:
            Number of entries removed
        """
        now = self._clock()
        with self._lock:
            expired = [
                url
                for url, entry in self._entries.items()
                if not entry.is_fresh(now, self.ttl)
            ]
            for url in expired:
                del self._entries[url]

        if expired:
            logger.debug(f"Swept {len(expired)} expired cache entries")
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
        logger.info("Image cache cleared")

    def stats(self) -> CacheStats:
        """
        Snapshot entry counts.

        The hit ratio is the share of fresh entries recording a valid image,
        0.0 when nothing is fresh.
        """
        now = self._clock()
        with self._lock:
            entries = list(self._entries.values())

        fresh = [entry for entry in entries if entry.is_fresh(now, self.ttl)]
        valid_fresh = sum(1 for entry in fresh if entry.valid)

        return CacheStats(
            total_entries=len(entries),
            fresh_entries=len(fresh),
            expired_entries=len(entries) - len(fresh),
            hit_ratio=valid_fresh / len(fresh) if fresh else 0.0,
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, url: str) -> bool:
        return self.lookup(url) is not None


__all__ = ["DEFAULT_TTL", "ResultCache"]
