"""
In-process search-scope cache.

Per-worker dictionary of raw search results keyed by trip signature,
with lazy TTL expiry and a blunt size cap: once the entry count exceeds
max_entries the whole cache is cleared before the next insert. This is
not LRU; an LRU implementation can replace it behind the same
SearchCache protocol without touching callers.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional, Tuple

from flight_results.config import CacheConfig
from flight_results.schemas.search import RawSearchResult

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class InMemorySearchCache:
    """
    Thread-safe in-memory SearchCache.

    Each operation holds the lock; the get-then-set sequence performed by
    the orchestrator is not atomic (see SearchCache).

    Attributes:
        _entries: Signature -> (stored_at, entry).
        _ttl: Time-to-live for entries.
        _max_entries: Entry count above which the cache is cleared.
        _clock: Time source, injectable for tests.
        _lock: Lock for thread-safe access.
    """

    def __init__(
        self,
        ttl: Optional[timedelta] = None,
        max_entries: Optional[int] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        """
        Initialize cache.

        Args:
            ttl: Entry lifetime. Defaults to CacheConfig().ttl (1 hour).
            max_entries: Size cap. Defaults to CacheConfig().max_entries (100).
            clock: Callable returning the current time.
        """
        defaults = CacheConfig()
        self._ttl = ttl if ttl is not None else defaults.ttl
        self._max_entries = max_entries if max_entries is not None else defaults.max_entries
        self._clock = clock or datetime.now
        self._entries: Dict[str, Tuple[datetime, RawSearchResult]] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: CacheConfig) -> "InMemorySearchCache":
        return cls(ttl=config.ttl, max_entries=config.max_entries)

    def get(self, signature: str) -> Optional[RawSearchResult]:
        """Get a live entry, dropping it if its TTL has elapsed."""
        with self._lock:
            item = self._entries.get(signature)
            if item is None:
                return None
            stored_at, entry = item
            if self._clock() - stored_at > self._ttl:
                del self._entries[signature]
                logger.debug("Cache entry expired: %s", signature)
                return None
            return entry

    def set(self, signature: str, entry: RawSearchResult) -> None:
        """Store an entry, clearing everything first if over the cap."""
        with self._lock:
            if len(self._entries) > self._max_entries:
                logger.info(
                    "Search cache over %d entries, clearing %d",
                    self._max_entries,
                    len(self._entries),
                )
                self._entries.clear()
            self._entries[signature] = (self._clock(), entry)

    def clear(self) -> None:
        """Drop all entries."""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, signature: str) -> bool:
        with self._lock:
            return signature in self._entries
