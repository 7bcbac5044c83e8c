"""In-memory TTL cache of scraped publication lists, keyed by scholar id."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import timedelta

from models import Paper

DEFAULT_TTL = timedelta(hours=24)

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CacheEntry:
    papers: tuple[Paper, ...]
    captured_at: float


class CitationCache:
    """Thread-safe scholar_id -> papers map with lazy expiry on read.

    An entry is stale once ``clock() - captured_at >= ttl``; a stale entry is
    evicted by the ``get`` that finds it. There is no capacity bound and no
    coalescing of concurrent misses: the last ``set`` wins.

    Args:
        ttl: Maximum entry age. Fixed for the cache's lifetime.
        clock: Seconds source, monotonic by default. Injected in tests.
    """

    def __init__(
        self,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl < timedelta(0):
            raise ValueError(f"ttl must not be negative, got {ttl}")
        self._ttl_seconds = ttl.total_seconds()
        self._ttl = ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def get(self, scholar_id: str) -> list[Paper] | None:
        """Return cached papers, or None on a miss or an expired entry."""
        with self._lock:
            entry = self._entries.get(scholar_id)
            if entry is None:
                return None

            elapsed = self._clock() - entry.captured_at
            if elapsed >= self._ttl_seconds:
                del self._entries[scholar_id]
                LOGGER.debug("Cache expired for scholar_id=%s after %.0fs", scholar_id, elapsed)
                return None

            return list(entry.papers)

    def set(self, scholar_id: str, papers: Iterable[Paper]) -> None:
        """Store papers for scholar_id, replacing any existing entry."""
        entry = CacheEntry(papers=tuple(papers), captured_at=self._clock())
        with self._lock:
            self._entries[scholar_id] = entry

    def invalidate(self, scholar_id: str) -> None:
        with self._lock:
            self._entries.pop(scholar_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
