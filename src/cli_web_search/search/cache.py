"""Search result caching for repeated queries."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from ..core.config import CacheConfig
from ..core.logger import get_logger
from .base import SearchResult

logger = get_logger("search.cache")


class _ReadWriteLock:
    """Lock allowing many concurrent readers or a single writer."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writing = False

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writing:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            while self._writing or self._readers:
                self._cond.wait()
            self._writing = True
        try:
            yield
        finally:
            with self._cond:
                self._writing = False
                self._cond.notify_all()


@dataclass(frozen=True)
class CacheEntry:
    """Results stored for one cache key."""

    results: tuple[SearchResult, ...]
    provider: str
    ttl_seconds: float
    created_at: float

    def is_expired(self, now: float) -> bool:
        return now - self.created_at >= self.ttl_seconds


@dataclass(frozen=True)
class CacheStats:
    """Read-only snapshot of cache state."""

    entries: int
    max_entries: int
    ttl_seconds: int
    enabled: bool

    def __str__(self) -> str:
        return (
            "Cache Statistics:\n"
            f"  Entries: {self.entries}/{self.max_entries}\n"
            f"  TTL: {self.ttl_seconds} seconds\n"
            f"  Enabled: {str(self.enabled).lower()}"
        )


class SearchCache:
    """In-memory cache for search results with TTL support.

    Expired entries are not removed when read; they are reclaimed by the
    eviction pass that runs when :meth:`set` finds the cache full. Eviction
    first drops every expired entry, then drops arbitrary entries until the
    cache is below ``max_entries``.
    """

    def __init__(
        self,
        config: CacheConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize search cache.

        Args:
            config: Cache settings (enabled, ttl_seconds, max_entries)
            clock: Monotonic time source in seconds
        """
        self._config = config or CacheConfig()
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = _ReadWriteLock()
        logger.debug(
            "SearchCache initialized (enabled=%s, ttl=%ds, max_entries=%d)",
            self._config.enabled,
            self._config.ttl_seconds,
            self._config.max_entries,
        )

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    @staticmethod
    def make_key(query: str, provider: str | None = None) -> str:
        """Build the cache key: case-folded query, optionally provider-scoped."""
        normalized = query.strip().lower()
        if provider:
            return f"{provider}:{normalized}"
        return normalized

    def get(
        self,
        query: str,
        provider: str | None = None,
    ) -> tuple[list[SearchResult], str] | None:
        """Get cached results if available and not expired.

        Args:
            query: Search query
            provider: Provider the results must come from (optional)

        Returns:
            ``(results, provider name)`` or None on a miss
        """
        if not self._config.enabled:
            return None

        key = self.make_key(query, provider)
        with self._lock.read():
            entry = self._entries.get(key)
            if entry is None or entry.is_expired(self._clock()):
                return None
            logger.debug("Cache hit for query: %s (provider=%s)", query[:50], entry.provider)
            return list(entry.results), entry.provider

    def set(self, query: str, provider: str, results: list[SearchResult]) -> None:
        """Store results produced by ``provider`` for ``query``.

        Args:
            query: Search query
            provider: Provider that produced the results
            results: Results to cache
        """
        if not self._config.enabled:
            return

        key = self.make_key(query, provider)
        with self._lock.write():
            if len(self._entries) >= self._config.max_entries:
                self._evict()
            self._entries[key] = CacheEntry(
                results=tuple(results),
                provider=provider,
                ttl_seconds=self._config.ttl_seconds,
                created_at=self._clock(),
            )

    def _evict(self) -> None:
        """Make room for one entry. Caller holds the write lock."""
        expired = self._expire_sweep()
        trimmed = self._trim()
        logger.debug("Cache eviction: %d expired, %d trimmed", expired, trimmed)

    def _expire_sweep(self) -> int:
        now = self._clock()
        stale = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def _trim(self) -> int:
        removed = 0
        while self._entries and len(self._entries) >= self._config.max_entries:
            # No recency is tracked; drop whichever key iterates first.
            del self._entries[next(iter(self._entries))]
            removed += 1
        return removed

    def clear(self) -> None:
        """Remove every entry."""
        with self._lock.write():
            self._entries.clear()
        logger.debug("Search cache cleared")

    def stats(self) -> CacheStats:
        """Snapshot of entry count and configuration."""
        with self._lock.read():
            entries = len(self._entries)
        return CacheStats(
            entries=entries,
            max_entries=self._config.max_entries,
            ttl_seconds=self._config.ttl_seconds,
            enabled=self._config.enabled,
        )

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._entries)
