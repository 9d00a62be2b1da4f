"""Tests for SearchCache.

Tests cover:
- Key normalization and provider scoping
- TTL expiry with an injected clock
- Eviction when the cache is full
- Disabled caching
- Statistics and clearing
- Concurrent access
"""

from __future__ import annotations

import threading

from cli_web_search.core.config import CacheConfig
from cli_web_search.search.cache import CacheEntry, CacheStats, SearchCache


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_cache(ttl: int = 60, max_entries: int = 100, enabled: bool = True, clock=None):
    config = CacheConfig(enabled=enabled, ttl_seconds=ttl, max_entries=max_entries)
    return SearchCache(config, clock=clock or FakeClock())


# ==============================================================================
# Key Tests
# ==============================================================================


class TestCacheKey:
    """Tests for cache key construction."""

    def test_key_is_case_folded(self) -> None:
        """Test that keys ignore case and surrounding whitespace."""
        assert SearchCache.make_key("  Rust Async ") == "rust async"

    def test_key_is_provider_scoped(self) -> None:
        """Test that a provider prefixes the key."""
        assert SearchCache.make_key("Rust", "brave") == "brave:rust"


# ==============================================================================
# SearchCache Tests
# ==============================================================================


class TestSearchCache:
    """Tests for SearchCache."""

    def test_cache_set_and_get(self, make_results) -> None:
        """Test setting and getting cached results."""
        cache = make_cache()
        results = make_results(2)

        cache.set("test query", "brave", results)
        cached = cache.get("test query", "brave")

        assert cached is not None
        cached_results, provider = cached
        assert cached_results == results
        assert provider == "brave"

    def test_lookup_is_case_insensitive(self, make_results) -> None:
        """Test that queries differing only in case share an entry."""
        cache = make_cache()
        cache.set("Rust", "brave", make_results(1))

        assert cache.get("rust", "brave") is not None
        assert cache.get("RUST", "brave") is not None

    def test_entries_are_provider_scoped(self, make_results) -> None:
        """Test that another provider does not see the entry."""
        cache = make_cache()
        cache.set("q", "brave", make_results(1))

        assert cache.get("q", "google") is None
        assert cache.get("q") is None

    def test_cache_miss(self) -> None:
        """Test cache miss."""
        cache = make_cache()
        assert cache.get("nonexistent", "brave") is None

    def test_returned_list_is_a_copy(self, make_results) -> None:
        """Test that mutating a returned list does not change the cache."""
        cache = make_cache()
        cache.set("q", "brave", make_results(2))

        results, _ = cache.get("q", "brave")
        results.clear()

        assert len(cache.get("q", "brave")[0]) == 2

    def test_set_overwrites_existing_entry(self, make_results) -> None:
        """Test that setting the same key replaces its results."""
        cache = make_cache()
        cache.set("q", "brave", make_results(1, prefix="Old"))
        cache.set("q", "brave", make_results(1, prefix="New"))

        results, _ = cache.get("q", "brave")
        assert results[0].title == "New 1"
        assert len(cache) == 1


# ==============================================================================
# Expiry Tests
# ==============================================================================


class TestCacheExpiry:
    """Tests for TTL handling."""

    def test_entry_expires_after_ttl(self, make_results) -> None:
        """Test that an entry is invisible once its TTL has elapsed."""
        clock = FakeClock()
        cache = make_cache(ttl=60, clock=clock)
        cache.set("q", "brave", make_results(1))

        clock.advance(59.9)
        assert cache.get("q", "brave") is not None

        clock.advance(0.1)
        assert cache.get("q", "brave") is None

    def test_expired_entry_stays_until_eviction(self, make_results) -> None:
        """Test that reads never remove expired entries."""
        clock = FakeClock()
        cache = make_cache(ttl=10, clock=clock)
        cache.set("q", "brave", make_results(1))

        clock.advance(20)
        assert cache.get("q", "brave") is None
        assert cache.stats().entries == 1

    def test_zero_ttl_never_hits(self, make_results) -> None:
        """Test that a TTL of zero makes every entry immediately stale."""
        cache = make_cache(ttl=0)
        cache.set("q", "brave", make_results(1))
        assert cache.get("q", "brave") is None

    def test_cache_entry_is_expired(self) -> None:
        """Test CacheEntry.is_expired boundary."""
        entry = CacheEntry(results=(), provider="brave", ttl_seconds=5, created_at=100.0)
        assert entry.is_expired(104.9) is False
        assert entry.is_expired(105.0) is True


# ==============================================================================
# Eviction Tests
# ==============================================================================


class TestCacheEviction:
    """Tests for bounded size."""

    def test_max_entries_is_never_exceeded(self, make_results) -> None:
        """Test cache eviction when max size reached."""
        cache = make_cache(max_entries=3)

        for i in range(10):
            cache.set(f"query {i}", "brave", make_results(1))
            assert len(cache) <= 3

        assert cache.get("query 9", "brave") is not None

    def test_expired_entries_are_evicted_first(self, make_results) -> None:
        """Test that eviction drops expired entries before live ones."""
        clock = FakeClock()
        cache = make_cache(ttl=10, max_entries=3, clock=clock)
        cache.set("stale", "brave", make_results(1))
        clock.advance(11)
        cache.set("fresh 1", "brave", make_results(1))
        cache.set("fresh 2", "brave", make_results(1))

        cache.set("fresh 3", "brave", make_results(1))

        assert len(cache) == 3
        assert cache.get("fresh 1", "brave") is not None
        assert cache.get("fresh 2", "brave") is not None
        assert cache.get("fresh 3", "brave") is not None

    def test_single_entry_cache(self, make_results) -> None:
        """Test that a cache of one always keeps the latest entry."""
        cache = make_cache(max_entries=1)
        cache.set("a", "brave", make_results(1))
        cache.set("b", "brave", make_results(1))

        assert len(cache) == 1
        assert cache.get("b", "brave") is not None
        assert cache.get("a", "brave") is None


# ==============================================================================
# Disabled / Stats / Clear Tests
# ==============================================================================


class TestCacheAdministration:
    """Tests for disabled mode, statistics and clearing."""

    def test_disabled_cache_stores_nothing(self, make_results) -> None:
        """Test that a disabled cache ignores set and misses on get."""
        cache = make_cache(enabled=False)
        cache.set("q", "brave", make_results(1))

        assert cache.get("q", "brave") is None
        assert cache.stats().entries == 0
        assert cache.enabled is False

    def test_cache_stats(self, make_results) -> None:
        """Test cache statistics."""
        cache = make_cache(ttl=3600, max_entries=1000)
        cache.set("a", "brave", make_results(1))
        cache.set("b", "google", make_results(1))

        stats = cache.stats()
        assert stats == CacheStats(entries=2, max_entries=1000, ttl_seconds=3600, enabled=True)

    def test_stats_display(self) -> None:
        """Test the human-readable statistics block."""
        stats = CacheStats(entries=5, max_entries=1000, ttl_seconds=3600, enabled=True)
        assert str(stats) == (
            "Cache Statistics:\n"
            "  Entries: 5/1000\n"
            "  TTL: 3600 seconds\n"
            "  Enabled: true"
        )

    def test_cache_clear(self, make_results) -> None:
        """Test clearing cache."""
        cache = make_cache()
        cache.set("a", "brave", make_results(1))
        cache.set("b", "brave", make_results(1))

        cache.clear()

        assert cache.get("a", "brave") is None
        assert cache.stats().entries == 0

    def test_default_config(self) -> None:
        """Test defaults when no config is given."""
        stats = SearchCache().stats()
        assert stats.max_entries == 1000
        assert stats.ttl_seconds == 3600
        assert stats.enabled is True


class TestCacheConcurrency:
    """Tests for concurrent readers and writers."""

    def test_concurrent_set_and_get(self, make_results) -> None:
        """Test that parallel threads keep the size bound and never fail."""
        cache = make_cache(max_entries=50)
        results = make_results(1)
        errors: list[BaseException] = []

        def worker(worker_id: int) -> None:
            try:
                for i in range(200):
                    cache.set(f"q{worker_id}-{i}", "brave", results)
                    cache.get(f"q{worker_id}-{i}", "brave")
                    cache.stats()
            except BaseException as exc:  # noqa: BLE001
                errors.append(exc)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert len(cache) <= 50
