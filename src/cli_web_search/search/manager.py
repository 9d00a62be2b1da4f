"""Search manager combining the result cache with provider fallback."""

from __future__ import annotations

import time
from typing import Any

from ..core.config import CacheConfig
from ..core.logger import get_logger
from ..exceptions import SearchError
from .base import SearchOptions, SearchResponse, SearchResult
from .cache import CacheStats, SearchCache
from .registry import ProviderRegistry

logger = get_logger("search.manager")


class SearchManager:
    """Unified search entry point used by the CLI and the MCP server.

    A search first consults the cache, then falls through to
    :meth:`ProviderRegistry.search_with_fallback` and stores whatever the
    winning provider returned.
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        cache: SearchCache | None = None,
        cache_config: CacheConfig | None = None,
    ) -> None:
        """Initialize the search manager.

        Args:
            registry: Providers to search
            cache: Cache instance to use (built from ``cache_config`` if None)
            cache_config: Cache settings when no cache instance is given
        """
        self.registry = registry
        self.cache = cache if cache is not None else SearchCache(cache_config)

        self._total_searches = 0
        self._cache_hits = 0
        self._failed_searches = 0

    def _lookup_cache(
        self,
        query: str,
        provider: str | None,
    ) -> tuple[list[SearchResult], str] | None:
        """Find cached results for the provider or, without one, any candidate.

        Entries are always stored under the provider that produced them, so a
        search without a provider hint checks each candidate in search order.
        """
        if provider:
            return self.cache.get(query, provider)
        for candidate in self.registry.providers_in_order():
            hit = self.cache.get(query, candidate.name)
            if hit is not None:
                return hit
        return None

    async def search(
        self,
        query: str,
        options: SearchOptions | None = None,
        provider: str | None = None,
        use_cache: bool = True,
    ) -> SearchResponse:
        """Perform a search query.

        Args:
            query: Search query string
            options: Search options
            provider: Provider to try first (None follows the fallback order)
            use_cache: Whether to read and write the result cache

        Returns:
            SearchResponse with results

        Raises:
            SearchError: If the query is empty or the search fails
        """
        self._total_searches += 1

        if not query or not query.strip():
            self._failed_searches += 1
            raise SearchError("Search query cannot be empty")
        query = query.strip()

        if use_cache:
            cached = self._lookup_cache(query, provider)
            if cached is not None:
                results, cached_provider = cached
                self._cache_hits += 1
                logger.debug("Using cached results from %s", cached_provider)
                return SearchResponse.build(query, cached_provider, results, cached=True)

        logger.info("Searching for: %s", query[:100])
        start_time = time.perf_counter()
        try:
            results, provider_used = await self.registry.search_with_fallback(
                query, options, preferred_provider=provider
            )
        except SearchError:
            self._failed_searches += 1
            raise
        search_time_ms = int((time.perf_counter() - start_time) * 1000)

        if use_cache:
            self.cache.set(query, provider_used, results)

        logger.info(
            "Search completed: %d results from %s in %dms",
            len(results),
            provider_used,
            search_time_ms,
        )
        return SearchResponse.build(query, provider_used, results, search_time_ms)

    def cache_stats(self) -> CacheStats:
        return self.cache.stats()

    def clear_cache(self) -> None:
        """Clear the search cache."""
        self.cache.clear()

    def get_stats(self) -> dict[str, Any]:
        """Get search manager statistics.

        Returns:
            Dictionary with statistics
        """
        return {
            "total_searches": self._total_searches,
            "cache_hits": self._cache_hits,
            "failed_searches": self._failed_searches,
            "providers": [status.name for status in self.registry.list_providers()],
            "configured_providers": [p.name for p in self.registry.configured_providers()],
        }

    async def aclose(self) -> None:
        """Release provider HTTP clients."""
        await self.registry.aclose()
