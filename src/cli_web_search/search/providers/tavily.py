"""Tavily search provider - search API built for LLM agents."""

from __future__ import annotations

from typing import Any

import httpx

from ...core.logger import get_logger
from ..base import SearchOptions, SearchProvider, SearchResult, host_of

logger = get_logger("search.tavily")

TAVILY_SEARCH_URL = "https://api.tavily.com/search"
TAVILY_MAX_RESULTS = 20


class TavilySearchProvider(SearchProvider):
    """Tavily search provider.

    Domain filters are passed natively through ``include_domains`` and
    ``exclude_domains``.
    """

    def __init__(
        self,
        api_key: str | None = None,
        client: httpx.AsyncClient | None = None,
        search_depth: str = "basic",
    ) -> None:
        """Initialize Tavily provider.

        Args:
            api_key: Tavily API key
            client: Shared HTTP client
            search_depth: Search depth (basic or advanced)
        """
        super().__init__(api_key=api_key, client=client)
        self.search_depth = search_depth

    @property
    def name(self) -> str:
        return "tavily"

    def _payload(self, query: str, max_results: int) -> dict[str, Any]:
        return {
            "api_key": self.api_key,
            "query": query,
            "max_results": max_results,
            "search_depth": self.search_depth,
        }

    async def search(
        self,
        query: str,
        options: SearchOptions | None = None,
    ) -> list[SearchResult]:
        """Search using the Tavily API.

        Args:
            query: Search query
            options: Search options

        Returns:
            List of results
        """
        options = options or SearchOptions()
        self._require_api_key()
        logger.debug("Tavily search: %s", query[:100])

        payload = self._payload(query, min(options.num_results, TAVILY_MAX_RESULTS))
        if options.include_domains:
            payload["include_domains"] = list(options.include_domains)
        if options.exclude_domains:
            payload["exclude_domains"] = list(options.exclude_domains)

        response = await self._request(
            "POST", TAVILY_SEARCH_URL, json=payload, timeout=options.timeout
        )
        data = self._parse_json(response)

        items = data.get("results") or []
        results = []
        for idx, item in enumerate(items[: options.num_results], 1):
            url = item.get("url") or ""
            results.append(
                SearchResult(
                    title=item.get("title") or "",
                    url=url,
                    snippet=item.get("content") or "",
                    position=idx,
                    published_date=item.get("published_date"),
                    source=host_of(url),
                )
            )

        logger.debug("Tavily returned %d results", len(results))
        return results

    async def _probe(self) -> httpx.Response:
        return await self.client.post(
            TAVILY_SEARCH_URL, json=self._payload("test", 1), timeout=10.0
        )
