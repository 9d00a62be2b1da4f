"""Firecrawl search provider."""

from __future__ import annotations

from typing import Any

import httpx

from ...core.logger import get_logger
from ...exceptions import SearchProviderError, SearchTimeoutError
from ..base import DateRange, SearchOptions, SearchProvider, SearchResult, with_site_filters

logger = get_logger("search.firecrawl")

FIRECRAWL_SEARCH_URL = "https://api.firecrawl.dev/v2/search"
FIRECRAWL_MAX_TIMEOUT_MS = 60000

_TBS = {
    DateRange.DAY: "qdr:d",
    DateRange.WEEK: "qdr:w",
    DateRange.MONTH: "qdr:m",
    DateRange.YEAR: "qdr:y",
}


class FirecrawlSearchProvider(SearchProvider):
    """Firecrawl web search provider.

    Firecrawl reports its own server-side timeout as HTTP 408, which is
    surfaced as :class:`SearchTimeoutError`.
    """

    @property
    def name(self) -> str:
        return "firecrawl"

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"}

    def _payload(self, query: str, limit: int, timeout: float) -> dict[str, Any]:
        return {
            "query": query,
            "limit": limit,
            "sources": ["web"],
            "country": "US",
            "timeout": min(int(timeout * 1000), FIRECRAWL_MAX_TIMEOUT_MS),
        }

    async def search(
        self,
        query: str,
        options: SearchOptions | None = None,
    ) -> list[SearchResult]:
        """Search using the Firecrawl API.

        Args:
            query: Search query
            options: Search options

        Returns:
            List of results
        """
        options = options or SearchOptions()
        self._require_api_key()
        logger.debug("Firecrawl search: %s", query[:100])

        payload = self._payload(
            with_site_filters(query, options), options.num_results, options.timeout
        )
        if options.date_range is not None:
            payload["tbs"] = _TBS[options.date_range]

        response = await self._request(
            "POST",
            FIRECRAWL_SEARCH_URL,
            json=payload,
            headers=self._headers(),
            timeout=options.timeout,
        )
        data = self._parse_json(response)

        if not data.get("success", False):
            raise SearchProviderError(data.get("warning") or "Unknown error", provider=self.name)

        items = (data.get("data") or {}).get("web") or []
        results = [
            SearchResult(
                title=item.get("title") or "",
                url=item.get("url") or "",
                snippet=item.get("description") or "",
                position=idx,
                source=(item.get("metadata") or {}).get("sourceURL"),
            )
            for idx, item in enumerate(items[: options.num_results], 1)
        ]

        logger.debug("Firecrawl returned %d results", len(results))
        return results

    def _check_response(self, response: httpx.Response) -> None:
        if response.status_code == 408:
            timeout = response.request.extensions.get("timeout", {}).get("read")
            raise SearchTimeoutError(timeout or 0, provider=self.name)
        super()._check_response(response)

    async def _probe(self) -> httpx.Response:
        return await self.client.post(
            FIRECRAWL_SEARCH_URL,
            json=self._payload("test", 1, 10.0),
            headers=self._headers(),
            timeout=10.0,
        )
