"""Brave search provider - privacy-focused search with an independent index."""

from __future__ import annotations

import httpx

from ...core.logger import get_logger
from ..base import DateRange, SearchOptions, SearchProvider, SearchResult, with_site_filters

logger = get_logger("search.brave")

BRAVE_WEB_URL = "https://api.search.brave.com/res/v1/web/search"
BRAVE_MAX_COUNT = 20

_FRESHNESS = {
    DateRange.DAY: "pd",
    DateRange.WEEK: "pw",
    DateRange.MONTH: "pm",
    DateRange.YEAR: "py",
}


class BraveSearchProvider(SearchProvider):
    """Brave Search web results."""

    @property
    def name(self) -> str:
        return "brave"

    def _headers(self) -> dict[str, str]:
        return {"X-Subscription-Token": self.api_key or "", "Accept": "application/json"}

    async def search(
        self,
        query: str,
        options: SearchOptions | None = None,
    ) -> list[SearchResult]:
        """Search using the Brave web search API.

        Args:
            query: Search query
            options: Search options

        Returns:
            List of results
        """
        options = options or SearchOptions()
        self._require_api_key()
        logger.debug("Brave search: %s", query[:100])

        params: dict[str, str | int] = {
            "q": with_site_filters(query, options),
            "count": min(options.num_results, BRAVE_MAX_COUNT),
            "safesearch": options.safe_search.value,
        }
        if options.date_range is not None:
            params["freshness"] = _FRESHNESS[options.date_range]

        response = await self._request(
            "GET", BRAVE_WEB_URL, params=params, headers=self._headers(), timeout=options.timeout
        )
        data = self._parse_json(response)

        items = (data.get("web") or {}).get("results") or []
        results = [
            SearchResult(
                title=item.get("title") or "",
                url=item.get("url") or "",
                snippet=item.get("description") or "",
                position=idx,
                published_date=item.get("age"),
                source=(item.get("meta_url") or {}).get("hostname"),
            )
            for idx, item in enumerate(items[: options.num_results], 1)
        ]

        logger.debug("Brave returned %d results", len(results))
        return results

    async def _probe(self) -> httpx.Response:
        return await self.client.get(
            BRAVE_WEB_URL, params={"q": "test", "count": 1}, headers=self._headers(), timeout=10.0
        )
