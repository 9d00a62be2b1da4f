"""Bing Web Search provider (Azure Cognitive Services)."""

from __future__ import annotations

import httpx

from ...core.logger import get_logger
from ..base import (
    DateRange,
    SafeSearch,
    SearchOptions,
    SearchProvider,
    SearchResult,
    with_site_filters,
)

logger = get_logger("search.bing")

BING_SEARCH_URL = "https://api.bing.microsoft.com/v7.0/search"
BING_MAX_COUNT = 50

_SAFE_SEARCH = {
    SafeSearch.OFF: "Off",
    SafeSearch.MODERATE: "Moderate",
    SafeSearch.STRICT: "Strict",
}

_FRESHNESS = {
    DateRange.DAY: "Day",
    DateRange.WEEK: "Week",
    DateRange.MONTH: "Month",
    DateRange.YEAR: "Year",
}


class BingSearchProvider(SearchProvider):
    """Bing Web Search API v7 provider."""

    @property
    def name(self) -> str:
        return "bing"

    def _headers(self) -> dict[str, str]:
        return {"Ocp-Apim-Subscription-Key": self.api_key or ""}

    async def search(
        self,
        query: str,
        options: SearchOptions | None = None,
    ) -> list[SearchResult]:
        """Search using Bing Web Search API.

        Args:
            query: Search query
            options: Search options

        Returns:
            List of results
        """
        options = options or SearchOptions()
        self._require_api_key()
        logger.debug("Bing search: %s", query[:100])

        params: dict[str, str | int] = {
            "q": with_site_filters(query, options),
            "count": min(options.num_results, BING_MAX_COUNT),
            "safeSearch": _SAFE_SEARCH[options.safe_search],
            "textFormat": "Raw",
        }
        if options.date_range is not None:
            params["freshness"] = _FRESHNESS[options.date_range]

        response = await self._request(
            "GET", BING_SEARCH_URL, params=params, headers=self._headers(), timeout=options.timeout
        )
        data = self._parse_json(response)

        items = (data.get("webPages") or {}).get("value") or []
        results = [
            SearchResult(
                title=item.get("name") or "",
                url=item.get("url") or "",
                snippet=item.get("snippet") or "",
                position=idx,
                published_date=item.get("dateLastCrawled"),
                source=item.get("displayUrl"),
            )
            for idx, item in enumerate(items[: options.num_results], 1)
        ]

        logger.debug("Bing returned %d results", len(results))
        return results

    async def _probe(self) -> httpx.Response:
        return await self.client.get(
            BING_SEARCH_URL, params={"q": "test", "count": 1}, headers=self._headers(), timeout=10.0
        )
