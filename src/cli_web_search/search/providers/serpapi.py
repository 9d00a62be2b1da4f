"""SerpAPI provider - Google results through serpapi.com."""

from __future__ import annotations

import httpx

from ...core.logger import get_logger
from ...exceptions import SearchProviderError
from ..base import (
    DateRange,
    SafeSearch,
    SearchOptions,
    SearchProvider,
    SearchResult,
    host_of,
    with_site_filters,
)

logger = get_logger("search.serpapi")

SERPAPI_SEARCH_URL = "https://serpapi.com/search"

_SAFE = {
    SafeSearch.OFF: "off",
    SafeSearch.MODERATE: "medium",
    SafeSearch.STRICT: "active",
}

_TBS = {
    DateRange.DAY: "qdr:d",
    DateRange.WEEK: "qdr:w",
    DateRange.MONTH: "qdr:m",
    DateRange.YEAR: "qdr:y",
}


class SerpApiSearchProvider(SearchProvider):
    """SerpAPI provider using the Google engine."""

    def __init__(
        self,
        api_key: str | None = None,
        client: httpx.AsyncClient | None = None,
        engine: str = "google",
    ) -> None:
        """Initialize SerpAPI provider.

        Args:
            api_key: SerpAPI key
            client: Shared HTTP client
            engine: SerpAPI engine name
        """
        super().__init__(api_key=api_key, client=client)
        self.engine = engine

    @property
    def name(self) -> str:
        return "serpapi"

    async def search(
        self,
        query: str,
        options: SearchOptions | None = None,
    ) -> list[SearchResult]:
        """Search using SerpAPI.

        Args:
            query: Search query
            options: Search options

        Returns:
            List of results
        """
        options = options or SearchOptions()
        api_key = self._require_api_key()
        logger.debug("SerpAPI search: %s", query[:100])

        params: dict[str, str | int] = {
            "q": with_site_filters(query, options),
            "api_key": api_key,
            "engine": self.engine,
            "num": options.num_results,
            "safe": _SAFE[options.safe_search],
        }
        if options.date_range is not None:
            params["tbs"] = _TBS[options.date_range]

        response = await self._request(
            "GET", SERPAPI_SEARCH_URL, params=params, timeout=options.timeout
        )
        data = self._parse_json(response)

        if data.get("error"):
            raise SearchProviderError(str(data["error"]), provider=self.name)

        items = data.get("organic_results") or []
        results = []
        for idx, item in enumerate(items[: options.num_results], 1):
            url = item.get("link") or ""
            results.append(
                SearchResult(
                    title=item.get("title") or "",
                    url=url,
                    snippet=item.get("snippet") or "",
                    position=idx,
                    published_date=item.get("date"),
                    source=item.get("source") or host_of(url),
                )
            )

        logger.debug("SerpAPI returned %d results", len(results))
        return results

    async def _probe(self) -> httpx.Response:
        return await self.client.get(
            SERPAPI_SEARCH_URL,
            params={"q": "test", "api_key": self.api_key, "engine": self.engine, "num": 1},
            timeout=10.0,
        )
