"""Serper provider - Google results through serper.dev."""

from __future__ import annotations

from typing import Any

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

logger = get_logger("search.serper")

SERPER_SEARCH_URL = "https://google.serper.dev/search"

_TBS = {
    DateRange.DAY: "qdr:d",
    DateRange.WEEK: "qdr:w",
    DateRange.MONTH: "qdr:m",
    DateRange.YEAR: "qdr:y",
}


def _domain_from_displayed_link(displayed_link: str | None) -> str | None:
    # Displayed links look like "example.com › path"
    if not displayed_link:
        return None
    return displayed_link.split(" › ")[0].strip() or None


class SerperSearchProvider(SearchProvider):
    """Serper (Google SERP) search provider."""

    @property
    def name(self) -> str:
        return "serper"

    def _headers(self) -> dict[str, str]:
        return {"X-API-KEY": self.api_key or "", "Content-Type": "application/json"}

    async def search(
        self,
        query: str,
        options: SearchOptions | None = None,
    ) -> list[SearchResult]:
        """Search using the Serper API.

        Args:
            query: Search query
            options: Search options

        Returns:
            List of results
        """
        options = options or SearchOptions()
        self._require_api_key()
        logger.debug("Serper search: %s", query[:100])

        payload: dict[str, Any] = {
            "q": with_site_filters(query, options),
            "num": options.num_results,
            "safe": options.safe_search is not SafeSearch.OFF,
        }
        if options.date_range is not None:
            payload["tbs"] = _TBS[options.date_range]

        response = await self._request(
            "POST", SERPER_SEARCH_URL, json=payload, headers=self._headers(), timeout=options.timeout
        )
        data = self._parse_json(response)

        items = data.get("organic") or []
        results = [
            SearchResult(
                title=item.get("title") or "",
                url=item.get("link") or "",
                snippet=item.get("snippet") or "",
                position=idx,
                published_date=item.get("date"),
                source=_domain_from_displayed_link(item.get("displayedLink")),
            )
            for idx, item in enumerate(items[: options.num_results], 1)
        ]

        logger.debug("Serper returned %d results", len(results))
        return results

    async def _probe(self) -> httpx.Response:
        return await self.client.post(
            SERPER_SEARCH_URL, json={"q": "test", "num": 1}, headers=self._headers(), timeout=10.0
        )
