"""Google Custom Search Engine provider."""

from __future__ import annotations

import httpx

from ...core.config import ENV_PREFIX
from ...core.logger import get_logger
from ...exceptions import MissingApiKeyError
from ..base import (
    DateRange,
    SafeSearch,
    SearchOptions,
    SearchProvider,
    SearchResult,
    with_site_filters,
)

logger = get_logger("search.google")

GOOGLE_CSE_URL = "https://www.googleapis.com/customsearch/v1"
GOOGLE_MAX_NUM = 10

_SAFE = {
    SafeSearch.OFF: "off",
    SafeSearch.MODERATE: "medium",
    SafeSearch.STRICT: "high",
}

_DATE_RESTRICT = {
    DateRange.DAY: "d1",
    DateRange.WEEK: "w1",
    DateRange.MONTH: "m1",
    DateRange.YEAR: "y1",
}


class GoogleSearchProvider(SearchProvider):
    """Google Custom Search provider.

    Requires both an API key and a Custom Search Engine ID (``cx``). The API
    returns at most 10 results per request.
    """

    def __init__(
        self,
        api_key: str | None = None,
        cx: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize Google Custom Search provider.

        Args:
            api_key: Google API key
            cx: Custom Search Engine ID
            client: Shared HTTP client
        """
        super().__init__(api_key=api_key, client=client)
        self.cx = cx

    @property
    def name(self) -> str:
        return "google"

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.api_key.strip() and self.cx and self.cx.strip())

    def _require_api_key(self) -> str:
        if not (self.api_key and self.api_key.strip()):
            raise MissingApiKeyError(self.name, self.api_key_env_var)
        if not (self.cx and self.cx.strip()):
            raise MissingApiKeyError(self.name, f"{ENV_PREFIX}GOOGLE_CX")
        return self.api_key

    async def search(
        self,
        query: str,
        options: SearchOptions | None = None,
    ) -> list[SearchResult]:
        """Search using Google Custom Search.

        Args:
            query: Search query
            options: Search options

        Returns:
            List of results
        """
        options = options or SearchOptions()
        api_key = self._require_api_key()
        logger.debug("Google search: %s", query[:100])

        params: dict[str, str | int] = {
            "key": api_key,
            "cx": self.cx or "",
            "q": with_site_filters(query, options),
            "num": min(options.num_results, GOOGLE_MAX_NUM),
            "safe": _SAFE[options.safe_search],
        }
        if options.date_range is not None:
            params["dateRestrict"] = _DATE_RESTRICT[options.date_range]

        response = await self._request("GET", GOOGLE_CSE_URL, params=params, timeout=options.timeout)
        data = self._parse_json(response)

        items = data.get("items") or []
        results = [
            SearchResult(
                title=item.get("title") or "",
                url=item.get("link") or "",
                snippet=item.get("snippet") or "",
                position=idx,
                source=item.get("displayLink"),
            )
            for idx, item in enumerate(items[: options.num_results], 1)
        ]

        logger.debug("Google returned %d results", len(results))
        return results

    async def _probe(self) -> httpx.Response:
        return await self.client.get(
            GOOGLE_CSE_URL,
            params={"key": self.api_key, "cx": self.cx, "q": "test", "num": 1},
            timeout=10.0,
        )
