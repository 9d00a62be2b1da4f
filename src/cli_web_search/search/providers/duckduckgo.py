"""DuckDuckGo search provider - free, no API key required."""

from __future__ import annotations

import asyncio
import functools
import re
from typing import Any

from duckduckgo_search import DDGS
from duckduckgo_search.exceptions import (
    DuckDuckGoSearchException,
    RatelimitException,
    TimeoutException,
)

from ...core.logger import get_logger
from ...exceptions import (
    SearchConfigError,
    SearchNetworkError,
    SearchProviderError,
    SearchRateLimitError,
)
from ..base import (
    DateRange,
    SafeSearch,
    SearchOptions,
    SearchProvider,
    SearchResult,
    host_of,
    with_site_filters,
)

logger = get_logger("search.duckduckgo")

_SAFESEARCH = {
    SafeSearch.OFF: "off",
    SafeSearch.MODERATE: "moderate",
    SafeSearch.STRICT: "on",
}

_TIMELIMIT = {
    DateRange.DAY: "d",
    DateRange.WEEK: "w",
    DateRange.MONTH: "m",
    DateRange.YEAR: "y",
}


class DuckDuckGoProvider(SearchProvider):
    """DuckDuckGo search provider.

    Uses the ``duckduckgo_search`` client, which is blocking, from the
    default executor. Configured whenever it is enabled.
    """

    def __init__(self, enabled: bool = True, region: str = "wt-wt") -> None:
        """Initialize DuckDuckGo provider.

        Args:
            enabled: Whether the provider may be used
            region: Region for search results (wt-wt = worldwide)
        """
        super().__init__(api_key=None)
        self.enabled = enabled
        self.region = region

    @property
    def name(self) -> str:
        return "duckduckgo"

    @property
    def requires_api_key(self) -> bool:
        return False

    @property
    def is_configured(self) -> bool:
        return self.enabled

    def _text_search(self, query: str, options: SearchOptions) -> list[dict[str, Any]]:
        kwargs: dict[str, Any] = {
            "region": self.region,
            "safesearch": _SAFESEARCH[options.safe_search],
            "max_results": options.num_results,
        }
        if options.date_range is not None:
            kwargs["timelimit"] = _TIMELIMIT[options.date_range]
        return DDGS(timeout=int(options.timeout)).text(query, **kwargs) or []

    async def _run(self, query: str, options: SearchOptions) -> list[dict[str, Any]]:
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(
                None, functools.partial(self._text_search, query, options)
            )
        except RatelimitException as exc:
            raise SearchRateLimitError(self.name) from exc
        except TimeoutException as exc:
            raise SearchNetworkError(str(exc), provider=self.name) from exc
        except DuckDuckGoSearchException as exc:
            raise SearchProviderError(str(exc), provider=self.name) from exc

    async def search(
        self,
        query: str,
        options: SearchOptions | None = None,
    ) -> list[SearchResult]:
        """Search using DuckDuckGo.

        Args:
            query: Search query
            options: Search options

        Returns:
            List of results
        """
        options = options or SearchOptions()
        if not self.enabled:
            raise SearchConfigError(
                "DuckDuckGo provider is disabled", config_key="providers.duckduckgo.enabled"
            )
        logger.debug("DuckDuckGo search: %s", query[:100])

        items = await self._run(with_site_filters(query, options), options)

        results: list[SearchResult] = []
        for idx, item in enumerate(items[: options.num_results], 1):
            url = (item.get("href") or "").strip()
            results.append(
                SearchResult(
                    title=(item.get("title") or "").strip(),
                    url=url,
                    snippet=re.sub(r"\s+", " ", item.get("body") or "").strip(),
                    position=idx,
                    source=host_of(url),
                )
            )

        logger.debug("DuckDuckGo returned %d results", len(results))
        return results

    async def validate_api_key(self) -> bool:
        """DuckDuckGo has no key; probe with a one-result search instead."""
        if not self.is_configured:
            return False
        await self._run("test", SearchOptions(num_results=1, timeout=10.0))
        return True
