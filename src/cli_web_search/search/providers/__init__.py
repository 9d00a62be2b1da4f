"""Search provider implementations.

Available providers:
- BraveSearchProvider: Brave Search API
- GoogleSearchProvider: Google Custom Search
- DuckDuckGoProvider: DuckDuckGo (no API key required)
- TavilySearchProvider: Tavily search API
- SerperSearchProvider: Google results via serper.dev
- FirecrawlSearchProvider: Firecrawl search API
- SerpApiSearchProvider: Google results via SerpAPI
- BingSearchProvider: Bing Web Search API
"""

from __future__ import annotations

import httpx

from ...core.config import SearchConfig
from ...exceptions import SearchConfigError
from ..base import SearchProvider
from .bing import BingSearchProvider
from .brave import BraveSearchProvider
from .duckduckgo import DuckDuckGoProvider
from .firecrawl import FirecrawlSearchProvider
from .google import GoogleSearchProvider
from .serpapi import SerpApiSearchProvider
from .serper import SerperSearchProvider
from .tavily import TavilySearchProvider

_API_KEY_PROVIDERS: dict[str, type[SearchProvider]] = {
    "brave": BraveSearchProvider,
    "tavily": TavilySearchProvider,
    "serper": SerperSearchProvider,
    "firecrawl": FirecrawlSearchProvider,
    "serpapi": SerpApiSearchProvider,
    "bing": BingSearchProvider,
}


def create_provider(
    name: str,
    config: SearchConfig,
    client: httpx.AsyncClient | None = None,
) -> SearchProvider:
    """Instantiate a provider from its configuration section.

    Args:
        name: Provider name
        config: Loaded configuration
        client: Shared HTTP client (the provider creates its own if omitted)

    Returns:
        The provider instance

    Raises:
        SearchConfigError: If the name is unknown
    """
    section = config.providers.get_section(name)

    if name == "duckduckgo":
        return DuckDuckGoProvider(enabled=section.enabled if section else False)
    if name == "google":
        return GoogleSearchProvider(
            api_key=section.api_key if section else None,
            cx=section.cx if section else None,
            client=client,
        )
    provider_cls = _API_KEY_PROVIDERS.get(name)
    if provider_cls is None:
        raise SearchConfigError(f"Unknown provider: {name}", config_key=f"providers.{name}")
    return provider_cls(api_key=section.api_key if section else None, client=client)


__all__ = [
    "BingSearchProvider",
    "BraveSearchProvider",
    "DuckDuckGoProvider",
    "FirecrawlSearchProvider",
    "GoogleSearchProvider",
    "SerpApiSearchProvider",
    "SerperSearchProvider",
    "TavilySearchProvider",
    "create_provider",
]
