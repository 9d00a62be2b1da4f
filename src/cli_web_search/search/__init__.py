"""Web search across multiple providers.

This package provides a unified interface for web search across the Brave,
Google, DuckDuckGo, Tavily, Serper, Firecrawl, SerpAPI and Bing APIs.

Features:
- Standardized results and a closed error taxonomy
- Ordered fallback between providers with per-provider retry and backoff
- In-memory result caching with TTL and bounded size
"""

from ..exceptions import (
    AllProvidersFailedError,
    MissingApiKeyError,
    NoProvidersConfiguredError,
    SearchAuthenticationError,
    SearchConfigError,
    SearchError,
    SearchNetworkError,
    SearchProviderError,
    SearchRateLimitError,
    SearchTimeoutError,
)
from .base import (
    DateRange,
    ProviderStatus,
    SafeSearch,
    SearchOptions,
    SearchProvider,
    SearchResponse,
    SearchResult,
)
from .cache import CacheStats, SearchCache
from .manager import SearchManager
from .registry import ProviderRegistry, build_registry
from .retry import RetryPolicy

__all__ = [
    "AllProvidersFailedError",
    "CacheStats",
    "DateRange",
    "MissingApiKeyError",
    "NoProvidersConfiguredError",
    "ProviderRegistry",
    "ProviderStatus",
    "RetryPolicy",
    "SafeSearch",
    "SearchAuthenticationError",
    "SearchCache",
    "SearchConfigError",
    "SearchError",
    "SearchManager",
    "SearchNetworkError",
    "SearchOptions",
    "SearchProvider",
    "SearchProviderError",
    "SearchRateLimitError",
    "SearchResponse",
    "SearchResult",
    "SearchTimeoutError",
    "build_registry",
]
