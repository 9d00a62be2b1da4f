"""Base classes and interfaces for search providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any
from urllib.parse import urlparse

import httpx
from pydantic import BaseModel, ConfigDict, Field

from .. import __version__
from ..core.config import ENV_PREFIX
from ..exceptions import (
    MissingApiKeyError,
    SearchAuthenticationError,
    SearchNetworkError,
    SearchProviderError,
    SearchRateLimitError,
)

USER_AGENT = f"cli-web-search/{__version__}"


class SafeSearch(str, Enum):
    """Safe search levels."""

    OFF = "off"
    MODERATE = "moderate"
    STRICT = "strict"


class DateRange(str, Enum):
    """Date range filters."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class SearchResult(BaseModel):
    """Standardized search result from any provider.

    Attributes:
        title: Result title
        url: Result URL
        snippet: Text snippet/description (may be empty)
        position: 1-based rank within the provider's response
        published_date: Publication date as reported by the provider, unparsed
        source: Source domain or site name
    """

    model_config = ConfigDict(frozen=True)

    title: str
    url: str
    snippet: str = ""
    position: int = Field(default=1, ge=1)
    published_date: str | None = None
    source: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary, omitting unset optional fields."""
        return self.model_dump(exclude_none=True)


class SearchOptions(BaseModel):
    """Caller-supplied query parameters, shared read-only by every provider attempt."""

    model_config = ConfigDict(frozen=True)

    num_results: int = Field(default=10, ge=1, description="Maximum number of results")
    safe_search: SafeSearch = Field(default=SafeSearch.MODERATE)
    date_range: DateRange | None = Field(default=None)
    include_domains: tuple[str, ...] | None = Field(default=None)
    exclude_domains: tuple[str, ...] | None = Field(default=None)
    timeout: float = Field(default=30.0, gt=0, description="Per-request timeout in seconds")


class SearchResponse(BaseModel):
    """Search results together with metadata about how they were produced."""

    query: str
    provider: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    total_results: int = 0
    search_time_ms: int = 0
    cached: bool = False
    results: list[SearchResult] = Field(default_factory=list)

    @classmethod
    def build(
        cls,
        query: str,
        provider: str,
        results: list[SearchResult],
        search_time_ms: int = 0,
        cached: bool = False,
    ) -> SearchResponse:
        """Create a response whose ``total_results`` matches ``results``."""
        return cls(
            query=query,
            provider=provider,
            total_results=len(results),
            search_time_ms=search_time_ms,
            cached=cached,
            results=results,
        )

    @property
    def has_results(self) -> bool:
        return len(self.results) > 0


@dataclass(frozen=True)
class ProviderStatus:
    """Registration status of a provider."""

    name: str
    configured: bool


def host_of(url: str) -> str | None:
    """Return the hostname of ``url``, or None if it has none."""
    if not url:
        return None
    return urlparse(url).hostname or None


def parse_retry_after(response: httpx.Response) -> float | None:
    """Read a numeric ``Retry-After`` header in seconds."""
    value = response.headers.get("retry-after")
    if value is None:
        return None
    try:
        return max(0.0, float(value.strip()))
    except ValueError:
        return None


def with_site_filters(query: str, options: SearchOptions) -> str:
    """Append ``site:``/``-site:`` operators for the options' domain filters.

    Several include domains are OR-ed together so results may come from any
    of them.
    """
    parts = [query]
    include = list(options.include_domains or ())
    if len(include) == 1:
        parts.append(f"site:{include[0]}")
    elif include:
        parts.append("(" + " OR ".join(f"site:{domain}" for domain in include) + ")")
    parts.extend(f"-site:{domain}" for domain in options.exclude_domains or ())
    return " ".join(parts)


class SearchProvider(ABC):
    """Abstract base class for search providers.

    Each provider owns one ``httpx.AsyncClient`` for its lifetime (or borrows
    one passed in by the caller) and translates a single external API into
    :class:`SearchResult` lists. Providers keep no state between searches.
    """

    def __init__(
        self,
        api_key: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the search provider.

        Args:
            api_key: API key for the provider (if required)
            client: Shared HTTP client; a private one is created when omitted
        """
        self.api_key = api_key
        self._owns_client = client is None
        self._client = client

    @property
    @abstractmethod
    def name(self) -> str:
        """Stable lowercase provider name used in config and fallback order."""

    @property
    def requires_api_key(self) -> bool:
        """Whether this provider requires an API key."""
        return True

    @property
    def api_key_env_var(self) -> str:
        """Environment variable that supplies this provider's API key."""
        return f"{ENV_PREFIX}{self.name.upper()}_API_KEY"

    @property
    def is_configured(self) -> bool:
        """Whether the required credentials are present and non-empty."""
        if not self.requires_api_key:
            return True
        return bool(self.api_key and self.api_key.strip())

    @abstractmethod
    async def search(
        self,
        query: str,
        options: SearchOptions | None = None,
    ) -> list[SearchResult]:
        """Perform a search query.

        Args:
            query: Search query string
            options: Search options (defaults when omitted)

        Returns:
            Results numbered from 1, at most ``options.num_results`` long

        Raises:
            SearchError: One of the taxonomy errors in ``cli_web_search.exceptions``
        """

    @property
    def client(self) -> httpx.AsyncClient:
        """HTTP client, created on first use when none was supplied."""
        if self._client is None:
            self._client = httpx.AsyncClient(headers={"User-Agent": USER_AGENT})
        return self._client

    async def _probe(self) -> httpx.Response:
        """Send the smallest request that exercises the credentials."""
        raise NotImplementedError

    async def validate_api_key(self) -> bool:
        """Check the credentials with a minimal live request.

        Returns:
            False when not configured, otherwise whether the probe got a 2xx
        """
        if not self.is_configured:
            return False
        try:
            response = await self._probe()
        except httpx.TransportError as exc:
            raise SearchNetworkError(str(exc) or type(exc).__name__, provider=self.name) from exc
        return response.is_success

    async def aclose(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    def _require_api_key(self) -> str:
        if not self.is_configured:
            raise MissingApiKeyError(self.name, self.api_key_env_var)
        return self.api_key or ""

    async def _request(
        self,
        method: str,
        url: str,
        *,
        timeout: float,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send a request and map failures onto the error taxonomy."""
        try:
            response = await self.client.request(method, url, timeout=timeout, **kwargs)
        except httpx.TransportError as exc:
            raise SearchNetworkError(str(exc) or type(exc).__name__, provider=self.name) from exc
        self._check_response(response)
        return response

    def _check_response(self, response: httpx.Response) -> None:
        status = response.status_code
        if status == 429:
            raise SearchRateLimitError(self.name, retry_after=parse_retry_after(response))
        if status in (401, 403):
            raise SearchAuthenticationError(self.name)
        if not response.is_success:
            raise SearchProviderError(f"HTTP {status}: {response.text}", provider=self.name)

    def _parse_json(self, response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError as exc:
            raise SearchProviderError(f"Invalid JSON response: {exc}", provider=self.name) from exc
        if not isinstance(data, dict):
            raise SearchProviderError("Unexpected response format", provider=self.name)
        return data

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r} configured={self.is_configured}>"
