"""Provider registry: ordering, retry and fallback across search providers."""

from __future__ import annotations

import asyncio

import httpx

from ..core.config import SearchConfig
from ..core.logger import get_logger
from ..exceptions import (
    AllProvidersFailedError,
    NoProvidersConfiguredError,
    SearchError,
    SearchNetworkError,
    SearchProviderError,
    SearchRateLimitError,
)
from .base import ProviderStatus, SearchOptions, SearchProvider, SearchResult
from .providers import create_provider
from .retry import RetryPolicy, SleepFunc

logger = get_logger("search.registry")

# Failures specific to one provider; another provider may still succeed.
CONTINUABLE_ERRORS: tuple[type[SearchError], ...] = (
    SearchRateLimitError,
    SearchProviderError,
    SearchNetworkError,
)


class ProviderRegistry:
    """Holds search providers and runs searches with retry and fallback.

    Providers are tried one at a time in :meth:`providers_in_order`; the first
    one to return results wins. Each provider is retried on transient errors
    according to the retry policy before the next one is considered.
    """

    def __init__(
        self,
        retry_policy: RetryPolicy | None = None,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        """Initialize the registry.

        Args:
            retry_policy: Per-provider retry policy (defaults to 3 attempts)
            sleep: Awaitable used for backoff delays
        """
        self._providers: list[SearchProvider] = []
        self._fallback_order: list[str] = []
        self.retry_policy = retry_policy or RetryPolicy()
        self._sleep = sleep

    def register(self, provider: SearchProvider) -> None:
        """Register a provider. Re-registering a name replaces the old instance."""
        self._providers = [p for p in self._providers if p.name != provider.name]
        self._providers.append(provider)
        logger.debug(
            "Registered search provider: %s (configured=%s)",
            provider.name,
            provider.is_configured,
        )

    def set_fallback_order(self, order: list[str]) -> None:
        """Set the preferred order in which providers are tried."""
        self._fallback_order = list(order)

    @property
    def fallback_order(self) -> list[str]:
        return list(self._fallback_order)

    def get(self, name: str) -> SearchProvider | None:
        """Get a registered provider by name."""
        for provider in self._providers:
            if provider.name == name:
                return provider
        return None

    def configured_providers(self) -> list[SearchProvider]:
        """Registered providers that are ready to use, in registration order."""
        return [p for p in self._providers if p.is_configured]

    def list_providers(self) -> list[ProviderStatus]:
        """Status of every registered provider."""
        return [ProviderStatus(name=p.name, configured=p.is_configured) for p in self._providers]

    def providers_in_order(self) -> list[SearchProvider]:
        """Configured providers in fallback order, then the rest by registration.

        Unknown and unconfigured names in the fallback order are skipped, and
        no provider appears twice.
        """
        ordered: list[SearchProvider] = []
        for name in self._fallback_order:
            provider = self.get(name)
            if provider is not None and provider.is_configured and provider not in ordered:
                ordered.append(provider)
        for provider in self._providers:
            if provider.is_configured and provider not in ordered:
                ordered.append(provider)
        return ordered

    def _candidates(self, preferred_provider: str | None) -> list[SearchProvider]:
        candidates = self.providers_in_order()
        if preferred_provider:
            for index, provider in enumerate(candidates):
                if provider.name == preferred_provider:
                    candidates.insert(0, candidates.pop(index))
                    break
        return candidates

    async def search_with_fallback(
        self,
        query: str,
        options: SearchOptions | None = None,
        preferred_provider: str | None = None,
    ) -> tuple[list[SearchResult], str]:
        """Search using the first provider that succeeds.

        Args:
            query: Search query
            options: Search options shared by every attempt
            preferred_provider: Provider to try first for this call only

        Returns:
            ``(results, provider name)`` from the provider that answered

        Raises:
            NoProvidersConfiguredError: If no provider is configured
            AllProvidersFailedError: If every provider failed with a continuable error
            SearchError: Any non-continuable error, raised as soon as it happens
        """
        options = options or SearchOptions()
        candidates = self._candidates(preferred_provider)
        if not candidates:
            raise NoProvidersConfiguredError()

        attempts: list[tuple[str, SearchError]] = []
        for provider in candidates:
            logger.debug("Trying provider: %s", provider.name)
            try:
                results = await self.retry_policy.run(
                    lambda provider=provider: provider.search(query, options),
                    label=provider.name,
                    sleep=self._sleep,
                )
            except CONTINUABLE_ERRORS as exc:
                attempts.append((provider.name, exc))
                logger.warning("Provider %s failed: %s", provider.name, exc)
                continue

            if attempts:
                logger.info("Fallback to %s succeeded", provider.name)
            return results, provider.name

        _, last_error = attempts[-1]
        raise AllProvidersFailedError(str(last_error), attempts=attempts)

    async def validate_all(self) -> dict[str, bool | SearchError]:
        """Probe the credentials of every registered provider.

        Returns:
            Provider name mapped to the probe result or the error it raised
        """
        results: dict[str, bool | SearchError] = {}
        for provider in self._providers:
            try:
                results[provider.name] = await provider.validate_api_key()
            except SearchError as exc:
                results[provider.name] = exc
        return results

    async def aclose(self) -> None:
        """Close every provider's HTTP client."""
        for provider in self._providers:
            await provider.aclose()


def build_registry(
    config: SearchConfig,
    client: httpx.AsyncClient | None = None,
    sleep: SleepFunc = asyncio.sleep,
) -> ProviderRegistry:
    """Create a registry with every enabled provider from ``config``.

    The default provider, when set, is placed at the front of the fallback
    order.

    Args:
        config: Loaded configuration
        client: Shared HTTP client for all providers (each creates its own if omitted)
        sleep: Awaitable used for retry backoff

    Returns:
        Populated ProviderRegistry
    """
    registry = ProviderRegistry(RetryPolicy.from_config(config.retry), sleep=sleep)
    for name in config.enabled_providers():
        registry.register(create_provider(name, config, client=client))

    order: list[str] = []
    for name in [config.default_provider, *config.fallback_order]:
        if name and name not in order:
            order.append(name)
    registry.set_fallback_order(order)
    return registry
