"""Exception hierarchy for cli-web-search.

Every failure a provider, the orchestrator or the configuration layer can
produce is one of the classes below. Retry and fallback decisions are made on
the exception type, never on the message text.
"""

from __future__ import annotations


class SearchError(Exception):
    """Base exception for search-related errors."""

    def __init__(self, message: str, provider: str | None = None) -> None:
        """Initialize search error.

        Args:
            message: Error message
            provider: Name of the provider that raised the error
        """
        self.provider = provider
        self.message = message
        super().__init__(message)


class SearchNetworkError(SearchError):
    """Transport-level failure (connection refused, DNS, reset, read timeout)."""

    def __init__(self, message: str, provider: str | None = None) -> None:
        super().__init__(f"Network error: {message}", provider=provider)


class SearchProviderError(SearchError):
    """Non-2xx response from a provider that is neither auth nor rate limiting."""

    def __init__(self, message: str, provider: str | None = None) -> None:
        self.detail = message
        super().__init__(f"API error from {provider or 'unknown'}: {message}", provider=provider)


class SearchRateLimitError(SearchError):
    """Rate limit exceeded for a search provider."""

    def __init__(self, provider: str, retry_after: float | None = None) -> None:
        """Initialize rate limit error.

        Args:
            provider: Name of the provider that throttled the request
            retry_after: Seconds the provider asked us to wait, if it said
        """
        self.retry_after = retry_after
        message = f"Rate limited by {provider}"
        if retry_after is not None:
            message += f", retry after {retry_after:g} seconds"
        super().__init__(message, provider=provider)


class SearchAuthenticationError(SearchError):
    """The provider rejected the configured API key."""

    def __init__(self, provider: str) -> None:
        super().__init__(f"Invalid API key for {provider}", provider=provider)


class MissingApiKeyError(SearchError):
    """A provider was asked to search without its credentials."""

    def __init__(self, provider: str, env_var: str, config_file: str | None = None) -> None:
        self.env_var = env_var
        location = config_file or "~/.config/cli-web-search/config.yaml"
        super().__init__(
            f"Missing API key for {provider}. Set {env_var} or configure in {location}",
            provider=provider,
        )


class SearchTimeoutError(SearchError):
    """A request exceeded the caller-supplied deadline."""

    def __init__(self, seconds: float, provider: str | None = None) -> None:
        self.seconds = seconds
        super().__init__(f"Request timed out after {seconds:g} seconds", provider=provider)


class SearchConfigError(SearchError):
    """Invalid or unreadable configuration."""

    def __init__(self, message: str, config_key: str | None = None) -> None:
        self.config_key = config_key
        super().__init__(f"Configuration error: {message}")


class NoProvidersConfiguredError(SearchError):
    """No registered provider is configured for use."""

    def __init__(self) -> None:
        super().__init__(
            "No search providers configured. Run `cli-web-search config init` to set up."
        )


class AllProvidersFailedError(SearchError):
    """Every candidate provider failed with a continuable error."""

    def __init__(
        self,
        last_message: str,
        attempts: list[tuple[str, SearchError]] | None = None,
    ) -> None:
        """Initialize the exhaustion error.

        Args:
            last_message: Message of the error raised by the last provider tried
            attempts: ``(provider name, error)`` pairs in the order they were tried
        """
        self.last_message = last_message
        self.attempts = attempts or []
        super().__init__(f"All providers failed. Last error: {last_message}")

    @property
    def providers_tried(self) -> list[str]:
        """Names of the providers that were attempted."""
        return [name for name, _ in self.attempts]


__all__ = [
    "AllProvidersFailedError",
    "MissingApiKeyError",
    "NoProvidersConfiguredError",
    "SearchAuthenticationError",
    "SearchConfigError",
    "SearchError",
    "SearchNetworkError",
    "SearchProviderError",
    "SearchRateLimitError",
    "SearchTimeoutError",
]
