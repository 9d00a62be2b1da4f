"""Retry policy for provider calls with exponential backoff."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from ..core.config import RetryPolicyConfig
from ..core.logger import get_logger
from ..exceptions import SearchError, SearchNetworkError, SearchRateLimitError

logger = get_logger("search.retry")

T = TypeVar("T")

SleepFunc = Callable[[float], Awaitable[None]]

# Only transient failures are worth repeating against the same provider.
RETRYABLE_ERRORS: tuple[type[SearchError], ...] = (SearchNetworkError, SearchRateLimitError)


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded retry with exponential backoff.

    Attributes:
        max_attempts: Total attempts including the first call
        base_delay: Delay before the first retry in seconds
        multiplier: Factor applied to the delay after each failed attempt
        max_delay: Upper bound for computed backoff delays
    """

    max_attempts: int = 3
    base_delay: float = 1.0
    multiplier: float = 2.0
    max_delay: float = 30.0

    @classmethod
    def from_config(cls, config: RetryPolicyConfig) -> RetryPolicy:
        return cls(
            max_attempts=config.max_attempts,
            base_delay=config.backoff_seconds,
            multiplier=config.backoff_multiplier,
            max_delay=config.max_backoff_seconds,
        )

    @staticmethod
    def is_retryable(error: SearchError) -> bool:
        return isinstance(error, RETRYABLE_ERRORS)

    def compute_delay(self, attempt: int, error: SearchError) -> float:
        """Delay before retrying after the zero-based ``attempt`` failed.

        A ``retry_after`` hint from a rate-limit response is used as is.
        """
        if isinstance(error, SearchRateLimitError) and error.retry_after is not None:
            return error.retry_after
        return min(self.base_delay * (self.multiplier**attempt), self.max_delay)

    async def run(
        self,
        operation: Callable[[], Awaitable[T]],
        label: str,
        sleep: SleepFunc = asyncio.sleep,
    ) -> T:
        """Call ``operation`` until it succeeds or the policy gives up.

        Args:
            operation: Zero-argument coroutine factory
            label: Name used in log messages
            sleep: Awaitable sleep used between attempts

        Returns:
            The operation's result

        Raises:
            SearchError: The first non-retryable error, or the last error once
                attempts are exhausted
        """
        attempt = 0
        while True:
            try:
                return await operation()
            except SearchError as exc:
                if not self.is_retryable(exc) or attempt + 1 >= self.max_attempts:
                    raise
                delay = self.compute_delay(attempt, exc)
                logger.warning(
                    "Provider %s failed (attempt %d/%d): %s. Retrying in %.2fs...",
                    label,
                    attempt + 1,
                    self.max_attempts,
                    exc,
                    delay,
                )
                await sleep(delay)
                attempt += 1
