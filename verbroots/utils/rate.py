"""Retry and backoff utilities for source fetching."""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any


@dataclass
class RetryConfig:
    """Configuration for retry logic."""

    max_retries: int
    backoff_start: float
    backoff_max: float
    retryable_exceptions: tuple[type[Exception], ...] = (Exception,)

    def should_retry(self, attempt: int, exception: Exception) -> bool:
        """
        Check if should retry after exception.

        Args:
            attempt: Current attempt number (0-indexed)
            exception: Exception that occurred

        Returns:
            True if should retry
        """
        if attempt >= self.max_retries:
            return False

        return isinstance(exception, self.retryable_exceptions)

    def get_backoff(self, attempt: int) -> float:
        """
        Get exponential backoff time for attempt.

        Args:
            attempt: Attempt number (0-indexed)

        Returns:
            Backoff time in seconds
        """
        backoff = self.backoff_start * (2**attempt)
        return float(min(backoff, self.backoff_max))


async def with_retry(
    func: Callable[..., Awaitable[Any]],
    retry_config: RetryConfig,
    *args: Any,
    **kwargs: Any,
) -> Any:
    """
    Execute async function with retry logic.

    Args:
        func: Async function to execute
        retry_config: Retry configuration
        *args: Function args
        **kwargs: Function kwargs

    Returns:
        Function result

    Raises:
        Last exception if all retries exhausted
    """
    attempt = 0
    while True:
        try:
            return await func(*args, **kwargs)
        except Exception as e:
            if not retry_config.should_retry(attempt, e):
                raise

            await asyncio.sleep(retry_config.get_backoff(attempt))
            attempt += 1
