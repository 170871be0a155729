"""
Bounded retry combinator for async operations.

Wraps any zero-argument coroutine factory with a fixed attempt budget and a
fixed pause between attempts. Exhaustion is reported as a value, not raised,
so callers decide what a terminal failure turns into.

Example:
    >>> result = await with_retry(
    ...     lambda: fetcher.fetch(url),
    ...     max_retries=3,
    ...     retry_delay=3.0,
    ... )
    >>> if result.ok:
    ...     response = result.value
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, Optional, Tuple, Type, TypeVar

from showcase_scraper.utils import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass
class RetryResult(Generic[T]):
    """
    Outcome of a retried operation.

    Attributes:
        value: Return value of the successful attempt.
        error: Exception of the last attempt when every attempt failed.
        attempts: Number of attempts made.
    """
    value: Optional[T] = None
    error: Optional[BaseException] = None
    attempts: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def reason(self) -> str:
        """Human-readable failure reason ("" on success)."""
        if self.error is None:
            return ""
        return getattr(self.error, "message", None) or str(self.error) or type(self.error).__name__


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    *,
    max_retries: int,
    retry_delay: float,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
    description: str = "operation",
    log: Optional[logging.Logger] = None,
) -> RetryResult[T]:
    """
    Run ``operation`` until it succeeds or the budget is spent.

    Makes at most ``max_retries + 1`` attempts and sleeps ``retry_delay``
    seconds between consecutive attempts (never after the last one).
    Exceptions not listed in ``retry_on`` propagate immediately.

    Args:
        operation: Zero-argument callable returning a fresh awaitable per attempt.
        max_retries: Re-attempts allowed after the first failure (>= 0).
        retry_delay: Seconds to wait between attempts (>= 0).
        retry_on: Exception types that count as a retryable failure.
        description: Label used in log messages.
        log: Logger to report attempts to (defaults to this module's logger).

    Returns:
        RetryResult holding either the value or the last error.
    """
    if max_retries < 0:
        raise ValueError(f"max_retries must be >= 0, got {max_retries}")
    if retry_delay < 0:
        raise ValueError(f"retry_delay must be >= 0, got {retry_delay}")

    log = log or logger
    total_attempts = max_retries + 1
    last_error: Optional[BaseException] = None

    for attempt in range(1, total_attempts + 1):
        try:
            value = await operation()
            if attempt > 1:
                log.debug(f"{description} succeeded on attempt {attempt}/{total_attempts}")
            return RetryResult(value=value, attempts=attempt)
        except retry_on as e:
            last_error = e
            if attempt < total_attempts:
                log.warning(
                    f"{description} failed (attempt {attempt}/{total_attempts}): {e}; "
                    f"retrying in {retry_delay:g}s"
                )
                await asyncio.sleep(retry_delay)

    return RetryResult(error=last_error, attempts=total_attempts)
