"""
Retry Logic with Exponential Backoff

Retries a failing async database operation, doubling the delay after each
failed attempt. Delays are expressed in milliseconds.

Every exception is retried the same way, whether it is transient (lock
timeout, dropped connection) or permanent (constraint violation). Wrap only
calls that are actually worth retrying.
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from functools import wraps
from typing import Any, TypeVar

from erp_db.application.interfaces.exceptions import RepositoryError

logger = logging.getLogger(__name__)

T = TypeVar("T")
F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for retry behavior."""

    max_retries: int = 3
    initial_delay: float = 100.0  # milliseconds
    backoff_multiplier: float = 2.0

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.max_retries < 0:
            raise ValueError("max_retries must be non-negative")
        if self.initial_delay < 0:
            raise ValueError("initial_delay must be non-negative")
        if self.backoff_multiplier < 1.0:
            raise ValueError("backoff_multiplier must be at least 1.0")


class ExponentialBackoff:
    """Exponential backoff calculator, no jitter."""

    def __init__(self, config: RetryConfig) -> None:
        self.config = config

    def get_delay(self, attempt: int) -> float:
        """
        Calculate the delay before the retry that follows ``attempt``.

        Args:
            attempt: Failed attempt number (0-based)

        Returns:
            Delay in milliseconds
        """
        if attempt < 0:
            return 0.0

        return self.config.initial_delay * (self.config.backoff_multiplier**attempt)

    def get_delays(self, max_attempts: int) -> list[float]:
        """
        Get all delays for a retry sequence.

        Args:
            max_attempts: Number of retries

        Returns:
            List of delays in milliseconds
        """
        return [self.get_delay(i) for i in range(max_attempts)]


async def retry_operation(
    operation: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    initial_delay: float = 100,
    backoff_multiplier: float = 2.0,
) -> T:
    """
    Retry database operation with exponential backoff.

    The operation runs at most ``max_retries + 1`` times. After the last
    failed attempt the original exception is re-raised unchanged.

    Args:
        operation: Zero-argument async callable
        max_retries: Maximum retries after the first attempt
        initial_delay: Delay before the first retry, in milliseconds
        backoff_multiplier: Factor applied to the delay after each retry

    Returns:
        Result of operation

    Example:
        >>> row = await retry_operation(
        ...     lambda: adapter.fetch_one("SELECT * FROM users WHERE id = %s", user_id),
        ...     3,
        ...     100,
        ... )
    """
    last_exception: Exception | None = None
    delay = initial_delay

    for attempt in range(max_retries + 1):  # +1 for initial attempt
        try:
            return await operation()
        except Exception as e:
            last_exception = e

            if attempt < max_retries:
                logger.debug(
                    f"Operation failed on attempt {attempt + 1}, retrying in {delay:g}ms: {e}",
                    extra={"attempt": attempt, "delay": delay, "error": str(e)},
                )
                await asyncio.sleep(delay / 1000)
                delay *= backoff_multiplier

    if last_exception is not None:
        raise last_exception
    raise RepositoryError("Operation failed after retries")


async def retry_with_config(operation: Callable[[], Awaitable[T]], config: RetryConfig) -> T:
    """Run ``retry_operation`` with the values of a ``RetryConfig``."""
    return await retry_operation(
        operation,
        max_retries=config.max_retries,
        initial_delay=config.initial_delay,
        backoff_multiplier=config.backoff_multiplier,
    )


def retry(
    config: RetryConfig | None = None,
    *,
    max_retries: int | None = None,
    initial_delay: float | None = None,
) -> Callable[[F], F]:
    """
    Decorator adding retry logic to a coroutine function.

    Args:
        config: Retry configuration
        max_retries: Override max_retries from config
        initial_delay: Override initial_delay from config (milliseconds)

    Returns:
        Decorated function
    """
    base = config or RetryConfig()
    config = RetryConfig(
        max_retries=max_retries if max_retries is not None else base.max_retries,
        initial_delay=initial_delay if initial_delay is not None else base.initial_delay,
        backoff_multiplier=base.backoff_multiplier,
    )

    def decorator(func: F) -> F:
        if not inspect.iscoroutinefunction(func):
            raise TypeError(f"retry() requires a coroutine function, got {func!r}")

        @wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            return await retry_with_config(lambda: func(*args, **kwargs), config)

        return async_wrapper  # type: ignore[return-value]

    return decorator
