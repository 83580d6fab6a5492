"""
Retry handling for calls to the external language model service.

This module provides:
- RetryConfig: bounded attempt count and backoff parameters
- calculate_retry_delay: exponential backoff with jitter
- retry_on_transient: decorator that retries only transient failures and
  raises RetryExhaustedError once the budget is spent
"""

import functools
import logging
import random
import time
from typing import Callable, Optional, Tuple, Type

from plainverse.core.exceptions import RetryExhaustedError, TransientServiceError

logger = logging.getLogger(__name__)


class RetryConfig:
    """Retry configuration"""
    def __init__(
        self,
        max_attempts: int = 3,
        base_delay: float = 2.0,
        max_delay: float = 60.0,
        exponential_backoff: bool = True,
        jitter: bool = True
    ):
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.exponential_backoff = exponential_backoff
        self.jitter = jitter

    def __repr__(self) -> str:
        return (
            f"RetryConfig(max_attempts={self.max_attempts}, base_delay={self.base_delay}, "
            f"max_delay={self.max_delay}, exponential_backoff={self.exponential_backoff}, "
            f"jitter={self.jitter})"
        )


def calculate_retry_delay(
    attempt: int,
    config: RetryConfig,
    rng: Callable[[], float] = random.random
) -> float:
    """
    Calculate the delay before the next attempt.

    Args:
        attempt: 1-based number of the attempt that just failed
        config: Retry configuration
        rng: Source of uniform [0, 1) values used for jitter

    Returns:
        Delay in seconds
    """
    if config.exponential_backoff:
        delay = config.base_delay * (2 ** (attempt - 1))
    else:
        delay = config.base_delay

    delay = min(delay, config.max_delay)

    if config.jitter:
        delay *= (0.5 + rng() * 0.5)

    return delay


def retry_on_transient(
    config: Optional[RetryConfig] = None,
    retryable: Tuple[Type[BaseException], ...] = (TransientServiceError,),
    sleep: Callable[[float], None] = time.sleep,
    rng: Callable[[], float] = random.random
):
    """
    Decorator for bounded retry with exponential backoff.

    Only ``retryable`` exceptions are retried; anything else propagates on the
    first failure. ``max_attempts`` counts every call, so a budget of three
    sleeps at most twice. When the budget is spent a RetryExhaustedError is
    raised, chained from the last transient error.
    """
    config = config or RetryConfig()

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            last_exception = None

            for attempt in range(1, config.max_attempts + 1):
                try:
                    return func(*args, **kwargs)
                except retryable as e:
                    last_exception = e
                    if attempt == config.max_attempts:
                        break
                    delay = calculate_retry_delay(attempt, config, rng)
                    logger.warning(
                        f"Transient error on attempt {attempt}/{config.max_attempts}: {e}. "
                        f"Retrying in {delay:.2f}s"
                    )
                    sleep(delay)

            logger.error(f"Max retry attempts ({config.max_attempts}) exceeded: {last_exception}")
            raise RetryExhaustedError(config.max_attempts, last_exception) from last_exception
        return wrapper
    return decorator
