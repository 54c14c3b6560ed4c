# ==============================================================================
# Retry Configuration
# ==============================================================================
"""
Shared retry configuration for network resilience.

Provides a light retry decorator with exponential backoff for transient
failures while reading from the event store. Aggregation requests are
interactive, so retries are kept short (3 attempts over ~7 seconds).

Also provides an async controller that retries calls cut off by a
network-profile timeout.
"""

import logging
from typing import Tuple, Type

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

# ==============================================================================
# Retry Constants
# ==============================================================================

# Exponential backoff: 1s, 2s, 4s = ~7s total
RETRY_ATTEMPTS_LIGHT = 3
RETRY_WAIT_MIN = 1  # seconds
RETRY_WAIT_MAX = 4  # seconds

# Valkey retry configuration (used by redis-py client). Cache misses are cheap,
# so the shared cache gives up quickly and the request recomputes.
VALKEY_RETRIES = 3


def log_retry_attempt_light(logger: logging.Logger, attempts: int = RETRY_ATTEMPTS_LIGHT):
    """
    Create a callback that logs retry attempts for light retry.

    Args:
        logger: Logger instance to use for logging

    Returns:
        Callback function for tenacity's before_sleep parameter
    """

    def _log_retry(retry_state: RetryCallState) -> None:
        exception = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            "Retry attempt %d/%d after error: %s",
            retry_state.attempt_number,
            attempts,
            exception,
        )

    return _log_retry


def retry_light(
    exception_types: Tuple[Type[Exception], ...],
    logger: logging.Logger,
    attempts: int = RETRY_ATTEMPTS_LIGHT,
):
    """
    Create a light retry decorator (3 attempts, ~7 seconds by default).

    Args:
        exception_types: Tuple of exception types to retry on
        logger: Logger instance for retry logging
        attempts: Maximum number of attempts

    Returns:
        Tenacity retry decorator

    Example:
        @retry_light((psycopg2.OperationalError,), logger)
        def fetch_rows(...):
            ...
    """
    return retry(
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=1, min=RETRY_WAIT_MIN, max=RETRY_WAIT_MAX),
        retry=retry_if_exception_type(exception_types),
        before_sleep=log_retry_attempt_light(logger, attempts),
        reraise=True,
    )


def retry_timeouts(attempts: int, logger: logging.Logger) -> AsyncRetrying:
    """
    Create an async retrying controller for calls that hit a timeout.

    No wait between attempts: the timeout itself already spaced them out.

    Args:
        attempts: Maximum number of attempts
        logger: Logger instance for retry logging

    Example:
        rows = await retry_timeouts(3, logger)(fetch_with_timeout)
    """
    return AsyncRetrying(
        stop=stop_after_attempt(attempts),
        retry=retry_if_exception_type(TimeoutError),
        before_sleep=log_retry_attempt_light(logger, attempts),
        reraise=True,
    )
