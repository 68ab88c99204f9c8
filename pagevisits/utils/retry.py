# ==============================================================================
# Retry Configuration
# ==============================================================================
"""
Shared retry configuration for network resilience.

Provides a retry decorator with exponential backoff for transient failures
when fetching page visits from the backend.

Light retry: 3 attempts over ~7 seconds
"""

import logging
from typing import Tuple, Type

import requests
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

# ==============================================================================
# Retry Constants
# ==============================================================================

# Light retry configuration: 3 attempts
# Exponential backoff: 1s, 2s, 4s = ~7s total
RETRY_ATTEMPTS_LIGHT = 3
RETRY_WAIT_MIN = 1  # seconds
RETRY_WAIT_MAX = 8  # seconds (cap for exponential backoff)

HTTP_RETRY_EXCEPTIONS = (
    requests.exceptions.ConnectionError,
    requests.exceptions.Timeout,
)


# ==============================================================================
# Logging Callbacks
# ==============================================================================


def log_retry_attempt_light(logger: logging.Logger):
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
            RETRY_ATTEMPTS_LIGHT,
            exception,
        )

    return _log_retry


# ==============================================================================
# Retry Decorators
# ==============================================================================


def retry_light(
    exception_types: Tuple[Type[Exception], ...],
    logger: logging.Logger,
    wait_min: float = RETRY_WAIT_MIN,
):
    """
    Create a light retry decorator (3 attempts, ~7 seconds).

    Args:
        exception_types: Tuple of exception types to retry on
        logger: Logger instance for retry logging
        wait_min: Minimum backoff in seconds (0 disables waiting, for tests)

    Returns:
        Tenacity retry decorator

    Example:
        @retry_light(HTTP_RETRY_EXCEPTIONS, logger)
        def fetch():
            ...
    """
    return retry(
        stop=stop_after_attempt(RETRY_ATTEMPTS_LIGHT),
        wait=wait_exponential(multiplier=wait_min, min=wait_min, max=RETRY_WAIT_MAX),
        retry=retry_if_exception_type(exception_types),
        before_sleep=log_retry_attempt_light(logger),
        reraise=True,
    )
