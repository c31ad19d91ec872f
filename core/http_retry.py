"""Retry policy shared by the TrackerRMS and HubSpot REST clients."""

import logging

import requests
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception,
    before_sleep_log
)

logger = logging.getLogger(__name__)


def is_retryable_error(exc: Exception) -> bool:
    """
    Determine if an exception is retryable.

    Only retries on:
    - Timeouts
    - Rate limiting (429) and server errors (5xx)
    - Connection errors without a response

    Does NOT retry on other client errors (4xx).
    """
    if isinstance(exc, requests.Timeout):
        return True

    if isinstance(exc, requests.RequestException):
        response = getattr(exc, 'response', None)
        if response is not None:
            return response.status_code == 429 or response.status_code >= 500
        return True

    return False


def api_retry(attempts: int = 3):
    """Return a tenacity @retry decorator for REST API calls."""
    return retry(
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception(is_retryable_error),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True
    )
