"""Authenticated GET with rate limiting, exponential backoff and error classification."""
from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, Optional

import httpx

from trader.data_provider.errors import (
    ApiError,
    DataProviderError,
    NetworkError,
    RateLimitedError,
)
from trader.data_provider.jquants.rate_limiter import RateLimiter
from trader.data_provider.jquants.response import decode_error_message

logger = logging.getLogger(__name__)

MAX_RETRIES = 3
INITIAL_BACKOFF = 0.5  # seconds
API_KEY_HEADER = "x-api-key"


class Outcome(str, Enum):
    SUCCESS = "success"
    RETRY = "retry"
    FAIL = "fail"


def classify_status(status: int) -> Outcome:
    """429 and 5xx are transient; any other non-2xx will not get better on retry."""
    if 200 <= status <= 299:
        return Outcome.SUCCESS
    if status == 429 or 500 <= status <= 599:
        return Outcome.RETRY
    return Outcome.FAIL


def backoff_delay(attempt: int) -> float:
    """Delay before ``attempt`` (0-based): none, then 0.5s, 1s, 2s..."""
    if attempt <= 0:
        return 0.0
    return INITIAL_BACKOFF * 2 ** (attempt - 1)


def extract_error_message(response: httpx.Response) -> str:
    try:
        message = decode_error_message(response.json())
    except ValueError:
        message = None
    return message or f"request failed ({response.status_code})"


class RetryingHttpCaller:
    """Issue one logical GET against the upstream API."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        api_key: str,
        rate_limiter: RateLimiter,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.http = http
        self._api_key = api_key
        self.rate_limiter = rate_limiter
        self._sleep = sleep

    async def get_with_retry(self, url: httpx.URL) -> httpx.Response:
        """
        GET ``url``, retrying 429 and 5xx with exponential backoff.

        Raises:
            NetworkError: Transport failure. Not retried.
            ApiError: Non-retryable status, or 5xx after the last attempt.
            RateLimitedError: 429 after the last attempt.
        """
        last_error: Optional[DataProviderError] = None

        for attempt in range(MAX_RETRIES + 1):
            if attempt > 0:
                delay = backoff_delay(attempt)
                logger.warning(f"Retry {attempt}/{MAX_RETRIES} for {url.path} in {delay:.1f}s")
                await self._sleep(delay)

            await self.rate_limiter.acquire()

            try:
                response = await self.http.get(url, headers={API_KEY_HEADER: self._api_key})
            except httpx.RequestError as e:
                raise NetworkError(str(e) or type(e).__name__) from e

            status = response.status_code
            outcome = classify_status(status)

            if outcome is Outcome.SUCCESS:
                return response

            if outcome is Outcome.FAIL:
                raise ApiError(status, extract_error_message(response))

            if status == 429:
                logger.warning(f"Rate limited (429) on {url.path}, attempt {attempt}")
                last_error = RateLimitedError(retries=attempt)
            else:
                message = extract_error_message(response)
                logger.warning(f"Server error {status} on {url.path}, attempt {attempt}: {message}")
                last_error = ApiError(status, message)

        raise last_error or RateLimitedError(retries=MAX_RETRIES)
