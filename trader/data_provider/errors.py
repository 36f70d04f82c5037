"""Errors raised by market data providers."""
from __future__ import annotations


class DataProviderError(Exception):
    """Base class for provider failures."""


class NotFoundError(DataProviderError):
    """The requested instrument does not exist upstream."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"instrument not found: {detail}")


class NetworkError(DataProviderError):
    """Transport failure (connection refused, timeout, ...). Never retried."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"network error: {detail}")


class ApiError(DataProviderError):
    """Upstream answered with a non-success status."""

    def __init__(self, status: int, message: str) -> None:
        self.status = status
        self.message = message
        super().__init__(f"api error (status {status}): {message}")


class RateLimitedError(DataProviderError):
    """Upstream kept answering 429 until the retry budget ran out."""

    def __init__(self, retries: int) -> None:
        self.retries = retries
        super().__init__(f"rate limited after {retries} retries")


class ParseError(DataProviderError):
    """Upstream payload could not be decoded into domain records."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"failed to parse response: {detail}")
