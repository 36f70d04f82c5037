"""Map provider errors to HTTP responses for route handlers."""
import logging

from fastapi import HTTPException

from trader.data_provider.errors import (
    ApiError,
    DataProviderError,
    NetworkError,
    NotFoundError,
    RateLimitedError,
)

logger = logging.getLogger(__name__)


def status_for(exc: DataProviderError) -> int:
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, (RateLimitedError, NetworkError)):
        return 503
    if isinstance(exc, ApiError) and exc.status >= 500:
        return 503
    return 500


def to_http_exception(exc: DataProviderError) -> HTTPException:
    """Build the client-facing HTTPException. Upstream details are only logged."""
    status_code = status_for(exc)
    if status_code == 404:
        logger.info(f"Provider lookup miss: {exc}")
        return HTTPException(status_code=404, detail="Instrument not found")

    logger.error(f"Market data provider failed: {exc}", exc_info=exc)
    if status_code == 503:
        return HTTPException(status_code=503, detail="Market data provider temporarily unavailable")
    return HTTPException(status_code=500, detail="Market data provider error")
