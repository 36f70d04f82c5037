"""Market data provider package."""
from trader.data_provider.base import DataProvider
from trader.data_provider.errors import (
    ApiError,
    DataProviderError,
    NetworkError,
    NotFoundError,
    ParseError,
    RateLimitedError,
)
from trader.data_provider.factory import build_provider
from trader.data_provider.jquants import JQuantsClient
from trader.data_provider.provider_mock import MockProvider

__all__ = [
    "DataProvider",
    "DataProviderError",
    "NotFoundError",
    "NetworkError",
    "ApiError",
    "RateLimitedError",
    "ParseError",
    "JQuantsClient",
    "MockProvider",
    "build_provider",
]
