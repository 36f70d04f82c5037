"""J-Quants API V2 client."""
from trader.data_provider.jquants.client import (
    DEFAULT_BASE_URL,
    MAX_PAGES,
    JQuantsClient,
)
from trader.data_provider.jquants.http import MAX_RETRIES, RetryingHttpCaller, classify_status
from trader.data_provider.jquants.rate_limiter import (
    RATE_LIMIT_MAX_REQUESTS,
    RATE_LIMIT_WINDOW,
    RateLimiter,
)

__all__ = [
    "DEFAULT_BASE_URL",
    "MAX_PAGES",
    "MAX_RETRIES",
    "RATE_LIMIT_MAX_REQUESTS",
    "RATE_LIMIT_WINDOW",
    "JQuantsClient",
    "RateLimiter",
    "RetryingHttpCaller",
    "classify_status",
]
