"""J-Quants API V2 market data provider."""
from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator, Awaitable, Callable, List, Optional

import httpx

from trader.config import JQUANTS_DEFAULT_BASE_URL
from trader.data_provider.errors import ParseError
from trader.data_provider.jquants.http import RetryingHttpCaller
from trader.data_provider.jquants.rate_limiter import RateLimiter
from trader.data_provider.jquants.response import decode_daily_bars_page, decode_instrument
from trader.models import Bar, DateRange, Instrument

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = JQUANTS_DEFAULT_BASE_URL
REQUEST_TIMEOUT = 30.0  # seconds
TEST_REQUEST_TIMEOUT = 10.0  # seconds
# Guards against the API handing back the same pagination_key forever
MAX_PAGES = 100

DAILY_BARS_PATH = "/equities/bars/daily"
EQUITIES_MASTER_PATH = "/equities/master"
QUERY_DATE_FORMAT = "%Y%m%d"


class JQuantsClient:
    """
    J-Quants API V2 client authenticated with an API key.

    Retries 429 and 5xx with exponential backoff and keeps outbound traffic
    within the plan quota through a per-client rate limiter. The API key is
    kept out of ``repr``.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = REQUEST_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
        rate_limiter: RateLimiter | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if not api_key:
            raise ValueError("J-Quants API key is required")
        self.base_url = base_url.rstrip("/")
        self.http = httpx.AsyncClient(timeout=timeout, transport=transport, follow_redirects=True)
        self.rate_limiter = rate_limiter or RateLimiter()
        self.caller = RetryingHttpCaller(self.http, api_key, self.rate_limiter, sleep=sleep)
        logger.info(f"JQuantsClient initialized (base_url={self.base_url})")

    @classmethod
    def with_base_url(
        cls,
        base_url: str,
        api_key: str,
        transport: httpx.AsyncBaseTransport | None = None,
        **kwargs,
    ) -> "JQuantsClient":
        """Client against a non-default endpoint (tests, sandboxes), with the shorter timeout."""
        kwargs.setdefault("timeout", TEST_REQUEST_TIMEOUT)
        return cls(api_key, base_url=base_url, transport=transport, **kwargs)

    def __repr__(self) -> str:
        return f"JQuantsClient(base_url={self.base_url!r})"

    async def aclose(self) -> None:
        await self.http.aclose()

    async def __aenter__(self) -> "JQuantsClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    def build_url(self, path: str, params: dict[str, str]) -> httpx.URL:
        try:
            return httpx.URL(f"{self.base_url}{path}", params=params)
        except httpx.InvalidURL as e:
            raise ParseError(f"invalid base URL: {e}") from e

    async def _get_json(self, url: httpx.URL):
        response = await self.caller.get_with_retry(url)
        try:
            return response.json()
        except ValueError as e:
            raise ParseError(f"invalid JSON body: {e}") from e

    async def iter_daily_bar_pages(
        self,
        instrument_id: str,
        date_range: DateRange,
    ) -> AsyncIterator[List[Bar]]:
        """
        Yield decoded pages of daily bars, following ``pagination_key``.

        At most MAX_PAGES pages are requested; reaching the cap ends the
        iteration with a warning instead of an error.
        """
        base_params = {
            "code": instrument_id,
            "from": date_range.from_.strftime(QUERY_DATE_FORMAT),
            "to": date_range.to.strftime(QUERY_DATE_FORMAT),
        }
        cursor: Optional[str] = None

        for page in range(MAX_PAGES):
            params = dict(base_params)
            if cursor is not None:
                params["pagination_key"] = cursor

            url = self.build_url(DAILY_BARS_PATH, params)
            logger.debug(f"Fetching daily bars page {page + 1} for {instrument_id}: {url}")

            bars, cursor = decode_daily_bars_page(await self._get_json(url), instrument_id)
            yield bars

            if cursor is None:
                return

        logger.warning(
            f"Pagination cap of {MAX_PAGES} pages reached for {instrument_id}, "
            f"returning truncated result"
        )

    async def fetch_daily_bars(
        self,
        instrument_id: str,
        date_range: DateRange,
    ) -> List[Bar]:
        all_bars: List[Bar] = []
        async for bars in self.iter_daily_bar_pages(instrument_id, date_range):
            all_bars.extend(bars)

        all_bars.sort(key=lambda b: b.timestamp)
        logger.info(
            f"Fetched {len(all_bars)} daily bars for {instrument_id} "
            f"({date_range.from_} to {date_range.to})"
        )
        return all_bars

    async def fetch_instrument(self, instrument_id: str) -> Instrument:
        url = self.build_url(EQUITIES_MASTER_PATH, {"code": instrument_id})
        logger.debug(f"Fetching instrument {instrument_id}: {url}")
        return decode_instrument(await self._get_json(url), instrument_id)
