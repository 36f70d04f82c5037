"""Shared fixtures: a fake J-Quants API served through httpx.MockTransport."""
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest
import pytest_asyncio

from trader.data_provider.jquants import JQuantsClient, RateLimiter
from trader.models import DateRange

BASE_URL = "https://jquants.test/v2"
API_KEY = "test-api-key"


@dataclass
class Route:
    path: str
    respond: Callable[[httpx.Request], httpx.Response]
    params: Dict[str, str] = field(default_factory=dict)
    times: Optional[int] = None

    def matches(self, request: httpx.Request) -> bool:
        if self.times == 0:
            return False
        if not request.url.path.endswith(self.path):
            return False
        query = request.url.params
        return all(query.get(k) == v for k, v in self.params.items())


class FakeJQuantsApi:
    """Routes are matched in registration order; ``times`` bounds how often one answers."""

    def __init__(self) -> None:
        self.routes: List[Route] = []
        self.requests: List[httpx.Request] = []
        self.sleeps: List[float] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for route in self.routes:
            if route.matches(request):
                if route.times is not None:
                    route.times -= 1
                return route.respond(request)
        return httpx.Response(404, json={"message": "no route"})

    def respond(
        self,
        path: str,
        status: int = 200,
        json: Any = None,
        params: Optional[Dict[str, str]] = None,
        times: Optional[int] = None,
    ) -> None:
        self.routes.append(
            Route(
                path=path,
                respond=lambda request: httpx.Response(status, json=json),
                params=params or {},
                times=times,
            )
        )

    def fail(self, path: str, error: Exception) -> None:
        def raise_error(request: httpx.Request) -> httpx.Response:
            raise error

        self.routes.append(Route(path=path, respond=raise_error))

    def daily_bars(
        self,
        code: str,
        rows: List[Dict[str, Any]],
        pagination_key: Optional[str] = None,
        with_pagination_key: Optional[str] = None,
        times: Optional[int] = None,
    ) -> None:
        params = {"code": code}
        if with_pagination_key is not None:
            params["pagination_key"] = with_pagination_key
        self.respond(
            "/equities/bars/daily",
            json={"data": rows, "pagination_key": pagination_key},
            params=params,
            times=times,
        )

    def instrument(
        self,
        code: str,
        company_name: str = "テスト株式会社",
        sector_name: Optional[str] = "情報通信",
    ) -> None:
        self.respond(
            "/equities/master",
            json={
                "data": [{
                    "Code": code,
                    "CoName": company_name,
                    "MktNm": "プライム",
                    "S33Nm": sector_name,
                }],
            },
            params={"code": code},
        )

    def calls_to(self, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.path.endswith(path)]

    async def sleep(self, delay: float) -> None:
        self.sleeps.append(delay)


def bar_row(
    date_str: str,
    close: Optional[float] = 105.0,
    code: str = "86970",
    open_: Optional[float] = 100.0,
    high: Optional[float] = 110.0,
    low: Optional[float] = 95.0,
    volume: Optional[float] = 1000.0,
) -> Dict[str, Any]:
    return {
        "Date": date_str,
        "Code": code,
        "AdjO": open_,
        "AdjH": high,
        "AdjL": low,
        "AdjC": close,
        "AdjVo": volume,
    }


@pytest.fixture
def default_range() -> DateRange:
    return DateRange(from_=date(2025, 1, 6), to=date(2025, 1, 10))


@pytest.fixture
def api() -> FakeJQuantsApi:
    return FakeJQuantsApi()


@pytest_asyncio.fixture
async def client(api):
    """Client wired to the fake API. Backoff sleeps are recorded, not slept."""
    instance = JQuantsClient.with_base_url(
        BASE_URL,
        API_KEY,
        transport=httpx.MockTransport(api.handler),
        rate_limiter=RateLimiter(max_requests=1000, window=60.0),
        sleep=api.sleep,
    )
    yield instance
    await instance.aclose()
