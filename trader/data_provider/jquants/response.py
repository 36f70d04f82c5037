"""J-Quants API V2 payload schemas and their mapping to domain records."""
from __future__ import annotations

import math
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, List, Optional

from pydantic import BaseModel, Field, ValidationError

from trader.data_provider.errors import NotFoundError, ParseError
from trader.models import Bar, Instrument, Market, Timeframe

DATE_FORMAT = "%Y-%m-%d"


class DailyBarRow(BaseModel):
    """One row of ``GET /equities/bars/daily``.

    Only split-adjusted prices are used; raw and per-session prices are ignored.
    """

    date: str = Field(alias="Date")
    code: str = Field(alias="Code")
    adj_open: Optional[float] = Field(default=None, alias="AdjO")
    adj_high: Optional[float] = Field(default=None, alias="AdjH")
    adj_low: Optional[float] = Field(default=None, alias="AdjL")
    adj_close: Optional[float] = Field(default=None, alias="AdjC")
    adj_volume: Optional[float] = Field(default=None, alias="AdjVo")


class DailyBarsResponse(BaseModel):
    data: List[DailyBarRow]
    pagination_key: Optional[str] = None


class EquityMaster(BaseModel):
    """One row of ``GET /equities/master``. ``MktNm`` is ignored: every listing is TSE."""

    code: str = Field(alias="Code")
    company_name: str = Field(alias="CoName")
    sector_name: Optional[str] = Field(default=None, alias="S33Nm")


class EquitiesMasterResponse(BaseModel):
    data: List[EquityMaster]


class ErrorResponse(BaseModel):
    message: str


def _validate(model: type[BaseModel], payload: Any) -> Any:
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise ParseError(str(e)) from e


def to_decimal(value: float) -> Decimal:
    """Convert an upstream float to Decimal via its shortest repr."""
    if not math.isfinite(value):
        raise ParseError(f"invalid decimal value {value}")
    try:
        return Decimal(repr(value))
    except InvalidOperation as e:
        raise ParseError(f"invalid decimal value {value}: {e}") from e


def to_volume(value: Optional[float]) -> int:
    """Round half away from zero; absent volume counts as 0."""
    if value is None:
        return 0
    return int(to_decimal(value).to_integral_value(rounding=ROUND_HALF_UP))


def parse_bar_date(value: str) -> datetime:
    try:
        day = datetime.strptime(value, DATE_FORMAT)
    except ValueError as e:
        raise ParseError(f"invalid date '{value}': {e}") from e
    return day.replace(tzinfo=timezone.utc)


def decode_daily_bars_page(payload: Any, instrument_id: str) -> tuple[List[Bar], Optional[str]]:
    """
    Decode one page of daily bars.

    Rows lacking any adjusted price (non-trading days, incomplete records)
    are skipped. Every emitted bar carries ``instrument_id``, the code the
    caller searched for, rather than the row's own ``Code``: the API is
    queried with 4-digit codes but answers with 5-digit ones.

    Returns:
        (bars, next pagination key or None)
    """
    page: DailyBarsResponse = _validate(DailyBarsResponse, payload)

    bars: List[Bar] = []
    for row in page.data:
        if None in (row.adj_open, row.adj_high, row.adj_low, row.adj_close):
            continue

        bars.append(
            Bar(
                instrument_id=instrument_id,
                timeframe=Timeframe.DAILY,
                timestamp=parse_bar_date(row.date),
                open=to_decimal(row.adj_open),
                high=to_decimal(row.adj_high),
                low=to_decimal(row.adj_low),
                close=to_decimal(row.adj_close),
                volume=to_volume(row.adj_volume),
            )
        )

    return bars, page.pagination_key


def decode_instrument(payload: Any, instrument_id: str) -> Instrument:
    page: EquitiesMasterResponse = _validate(EquitiesMasterResponse, payload)
    if not page.data:
        raise NotFoundError(f"instrument '{instrument_id}' not found")

    master = page.data[0]
    return Instrument(
        id=master.code,
        name=master.company_name,
        market=Market.TSE,
        sector=master.sector_name,
    )


def decode_error_message(payload: Any) -> Optional[str]:
    """Best-effort extraction of ``message`` from an error body."""
    try:
        return ErrorResponse.model_validate(payload).message
    except ValidationError:
        return None
