"""Domain records produced by market data providers."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum


class Timeframe(str, Enum):
    """Bar interval."""

    DAILY = "1d"


class Market(str, Enum):
    """Exchange an instrument is listed on."""

    TSE = "TSE"


@dataclass(frozen=True)
class Bar:
    """OHLCV bar. Identity is (instrument_id, timeframe, timestamp)."""

    instrument_id: str
    timeframe: Timeframe
    timestamp: datetime
    open: Decimal
    high: Decimal
    low: Decimal
    close: Decimal
    volume: int


@dataclass(frozen=True)
class Instrument:
    id: str
    name: str
    market: Market
    sector: str | None = None


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar date range used to query daily bars."""

    from_: date
    to: date

    def __post_init__(self) -> None:
        if self.from_ > self.to:
            raise ValueError(f"DateRange start {self.from_} is after end {self.to}")
