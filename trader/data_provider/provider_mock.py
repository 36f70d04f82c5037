"""In-memory market data provider for tests and local runs."""
import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable, List

from trader.data_provider.errors import NotFoundError
from trader.models import Bar, DateRange, Instrument

logger = logging.getLogger(__name__)


class MockProvider:
    """Serve pre-registered bars and instruments; unknown instruments are NotFound."""

    def __init__(self) -> None:
        self.bars: List[Bar] = []
        self.instruments: List[Instrument] = []
        logger.info("MockProvider initialized (in-memory)")

    def with_bars(self, bars: Iterable[Bar]) -> "MockProvider":
        self.bars = list(bars)
        return self

    def with_instruments(self, instruments: Iterable[Instrument]) -> "MockProvider":
        self.instruments = list(instruments)
        return self

    async def fetch_daily_bars(
        self,
        instrument_id: str,
        date_range: DateRange,
    ) -> List[Bar]:
        if not any(i.id == instrument_id for i in self.instruments):
            raise NotFoundError(f"instrument '{instrument_id}' not found")

        start = datetime.combine(date_range.from_, time(), tzinfo=timezone.utc)
        # `to` is inclusive: next midnight is the exclusive bound, if there is one
        end = None
        if date_range.to < date.max:
            end = datetime.combine(date_range.to + timedelta(days=1), time(), tzinfo=timezone.utc)

        bars = [
            b for b in self.bars
            if b.instrument_id == instrument_id
            and start <= b.timestamp
            and (end is None or b.timestamp < end)
        ]
        bars.sort(key=lambda b: b.timestamp)

        logger.debug(
            f"MockProvider returned {len(bars)} bars "
            f"for {instrument_id} ({date_range.from_} to {date_range.to})"
        )
        return bars

    async def fetch_instrument(self, instrument_id: str) -> Instrument:
        for instrument in self.instruments:
            if instrument.id == instrument_id:
                return instrument
        raise NotFoundError(f"instrument '{instrument_id}' not found")
