"""Daily bar backfill from the market data provider."""
import logging
from datetime import date, datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional

from trader.config import Config
from trader.data_provider.base import DataProvider
from trader.data_provider.errors import DataProviderError
from trader.models import Bar, DateRange, Timeframe

logger = logging.getLogger(__name__)

BarStore = Callable[[List[Bar]], Awaitable[Any]]


def free_plan_range(today: date) -> DateRange:
    """
    Window the J-Quants Free plan serves: from (history + offset) ago up to offset ago.

    https://jpx.gitbook.io/j-quants-ja/outline/data-spec
    """
    to = today - timedelta(weeks=Config.BACKFILL_OFFSET_WEEKS)
    from_ = to - timedelta(weeks=Config.BACKFILL_HISTORY_YEARS * 52)
    return DateRange(from_=from_, to=to)


class BackfillService:
    """Fetch daily bars for an instrument and hand them to the bar store."""

    def __init__(self, provider: DataProvider, store: BarStore) -> None:
        self.provider = provider
        self.store = store

    async def backfill_daily_bars(
        self,
        instrument_id: str,
        today: Optional[date] = None,
    ) -> Dict[str, Any]:
        """
        Backfill the Free-plan window for one instrument.

        Runs as a background task, so failures are logged and reported in the
        result instead of raised.

        Returns:
            Dict with instrument_id, status ("ok", "empty" or "failed"),
            bar_count and, on failure, error.
        """
        today = today or datetime.now(timezone.utc).date()
        date_range = free_plan_range(today)
        logger.info(
            f"Starting backfill for {instrument_id} "
            f"from {date_range.from_.isoformat()} to {date_range.to.isoformat()}"
        )

        try:
            bars = await self.provider.fetch_daily_bars(instrument_id, date_range)
        except DataProviderError as e:
            logger.error(f"Failed to fetch daily bars for {instrument_id}: {e}")
            return _result(instrument_id, "failed", error=str(e))

        if not bars:
            logger.info(f"No bars to backfill for {instrument_id}")
            return _result(instrument_id, "empty")

        daily_bars = [b for b in bars if b.timeframe == Timeframe.DAILY]

        try:
            await self.store(daily_bars)
        except Exception as e:
            logger.error(f"Failed to store daily bars for {instrument_id}: {e}", exc_info=True)
            return _result(instrument_id, "failed", error=str(e))

        logger.info(f"Backfilled {len(daily_bars)} daily bars for {instrument_id}")
        return _result(instrument_id, "ok", bar_count=len(daily_bars))

    async def backfill_many(
        self,
        instrument_ids: Iterable[str],
        today: Optional[date] = None,
    ) -> List[Dict[str, Any]]:
        """Backfill instruments one after another; they share the provider's quota anyway."""
        return [await self.backfill_daily_bars(i, today=today) for i in instrument_ids]


def _result(instrument_id: str, status: str, bar_count: int = 0, error: Optional[str] = None) -> Dict[str, Any]:
    result: Dict[str, Any] = {
        "instrument_id": instrument_id,
        "status": status,
        "bar_count": bar_count,
    }
    if error is not None:
        result["error"] = error
    return result
