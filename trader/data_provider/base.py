"""Market data provider abstraction."""
from typing import List, Protocol

from trader.models import Bar, DateRange, Instrument


class DataProvider(Protocol):
    """Protocol for market data providers."""

    async def fetch_daily_bars(
        self,
        instrument_id: str,
        date_range: DateRange,
    ) -> List[Bar]:
        """
        Fetch daily bars for an instrument.

        Args:
            instrument_id: Instrument code (e.g., '8697')
            date_range: Inclusive calendar date range

        Returns:
            Bars sorted ascending by timestamp. Timestamps are UTC midnight.
            An empty list when no bar matches.

        Raises:
            DataProviderError: NotFoundError, NetworkError, ApiError,
                RateLimitedError or ParseError.
        """
        ...

    async def fetch_instrument(self, instrument_id: str) -> Instrument:
        """
        Fetch metadata for a single instrument.

        Raises:
            NotFoundError: If the provider has no such instrument.
        """
        ...
