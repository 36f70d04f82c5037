"""Background jobs built on the market data provider."""
from trader.services.backfill import BackfillService, free_plan_range

__all__ = ["BackfillService", "free_plan_range"]
