"""Select the market data provider from configuration."""
import logging
from typing import Optional

from trader.config import Config
from trader.data_provider.base import DataProvider
from trader.data_provider.jquants import JQuantsClient
from trader.data_provider.provider_mock import MockProvider

logger = logging.getLogger(__name__)


def build_provider(
    kind: Optional[str] = None,
    api_key: Optional[str] = None,
    base_url: Optional[str] = None,
) -> Optional[DataProvider]:
    """
    Build the configured provider.

    Returns None when no provider is configured (no J-Quants API key);
    callers then serve stored data only.
    """
    api_key = api_key if api_key is not None else Config.JQUANTS_API_KEY
    if kind is None:
        kind = Config.DATA_PROVIDER.strip() or ("jquants" if api_key else "none")
    kind = kind.strip().lower()

    if kind == "none":
        logger.info("No market data provider configured")
        return None
    if kind == "mock":
        return MockProvider()
    if kind == "jquants":
        if not api_key:
            logger.warning("JQUANTS_API_KEY is not set, running without market data provider")
            return None
        return JQuantsClient(api_key, base_url=base_url or Config.JQUANTS_BASE_URL)

    raise ValueError(f"Invalid DATA_PROVIDER: {kind}")
