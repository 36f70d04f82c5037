"""Configuration management for the trader backend."""
import os
from dotenv import load_dotenv


load_dotenv()

JQUANTS_DEFAULT_BASE_URL = "https://api.jquants.com/v2"

PROVIDER_KINDS = ("jquants", "mock", "none")


class Config:
    """Load and validate environment configuration."""

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Market data provider
    JQUANTS_API_KEY: str = os.getenv("JQUANTS_API_KEY", "")
    JQUANTS_BASE_URL: str = os.getenv("JQUANTS_BASE_URL", JQUANTS_DEFAULT_BASE_URL)
    DATA_PROVIDER: str = os.getenv("DATA_PROVIDER", "").strip().lower()

    # J-Quants Free plan: data is available from 2 years 12 weeks ago up to 12 weeks ago
    BACKFILL_OFFSET_WEEKS: int = 12
    BACKFILL_HISTORY_YEARS: int = 2

    @classmethod
    def provider_kind(cls) -> str:
        """Resolve the provider kind, defaulting on whether an API key is present."""
        kind = cls.DATA_PROVIDER.strip().lower()
        if kind:
            return kind
        return "jquants" if cls.JQUANTS_API_KEY else "none"

    @classmethod
    def validate(cls) -> None:
        """Validate configuration."""
        cls.DATA_PROVIDER = os.getenv("DATA_PROVIDER", cls.DATA_PROVIDER).strip().lower()
        kind = cls.provider_kind()
        if kind not in PROVIDER_KINDS:
            raise ValueError(f"Invalid DATA_PROVIDER: {kind}")
        if kind == "jquants" and not cls.JQUANTS_API_KEY:
            raise ValueError("JQUANTS_API_KEY environment variable is required for DATA_PROVIDER=jquants")

        if not cls.JQUANTS_BASE_URL.startswith(("http://", "https://")):
            raise ValueError("JQUANTS_BASE_URL must be an http(s) URL")

        try:
            offset = int(os.getenv("BACKFILL_OFFSET_WEEKS", str(cls.BACKFILL_OFFSET_WEEKS)))
            if offset < 0:
                raise ValueError("BACKFILL_OFFSET_WEEKS must be non-negative")
            cls.BACKFILL_OFFSET_WEEKS = offset
        except ValueError as e:
            raise ValueError(f"Invalid BACKFILL_OFFSET_WEEKS: {e}")

        try:
            years = int(os.getenv("BACKFILL_HISTORY_YEARS", str(cls.BACKFILL_HISTORY_YEARS)))
            if years < 1:
                raise ValueError("BACKFILL_HISTORY_YEARS must be at least 1")
            cls.BACKFILL_HISTORY_YEARS = years
        except ValueError as e:
            raise ValueError(f"Invalid BACKFILL_HISTORY_YEARS: {e}")
