"""Process-wide logging configuration."""
import logging

from trader.config import Config

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(level=level or Config.LOG_LEVEL, format=LOG_FORMAT)
    # httpx logs every request URL at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
