import os
from pydantic import BaseModel
from dotenv import load_dotenv

from src.models.settings import IndicatorSettings

load_dotenv()


class Settings(BaseModel):
    # Indicator defaults used by the CLI and the dashboard
    bb_length: int = int(os.getenv("BB_LENGTH", "20"))
    bb_multiplier: float = float(os.getenv("BB_MULTIPLIER", "2.0"))
    bb_offset: int = int(os.getenv("BB_OFFSET", "0"))

    # Candle sources
    ohlcv_path: str = os.getenv("OHLCV_PATH", "data/ohlcv.json")
    binance_public_base_url: str = os.getenv("BINANCE_PUBLIC_BASE_URL", "https://api.binance.com")
    default_symbol: str = os.getenv("DEFAULT_SYMBOL", "BTCUSDT")
    default_interval: str = os.getenv("DEFAULT_INTERVAL", "1h")
    default_limit: int = int(os.getenv("DEFAULT_LIMIT", "500"))

    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()


def default_indicator_settings() -> IndicatorSettings:
    return IndicatorSettings(
        length=settings.bb_length,
        std_dev_multiplier=settings.bb_multiplier,
        offset=settings.bb_offset,
    )


DASHBOARD_LIMIT_RANGE = (50, 1000)


def dashboard_candle_limit() -> int:
    low, high = DASHBOARD_LIMIT_RANGE
    return max(low, min(settings.default_limit, high))
