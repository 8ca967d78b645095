"""Candle builders shared by the test modules."""

from typing import List, Sequence

from src.models.candle import Candle

BASE_TS = 1704067200000
HOUR_MS = 3_600_000


def make_candles(closes: Sequence[float], start: int = BASE_TS, step: int = HOUR_MS) -> List[Candle]:
    """Build candles whose OHLC all equal the given close."""
    return [
        Candle(timestamp=start + i * step, open=c, high=c, low=c, close=c, volume=1.0)
        for i, c in enumerate(closes)
    ]
