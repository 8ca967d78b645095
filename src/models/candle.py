"""Candle and band point value types."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Candle:
    """OHLCV candle. ``timestamp`` is the open time in epoch milliseconds."""

    timestamp: int
    open: float
    high: float
    low: float
    close: float
    volume: float


@dataclass(frozen=True)
class BandPoint:
    """One output row of the indicator; ``nan`` marks an undefined value."""

    timestamp: int
    basis: float
    upper: float
    lower: float

    @property
    def is_defined(self) -> bool:
        return not any(math.isnan(v) for v in (self.basis, self.upper, self.lower))
