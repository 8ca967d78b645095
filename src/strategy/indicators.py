from __future__ import annotations

import numpy as np
import pandas as pd

from src.indicators.bollinger import compute_band_series
from src.models.settings import IndicatorSettings


def add_bollinger_features(df: pd.DataFrame, settings: IndicatorSettings) -> pd.DataFrame:
    out = df.copy()
    basis, upper, lower = compute_band_series(out["close"].to_numpy(dtype=float), settings)

    out["bb_basis"] = basis
    out["bb_upper"] = upper
    out["bb_lower"] = lower

    # Bandwidth and %B for additional diagnostics
    width = out["bb_upper"] - out["bb_lower"]
    out["bb_bandwidth"] = width / out["close"]
    out["bb_percent_b"] = (out["close"] - out["bb_lower"]) / width.replace(0.0, np.nan)
    return out
