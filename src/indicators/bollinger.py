"""Bollinger Bands over closing prices.

The pipeline is rolling mean -> rolling sample dispersion -> band assembly ->
positional offset. Undefined values are carried as ``nan`` end to end, so a
short history or a non-finite close never aborts the series.
"""

from __future__ import annotations

import logging
import math
from typing import List, Sequence, Tuple

import numpy as np

from src.errors import InvalidSettings
from src.models.candle import BandPoint, Candle
from src.models.settings import IndicatorSettings

logger = logging.getLogger(__name__)

SUPPORTED_MA_TYPES = {"SMA"}
SUPPORTED_SOURCES = {"close"}


def validate_settings(settings: IndicatorSettings) -> None:
    """Reject settings that cannot yield bands.

    Pydantic already enforces these on construction; this covers objects built
    with ``model_construct`` and duck-typed settings from other callers.
    """
    length = settings.length
    if isinstance(length, bool) or not isinstance(length, (int, np.integer)) or length < 1:
        raise InvalidSettings(f"length must be an integer >= 1, got {length!r}")

    multiplier = settings.std_dev_multiplier
    if isinstance(multiplier, bool) or not isinstance(multiplier, (int, float, np.number)):
        raise InvalidSettings(f"std_dev_multiplier must be a number, got {multiplier!r}")
    if not math.isfinite(multiplier) or multiplier <= 0:
        raise InvalidSettings(f"std_dev_multiplier must be > 0, got {multiplier!r}")

    offset = settings.offset
    if isinstance(offset, bool) or not isinstance(offset, (int, np.integer)):
        raise InvalidSettings(f"offset must be an integer, got {offset!r}")

    ma_type = getattr(settings, "ma_type", "SMA")
    if ma_type not in SUPPORTED_MA_TYPES:
        raise InvalidSettings(f"Unsupported moving average type: {ma_type!r}")
    source = getattr(settings, "source", "close")
    if source not in SUPPORTED_SOURCES:
        raise InvalidSettings(f"Unsupported price source: {source!r}")


def rolling_mean(values: Sequence[float], length: int) -> np.ndarray:
    data = np.asarray(values, dtype=float)
    out = np.full(data.shape[0], np.nan)
    if length <= 0:
        return out

    for i in range(length - 1, data.shape[0]):
        window = data[i - length + 1 : i + 1]
        if np.isfinite(window).all():
            out[i] = window.sum() / length
    return out


def rolling_dispersion(values: Sequence[float], length: int, means: Sequence[float]) -> np.ndarray:
    """Sample standard deviation (ddof=1) around the precomputed window means."""
    data = np.asarray(values, dtype=float)
    means = np.asarray(means, dtype=float)
    out = np.full(data.shape[0], np.nan)
    # ddof=1 leaves nothing to divide by for a single-point window
    if length <= 1:
        return out

    for i in range(length - 1, data.shape[0]):
        mean = means[i]
        if not np.isfinite(mean):
            continue
        window = data[i - length + 1 : i + 1]
        if not np.isfinite(window).all():
            continue
        out[i] = math.sqrt(float(((window - mean) ** 2).sum()) / (length - 1))
    return out


def assemble_bands(
    means: Sequence[float],
    dispersions: Sequence[float],
    multiplier: float,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    basis = np.asarray(means, dtype=float)
    dispersion = np.asarray(dispersions, dtype=float)
    defined = np.isfinite(basis) & np.isfinite(dispersion)
    width = multiplier * dispersion
    upper = np.where(defined, basis + width, np.nan)
    lower = np.where(defined, basis - width, np.nan)
    return basis, upper, lower


def apply_offset(values: np.ndarray, offset: int) -> np.ndarray:
    """Shift values right by ``offset`` positions (left when negative).

    Positions whose source index falls outside the series keep their own
    unshifted value. A zero offset returns ``values`` itself.
    """
    if offset == 0:
        return values

    data = np.asarray(values, dtype=float)
    result = data.copy()
    size = data.shape[0]
    if abs(offset) >= size:
        return result
    if offset > 0:
        result[offset:] = data[: size - offset]
    else:
        result[: size + offset] = data[-offset:]
    return result


def _band_series(
    closes: Sequence[float],
    settings: IndicatorSettings,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    length = int(settings.length)

    means = rolling_mean(closes, length)
    dispersions = rolling_dispersion(closes, length, means)
    basis, upper, lower = assemble_bands(means, dispersions, float(settings.std_dev_multiplier))

    offset = int(settings.offset)
    if offset != 0:
        basis = apply_offset(basis, offset)
        upper = apply_offset(upper, offset)
        lower = apply_offset(lower, offset)
    return basis, upper, lower


def compute_band_series(
    closes: Sequence[float],
    settings: IndicatorSettings,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    validate_settings(settings)
    return _band_series(closes, settings)


def compute_bollinger_bands(candles: Sequence[Candle], settings: IndicatorSettings) -> List[BandPoint]:
    """Compute one ``BandPoint`` per candle, timestamps taken from the input.

    Raises ``InvalidSettings`` before any work when the settings are unusable;
    otherwise never raises for numeric input.
    """
    validate_settings(settings)
    if len(candles) == 0:
        return []

    closes = np.fromiter((c.close for c in candles), dtype=float, count=len(candles))
    basis, upper, lower = _band_series(closes, settings)

    points = [
        BandPoint(timestamp=candle.timestamp, basis=float(b), upper=float(u), lower=float(lo))
        for candle, b, u, lo in zip(candles, basis, upper, lower)
    ]
    logger.debug(
        "Computed %d band points (length=%s, mult=%s, offset=%s), %d defined",
        len(points),
        settings.length,
        settings.std_dev_multiplier,
        settings.offset,
        int(np.isfinite(upper).sum()),
    )
    return points
