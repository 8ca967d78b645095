from __future__ import annotations


class InvalidSettings(ValueError):
    """Indicator settings that cannot produce a meaningful band series."""


class CandleDataError(ValueError):
    """Candle input that could not be parsed into an ordered series."""
