"""Shared test fixtures and utilities."""

import json

import pytest

from tests.helpers import make_candles


@pytest.fixture
def scenario_closes():
    return [10.0, 12.0, 11.0, 13.0, 12.0]


@pytest.fixture
def scenario_candles(scenario_closes):
    return make_candles(scenario_closes)


@pytest.fixture
def wavy_closes():
    closes = []
    price = 100.0
    for i in range(40):
        price += ((i * 7) % 11 - 5) * 0.37
        closes.append(round(price, 4))
    return closes


@pytest.fixture
def wavy_candles(wavy_closes):
    return make_candles(wavy_closes)


@pytest.fixture
def ohlcv_file(tmp_path, scenario_candles):
    """Write the scenario candles as an ohlcv.json file."""
    path = tmp_path / "ohlcv.json"
    path.write_text(
        json.dumps(
            [
                {
                    "timestamp": c.timestamp,
                    "open": c.open,
                    "high": c.high,
                    "low": c.low,
                    "close": c.close,
                    "volume": c.volume,
                }
                for c in scenario_candles
            ]
        )
    )
    return path
