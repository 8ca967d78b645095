"""Tests for candle loading and frame conversion."""

import json
import math
from pathlib import Path
from unittest.mock import MagicMock

import pandas as pd
import pytest

from src.data.market_data import (
    bands_to_frame,
    candles_from_klines,
    candles_from_records,
    candles_to_frame,
    fetch_candles,
    load_candles_json,
)
from src.errors import CandleDataError
from src.models.candle import BandPoint
from tests.helpers import BASE_TS, HOUR_MS


def _kline(ts, close):
    return [ts, "1.0", "2.0", "0.5", str(close), "10.5", ts + HOUR_MS - 1, "0", 5, "0", "0", "0"]


class TestLoadCandlesJson:
    def test_loads_file(self, ohlcv_file, scenario_candles):
        assert load_candles_json(ohlcv_file) == scenario_candles

    def test_bundled_sample_file(self):
        candles = load_candles_json(Path(__file__).resolve().parents[1] / "data" / "ohlcv.json")
        assert len(candles) == 60
        assert candles[0].timestamp == 1704067200000

    def test_missing_field(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps([{"timestamp": 1, "open": 1, "high": 1, "low": 1, "volume": 1}]))
        with pytest.raises(CandleDataError, match="close"):
            load_candles_json(path)

    def test_not_an_array(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"candles": []}))
        with pytest.raises(CandleDataError):
            load_candles_json(path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("[{")
        with pytest.raises(CandleDataError, match="Invalid JSON"):
            load_candles_json(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_candles_json(tmp_path / "nope.json")


class TestRecords:
    def test_unordered_timestamps_rejected(self):
        records = [
            {"timestamp": 2, "open": 1, "high": 1, "low": 1, "close": 1, "volume": 1},
            {"timestamp": 1, "open": 1, "high": 1, "low": 1, "close": 1, "volume": 1},
        ]
        with pytest.raises(CandleDataError, match="increasing"):
            candles_from_records(records)

    def test_non_numeric_rejected(self):
        records = [{"timestamp": 1, "open": "x", "high": 1, "low": 1, "close": 1, "volume": 1}]
        with pytest.raises(CandleDataError):
            candles_from_records(records)

    def test_nan_close_kept(self):
        records = [{"timestamp": 1, "open": 1, "high": 1, "low": 1, "close": float("nan"), "volume": 1}]
        assert math.isnan(candles_from_records(records)[0].close)


class TestKlines:
    def test_candles_from_klines(self):
        candles = candles_from_klines([_kline(BASE_TS, 101.5), _kline(BASE_TS + HOUR_MS, 102.25)])

        assert [c.timestamp for c in candles] == [BASE_TS, BASE_TS + HOUR_MS]
        assert candles[1].close == 102.25
        assert candles[0].volume == 10.5

    def test_short_row_rejected(self):
        with pytest.raises(CandleDataError):
            candles_from_klines([[BASE_TS, "1", "2"]])

    def test_fetch_candles_uses_client(self):
        client = MagicMock()
        client.get_klines.return_value = [_kline(BASE_TS, 100), _kline(BASE_TS + HOUR_MS, 101)]

        candles = fetch_candles(client, "ETHUSDT", "1h", limit=2)

        client.get_klines.assert_called_once_with(symbol="ETHUSDT", interval="1h", limit=2)
        assert [c.close for c in candles] == [100.0, 101.0]


class TestFrames:
    def test_candles_to_frame(self, scenario_candles):
        df = candles_to_frame(scenario_candles)

        assert list(df.columns) == ["timestamp", "open", "high", "low", "close", "volume"]
        assert len(df) == 5
        assert df.index[0] == pd.Timestamp(BASE_TS, unit="ms", tz="UTC")
        assert df["close"].tolist() == [c.close for c in scenario_candles]

    def test_bands_to_frame_keeps_nan(self):
        points = [
            BandPoint(timestamp=BASE_TS, basis=float("nan"), upper=float("nan"), lower=float("nan")),
            BandPoint(timestamp=BASE_TS + HOUR_MS, basis=10.0, upper=12.0, lower=8.0),
        ]
        df = bands_to_frame(points)

        assert list(df.columns) == ["timestamp", "basis", "upper", "lower"]
        assert df["basis"].isna().tolist() == [True, False]
        assert df["upper"].iloc[1] == 12.0


class TestKlineColumns:
    def test_ignores_trailing_kline_fields(self):
        row = _kline(BASE_TS, 99.5)
        row[6:] = [0, "junk", 0, "junk", "junk", "junk"]
        candles = candles_from_klines([row])
        assert candles[0].close == 99.5
        assert candles[0].timestamp == BASE_TS

    def test_row_without_all_kline_columns_rejected(self):
        with pytest.raises(CandleDataError, match="expected 12"):
            candles_from_klines([[BASE_TS, "1", "2", "0.5", "1.5", "10"]])

    def test_non_numeric_price_rejected(self):
        row = _kline(BASE_TS, 1)
        row[4] = "n/a"
        with pytest.raises(CandleDataError, match="non-numeric"):
            candles_from_klines([row])

    def test_empty_rows(self):
        assert candles_from_klines([]) == []
