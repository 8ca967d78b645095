from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, List, Literal, Sequence

import pandas as pd

from src.errors import CandleDataError
from src.exchange.binance_client import BinanceKlinesClient
from src.models.candle import BandPoint, Candle

logger = logging.getLogger(__name__)

OHLCV_FIELDS = ("open", "high", "low", "close", "volume")
KLINE_COLUMNS = [
    "open_time",
    "open",
    "high",
    "low",
    "close",
    "volume",
    "close_time",
    "quote_asset_volume",
    "number_of_trades",
    "taker_buy_base",
    "taker_buy_quote",
    "ignore",
]


def _check_order(candles: Sequence[Candle]) -> None:
    for prev, cur in zip(candles, candles[1:]):
        if cur.timestamp <= prev.timestamp:
            raise CandleDataError(
                f"Candle timestamps must be strictly increasing: {prev.timestamp} followed by {cur.timestamp}"
            )


def candles_from_records(records: Iterable[dict]) -> List[Candle]:
    candles: List[Candle] = []
    for i, rec in enumerate(records):
        missing = [f for f in ("timestamp",) + OHLCV_FIELDS if f not in rec]
        if missing:
            raise CandleDataError(f"Record {i} is missing fields: {', '.join(missing)}")
        try:
            candles.append(
                Candle(
                    timestamp=int(rec["timestamp"]),
                    open=float(rec["open"]),
                    high=float(rec["high"]),
                    low=float(rec["low"]),
                    close=float(rec["close"]),
                    volume=float(rec["volume"]),
                )
            )
        except (TypeError, ValueError) as exc:
            raise CandleDataError(f"Record {i} has a non-numeric field: {exc}") from exc
    _check_order(candles)
    return candles


def load_candles_json(path: str | Path) -> List[Candle]:
    """Load an ``ohlcv.json`` array of ``{timestamp, open, high, low, close, volume}``."""
    path = Path(path)
    try:
        with open(path) as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        raise CandleDataError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(raw, list):
        raise CandleDataError(f"Expected a JSON array of candles in {path}")
    candles = candles_from_records(raw)
    logger.info("Loaded %d candles from %s", len(candles), path)
    return candles


def candles_from_klines(rows: Sequence[Sequence[Any]]) -> List[Candle]:
    for row in rows:
        if len(row) != len(KLINE_COLUMNS):
            raise CandleDataError(f"Kline row has {len(row)} fields, expected {len(KLINE_COLUMNS)}")

    df = pd.DataFrame(list(rows), columns=KLINE_COLUMNS)
    try:
        df["open_time"] = df["open_time"].astype("int64")
        for col in OHLCV_FIELDS:
            df[col] = df[col].astype(float)
    except (TypeError, ValueError) as exc:
        raise CandleDataError(f"Kline rows have a non-numeric field: {exc}") from exc

    candles = [
        Candle(
            timestamp=int(row.open_time),
            open=float(row.open),
            high=float(row.high),
            low=float(row.low),
            close=float(row.close),
            volume=float(row.volume),
        )
        for row in df.itertuples(index=False)
    ]
    _check_order(candles)
    return candles


def fetch_candles(
    client: BinanceKlinesClient,
    symbol: str,
    interval: Literal[
        "1m", "3m", "5m", "15m", "30m", "1h", "2h", "4h", "6h", "8h", "12h", "1d"
    ] = "1h",
    limit: int = 500,
) -> List[Candle]:
    raw = client.get_klines(symbol=symbol, interval=interval, limit=limit)
    candles = candles_from_klines(raw)
    logger.info("Fetched %d %s candles for %s", len(candles), interval, symbol)
    return candles


def candles_to_frame(candles: Sequence[Candle]) -> pd.DataFrame:
    df = pd.DataFrame(
        [[c.timestamp, c.open, c.high, c.low, c.close, c.volume] for c in candles],
        columns=["timestamp", *OHLCV_FIELDS],
    )
    df["open_time"] = pd.to_datetime(df["timestamp"], unit="ms", utc=True)
    for col in OHLCV_FIELDS:
        df[col] = df[col].astype(float)
    df.set_index("open_time", inplace=True)
    return df[["timestamp", *OHLCV_FIELDS]]


def bands_to_frame(points: Sequence[BandPoint]) -> pd.DataFrame:
    df = pd.DataFrame(
        [[p.timestamp, p.basis, p.upper, p.lower] for p in points],
        columns=["timestamp", "basis", "upper", "lower"],
    )
    df["open_time"] = pd.to_datetime(df["timestamp"], unit="ms", utc=True)
    for col in ("basis", "upper", "lower"):
        df[col] = df[col].astype(float)
    df.set_index("open_time", inplace=True)
    return df
