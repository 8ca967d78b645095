from __future__ import annotations

import argparse
import json
import logging
import math
import sys
from typing import List, Optional, Sequence

from pydantic import ValidationError

from src.chart.figure import build_figure
from src.config import default_indicator_settings, settings
from src.data.market_data import bands_to_frame, fetch_candles, load_candles_json
from src.errors import CandleDataError, InvalidSettings
from src.exchange.binance_client import BinanceKlinesClient
from src.indicators.bollinger import compute_bollinger_bands
from src.log import setup_logging
from src.models.candle import BandPoint, Candle
from src.models.settings import DEFAULT_SETTINGS, IndicatorSettings, settings_to_json

logger = logging.getLogger(__name__)


def _add_source_args(p: argparse.ArgumentParser) -> None:
    defaults = default_indicator_settings()
    src = p.add_mutually_exclusive_group()
    src.add_argument("--file", default=None, help=f"OHLCV JSON file (default: {settings.ohlcv_path})")
    src.add_argument("--symbol", default=None, help="Fetch candles from Binance instead of a file")
    p.add_argument("--interval", default=settings.default_interval)
    p.add_argument("--limit", type=int, default=settings.default_limit)
    p.add_argument("--length", type=int, default=defaults.length)
    p.add_argument("--mult", type=float, default=defaults.std_dev_multiplier)
    p.add_argument("--offset", type=int, default=defaults.offset)


def _load_candles(args: argparse.Namespace) -> List[Candle]:
    if args.symbol:
        return fetch_candles(BinanceKlinesClient(), args.symbol, args.interval, limit=args.limit)
    return load_candles_json(args.file or settings.ohlcv_path)


def _indicator_settings(args: argparse.Namespace) -> IndicatorSettings:
    return IndicatorSettings(length=args.length, std_dev_multiplier=args.mult, offset=args.offset)


def _json_value(v: float) -> Optional[float]:
    return None if math.isnan(v) else v


def format_points(points: Sequence[BandPoint], fmt: str) -> str:
    if fmt == "csv":
        df = bands_to_frame(points)
        return df.to_csv(index=False, na_rep="")
    return json.dumps(
        [
            {
                "timestamp": p.timestamp,
                "basis": _json_value(p.basis),
                "upper": _json_value(p.upper),
                "lower": _json_value(p.lower),
            }
            for p in points
        ],
        indent=2,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Bollinger Bands over OHLCV candles")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_compute = sub.add_parser("compute", help="Compute band points")
    _add_source_args(p_compute)
    p_compute.add_argument("--format", choices=["json", "csv"], default="json")
    p_compute.add_argument("--output", default=None, help="Write to a file instead of stdout")

    p_chart = sub.add_parser("chart", help="Render candles and bands to an HTML file")
    _add_source_args(p_chart)
    p_chart.add_argument("--output", default="bollinger.html")

    sub.add_parser("defaults", help="Print the default indicator settings as JSON")

    args = parser.parse_args(argv)
    setup_logging(settings.log_level)

    if args.cmd == "defaults":
        print(settings_to_json(DEFAULT_SETTINGS))
        return 0

    try:
        bb_settings = _indicator_settings(args)
    except ValidationError as e:
        parser.error(f"Invalid indicator settings: {e}")

    try:
        candles = _load_candles(args)
        points = compute_bollinger_bands(candles, bb_settings)
    except (CandleDataError, InvalidSettings, FileNotFoundError) as e:
        parser.error(str(e))

    if args.cmd == "compute":
        text = format_points(points, args.format)
        if args.output:
            with open(args.output, "w") as f:
                f.write(text)
            logger.info("Wrote %d band points to %s", len(points), args.output)
        else:
            print(text)
    elif args.cmd == "chart":
        fig = build_figure(candles, points, bb_settings, title=args.symbol or None)
        fig.write_html(args.output)
        logger.info("Wrote chart with %d candles to %s", len(candles), args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
