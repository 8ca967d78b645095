from __future__ import annotations

import logging
from typing import Any, List, Optional

from binance.spot import Spot as SpotClient

from src.config import settings

logger = logging.getLogger(__name__)

MAINNET_BASE_URL = "https://api.binance.com"
ALT_PUBLIC_URLS = [
	"https://api1.binance.com",
	"https://api2.binance.com",
	"https://api3.binance.com",
	"https://api4.binance.com",
]

KLINE_INTERVALS = (
	"1m", "3m", "5m", "15m", "30m", "1h", "2h", "4h", "6h", "8h", "12h", "1d", "3d", "1w", "1M",
)
MAX_KLINES_LIMIT = 1000


class BinanceKlinesClient:
	"""Read-only access to Binance public kline data."""

	def __init__(self, base_url: Optional[str] = None) -> None:
		configured_public = base_url or settings.binance_public_base_url or MAINNET_BASE_URL
		self.public_urls: List[str] = [configured_public] + [u for u in ALT_PUBLIC_URLS if u != configured_public]

	def _with_public_fallback(self, func_name: str, **kwargs: Any) -> Any:
		last_exc: Optional[Exception] = None
		for url in self.public_urls:
			try:
				client = SpotClient(base_url=url)
				func = getattr(client, func_name)
				return func(**kwargs)
			except Exception as exc:  # noqa: BLE001 - we want to surface last exception
				logger.warning("Binance %s failed on %s: %s", func_name, url, exc)
				last_exc = exc
				continue
		if last_exc:
			raise last_exc
		raise RuntimeError("Public Binance endpoints are not reachable.")

	def get_klines(self, symbol: str, interval: str, limit: int = 500) -> List[List[Any]]:
		if interval not in KLINE_INTERVALS:
			raise ValueError(f"Unsupported kline interval: {interval}")
		if not 1 <= limit <= MAX_KLINES_LIMIT:
			raise ValueError(f"limit must be between 1 and {MAX_KLINES_LIMIT}")
		return self._with_public_fallback("klines", symbol=symbol.upper(), interval=interval, limit=limit)
