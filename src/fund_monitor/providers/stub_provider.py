"""Stub quote provider for offline/testing use."""

import random
from datetime import timedelta
from typing import Any, Optional

from fund_monitor.core.timezone import now_market
from fund_monitor.domain.models import FetchResult
from fund_monitor.providers.market_data_provider import QueryParams

# Deterministic fake prices for a few common codes, keyed by (region, code)
_STUB_PRICES: dict[tuple[str, str], float] = {
    ("SZ", "000001"): 11.52,
    ("SZ", "000858"): 148.30,
    ("SZ", "300750"): 186.45,
    ("HK", "700"): 378.20,
    ("HK", "9988"): 82.15,
    ("HK", "3690"): 121.40,
    ("US", "AAPL"): 185.50,
    ("US", "MSFT"): 378.25,
    ("US", "NVDA"): 485.25,
}


class StubMarketDataProvider:
    """
    Stub provider answering with provider-shaped envelopes.

    Uses predefined prices for common codes and a per-code seeded random
    price otherwise, so repeated calls for one code agree.
    """

    def __init__(self, seed: int = 42):
        self._seed = seed

    async def fetch_json(self, path: str, params: Optional[QueryParams] = None) -> FetchResult[Any]:
        params = params or {}
        region = str(params.get("region", "")).upper()
        code = str(params.get("code", ""))
        if not region or not code:
            return FetchResult.success({"code": 400, "msg": "region and code are required"})

        if path == "/stock/quote":
            return FetchResult.success({"code": 0, "msg": None, "data": self._quote(region, code)})
        if path == "/stock/kline":
            limit = int(params.get("limit", 30))
            return FetchResult.success({"code": 0, "msg": None, "data": self._candles(region, code, limit)})
        return FetchResult.success({"code": 404, "msg": f"Unknown endpoint {path}"})

    async def aclose(self) -> None:
        return None

    def _base_price(self, region: str, code: str) -> float:
        if (region, code) in _STUB_PRICES:
            return _STUB_PRICES[(region, code)]
        rng = random.Random(f"{self._seed}:{region}:{code}")
        return round(5 + rng.random() * 200, 2)

    def _quote(self, region: str, code: str) -> dict[str, Any]:
        last = self._base_price(region, code)
        now = now_market()
        return {
            "s": code,
            "ld": last,
            "o": round(last * 0.995, 3),
            "h": round(last * 1.012, 3),
            "l": round(last * 0.988, 3),
            "v": 1_000_000,
            "t": int(now.timestamp() * 1000),
        }

    def _candles(self, region: str, code: str, limit: int) -> list[dict[str, Any]]:
        rng = random.Random(f"{self._seed}:{region}:{code}:kline")
        close = self._base_price(region, code)
        today = now_market().replace(hour=15, minute=0, second=0, microsecond=0)
        candles = []
        # Walk backwards from today's close so the latest candle matches the quote
        for offset in range(max(limit, 0)):
            day = today - timedelta(days=offset)
            open_ = round(close * (1 + (rng.random() - 0.5) * 0.02), 3)
            candles.append(
                {
                    "t": int(day.timestamp() * 1000),
                    "o": open_,
                    "h": round(max(open_, close) * 1.005, 3),
                    "l": round(min(open_, close) * 0.995, 3),
                    "c": round(close, 3),
                    "v": rng.randint(100_000, 5_000_000),
                }
            )
            close = close / (1 + (rng.random() - 0.5) * 0.04)
        candles.reverse()
        return candles
