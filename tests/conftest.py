"""
Pytest configuration and fixtures for fund monitor tests.

This module provides:
- A controllable clock
- Provider-shaped envelope builders
- A scripted in-memory quote provider that records calls
- Factory helpers for holdings and portfolio configuration
- Service fixtures wired around the fake provider
"""

import asyncio
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, Optional, Union

import pytest

from fund_monitor.core.timezone import MARKET_TZ
from fund_monitor.domain.models import (
    Category,
    CategoryConfig,
    FetchErrorKind,
    FetchResult,
    HoldingConfig,
    Market,
    PortfolioConfig,
    Quote,
    ValueFallback,
)
from fund_monitor.domain.views import EnrichedHolding
from fund_monitor.services import PortfolioFetcher, QuoteCache, QuoteFetcher
from fund_monitor.services.quote_fetcher import QUOTE_PATH
from fund_monitor.config.settings import reset_settings


# =============================================================================
# TIME HELPERS
# =============================================================================


def market_datetime(
    year: int,
    month: int,
    day: int,
    hour: int = 10,
    minute: int = 0,
    second: int = 0,
) -> datetime:
    """Create a localized datetime in the home market timezone."""
    return MARKET_TZ.localize(datetime(year, month, day, hour, minute, second))


def epoch_millis(dt: datetime) -> int:
    return int(dt.timestamp() * 1000)


class FakeClock:
    """Callable clock whose time only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture
def fixed_now() -> datetime:
    """Fixed 'now' timestamp for deterministic tests."""
    return market_datetime(2024, 6, 14, 14, 30, 0)


@pytest.fixture
def clock(fixed_now) -> FakeClock:
    return FakeClock(fixed_now)


@pytest.fixture(autouse=True)
def _clean_settings():
    reset_settings()
    yield
    reset_settings()


# =============================================================================
# PROVIDER FAKES
# =============================================================================


QUOTE_TIME = market_datetime(2024, 6, 14, 14, 29, 58)


def quote_envelope(code: str, last_price: Any, **fields: Any) -> dict[str, Any]:
    """Success envelope for the quote endpoint."""
    data = {
        "s": code,
        "ld": last_price,
        "o": fields.get("o", last_price),
        "h": fields.get("h", last_price),
        "l": fields.get("l", last_price),
        "v": fields.get("v", 1000),
        "t": fields.get("t", epoch_millis(QUOTE_TIME)),
    }
    return {"code": 0, "msg": None, "data": data}


def kline_envelope(closes: list[Any], first_day: Optional[datetime] = None) -> dict[str, Any]:
    """Success envelope for the kline endpoint: one candle per consecutive day."""
    first_day = first_day or market_datetime(2024, 6, 10, 15, 0, 0)
    candles = [
        {
            "t": epoch_millis(first_day + timedelta(days=i)),
            "o": close,
            "h": close,
            "l": close,
            "c": close,
            "v": 500,
        }
        for i, close in enumerate(closes)
    ]
    return {"code": 0, "msg": None, "data": candles}


def error_envelope(code: int = 2, msg: str = "invalid code") -> dict[str, Any]:
    return {"code": code, "msg": msg}


TRANSPORT_FAILURE = FetchResult.failure(
    FetchErrorKind.TRANSPORT,
    "HTTP 503: Service Unavailable",
    status_code=503,
)

Answer = Union[float, int, str, dict, FetchResult, Exception]


class FakeProvider:
    """
    In-memory provider keyed by (region, code).

    quotes/klines values may be:
    - a number: last price (quotes) / not allowed for klines
    - a dict: returned verbatim as the decoded body
    - a FetchResult: returned as-is (e.g. TRANSPORT_FAILURE)
    - an Exception: raised
    Unknown keys answer with a logical error envelope.
    gates[(region, code)] holds an asyncio.Event the call waits on.
    """

    def __init__(
        self,
        quotes: Optional[dict[tuple[str, str], Answer]] = None,
        klines: Optional[dict[tuple[str, str], Answer]] = None,
    ):
        self.quotes = dict(quotes or {})
        self.klines = dict(klines or {})
        self.gates: dict[tuple[str, str], asyncio.Event] = {}
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.closed = False

    def call_count(self, path: str = QUOTE_PATH, key: Optional[tuple[str, str]] = None) -> int:
        return sum(
            1
            for called_path, params in self.calls
            if called_path == path and (key is None or (params["region"], params["code"]) == key)
        )

    async def fetch_json(self, path: str, params: Optional[dict[str, Any]] = None) -> FetchResult[Any]:
        params = dict(params or {})
        self.calls.append((path, params))
        key = (str(params["region"]), str(params["code"]))

        gate = self.gates.get(key)
        if gate is not None:
            await gate.wait()

        table = self.quotes if path == QUOTE_PATH else self.klines
        answer = table.get(key)
        if answer is None:
            return FetchResult.success(error_envelope(msg=f"unknown code {key[1]}"))
        if isinstance(answer, Exception):
            raise answer
        if isinstance(answer, FetchResult):
            return answer
        if isinstance(answer, dict):
            return FetchResult.success(answer)
        return FetchResult.success(quote_envelope(key[1], answer))

    async def aclose(self) -> None:
        self.closed = True


async def settle(rounds: int = 10) -> None:
    """Let every ready task run until it blocks."""
    for _ in range(rounds):
        await asyncio.sleep(0)


# =============================================================================
# CONFIGURATION FACTORIES
# =============================================================================


def make_holding(
    code: str,
    allocation: Union[str, int] = "100",
    purchase_price: Optional[Union[str, int]] = "1",
    name: Optional[str] = None,
    currency: str = "CNY",
) -> HoldingConfig:
    return HoldingConfig(
        code=code,
        name=name or f"Holding {code}",
        allocation=Decimal(str(allocation)),
        purchase_price=Decimal(str(purchase_price)) if purchase_price is not None else None,
        currency=currency,
    )


def make_category(
    category: Category,
    holdings: list[HoldingConfig],
    capital: Union[str, int] = "10000",
    value_fallback: ValueFallback = ValueFallback.COST,
    currency: str = "CNY",
) -> CategoryConfig:
    return CategoryConfig(
        category=category,
        market=category.default_market,
        currency=currency,
        capital=Decimal(str(capital)),
        holdings=tuple(holdings),
        value_fallback=value_fallback,
    )


def make_quote(symbol: str, last_price: Union[str, int]) -> Quote:
    return Quote(symbol=symbol, last_price=Decimal(str(last_price)))


def enriched(holding: HoldingConfig, price: Optional[Union[str, int]] = None) -> EnrichedHolding:
    quote = make_quote(holding.code, price) if price is not None else None
    return EnrichedHolding(holding=holding, quote=quote)


@pytest.fixture
def sample_portfolio_config() -> PortfolioConfig:
    """
    Three categories with round numbers:

    a-share: capital 10000; 000001 50% @10, 000858 50% @100
    hk:      capital 20000; 700 100% @400
    us:      capital 1000;  AAPL 60% @150, MSFT 40% @400
    """
    return PortfolioConfig(
        categories=(
            make_category(
                Category.A_SHARE,
                [
                    make_holding("000001", 50, 10, name="Ping An Bank"),
                    make_holding("000858", 50, 100, name="Wuliangye"),
                ],
                capital=10000,
            ),
            make_category(
                Category.HK,
                [make_holding("700", 100, 400, name="Tencent", currency="HKD")],
                capital=20000,
                currency="HKD",
            ),
            make_category(
                Category.US,
                [
                    make_holding("AAPL", 60, 150, name="Apple", currency="USD"),
                    make_holding("MSFT", 40, 400, name="Microsoft", currency="USD"),
                ],
                capital=1000,
                currency="USD",
            ),
        )
    )


SAMPLE_PRICES: dict[tuple[str, str], Answer] = {
    ("SZ", "000001"): 11,
    ("SZ", "000858"): 110,
    ("HK", "700"): 300,
    ("US", "AAPL"): 180,
    ("US", "MSFT"): 420,
}


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def provider() -> FakeProvider:
    """Provide a fake provider answering the sample prices."""
    return FakeProvider(quotes=SAMPLE_PRICES)


@pytest.fixture
def quote_cache() -> QuoteCache:
    return QuoteCache(ttl=timedelta(seconds=30))


@pytest.fixture
def quote_fetcher(provider, quote_cache, clock) -> QuoteFetcher:
    """Provide QuoteFetcher over the fake provider and clock."""
    return QuoteFetcher(provider=provider, cache=quote_cache, clock=clock)


@pytest.fixture
def portfolio_fetcher(quote_fetcher) -> PortfolioFetcher:
    return PortfolioFetcher(quote_fetcher)
