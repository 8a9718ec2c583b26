"""Single-quote and historical series fetching with envelope normalization."""

import asyncio
import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Optional, Union

from fund_monitor.core.timezone import from_epoch_millis, now_market
from fund_monitor.domain.models import (
    FetchErrorKind,
    FetchResult,
    Market,
    PricePoint,
    Quote,
    QuoteKey,
)
from fund_monitor.providers.market_data_provider import MarketDataProvider, QueryParams
from fund_monitor.services.quote_cache import QuoteCache

logger = logging.getLogger(__name__)

QUOTE_PATH = "/stock/quote"
KLINE_PATH = "/stock/kline"
DAILY_KLINE_TYPE = 10
SUCCESS_CODE = 0
DEFAULT_HISTORY_DAYS = 30

# Anything that goes wrong while projecting a payload into a model
_PAYLOAD_ERRORS = (KeyError, TypeError, ValueError, ArithmeticError)


def _to_decimal(value: Any) -> Decimal:
    if value is None or isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")
    result = Decimal(str(value))
    if not result.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    return result


def _optional_decimal(value: Any) -> Optional[Decimal]:
    return None if value is None else _to_decimal(value)


def parse_quote(data: Any) -> Quote:
    """Project a quote payload {s, ld, o, h, l, v, t} into a Quote."""
    symbol = data["s"]
    if not isinstance(symbol, (str, int)) or str(symbol) == "":
        raise ValueError("Quote payload has no symbol")
    timestamp = data.get("t")
    return Quote(
        symbol=str(symbol),
        last_price=_to_decimal(data["ld"]),
        open=_optional_decimal(data.get("o")),
        high=_optional_decimal(data.get("h")),
        low=_optional_decimal(data.get("l")),
        volume=_optional_decimal(data.get("v")),
        timestamp=from_epoch_millis(timestamp) if timestamp is not None else None,
    )


def parse_candles(data: Any) -> list[PricePoint]:
    """Project a kline payload (list of {t, o, h, l, c, v}) into PricePoints, oldest first."""
    if not isinstance(data, list):
        raise TypeError("Kline payload is not a list")
    points = [
        PricePoint(
            timestamp=from_epoch_millis(candle["t"]),
            close=_to_decimal(candle["c"]),
            open=_optional_decimal(candle.get("o")),
            high=_optional_decimal(candle.get("h")),
            low=_optional_decimal(candle.get("l")),
            volume=_optional_decimal(candle.get("v")),
        )
        for candle in data
    ]
    points.sort(key=lambda p: p.timestamp)
    return points


def unwrap_envelope(result: FetchResult[Any]) -> FetchResult[Any]:
    """
    Interpret the provider envelope {code, msg, data}.

    code == 0 with a data payload is success; any other code is a logical
    failure carrying msg; anything not shaped like an envelope is malformed.
    """
    if not result.ok:
        return result
    body = result.value
    if not isinstance(body, dict) or "code" not in body:
        return FetchResult.failure(FetchErrorKind.MALFORMED, "Response is not a provider envelope")
    if body["code"] != SUCCESS_CODE:
        message = body.get("msg") or "no message"
        return FetchResult.failure(FetchErrorKind.LOGICAL, f"Provider code {body['code']}: {message}")
    if body.get("data") is None:
        return FetchResult.failure(FetchErrorKind.MALFORMED, "Success envelope without data")
    return FetchResult.success(body["data"])


class QuoteFetcher:
    """
    Fetches normalized quotes through a QuoteCache.

    A fresh cache entry short-circuits the network call; that is the only
    rate limiting applied to the provider. Failures of any kind are logged
    and surface as None (quotes) or [] (series), never as exceptions.

    With coalesce_inflight, simultaneous misses for the same key share one
    request. It is off by default, so two concurrent misses both hit the
    provider.
    """

    def __init__(
        self,
        provider: MarketDataProvider,
        cache: QuoteCache,
        clock: Callable[[], datetime] = now_market,
        coalesce_inflight: bool = False,
    ):
        self._provider = provider
        self._cache = cache
        self._clock = clock
        self._coalesce = coalesce_inflight
        self._inflight: dict[QuoteKey, "asyncio.Future[FetchResult[Quote]]"] = {}

    @property
    def cache(self) -> QuoteCache:
        return self._cache

    async def get_quote(self, market: Union[Market, str], code: str) -> Optional[Quote]:
        """Return a quote for code, or None when it could not be fetched."""
        result = await self.fetch_quote(market, code)
        if not result.ok:
            logger.warning(f"Quote unavailable for {Market(market).value} {code}: {result.error}")
            return None
        return result.value

    async def fetch_quote(self, market: Union[Market, str], code: str) -> FetchResult[Quote]:
        """Like get_quote but reports why a quote is missing."""
        key = QuoteKey(market=Market(market), code=code)
        cached = self._cache.get_fresh(key, self._clock())
        if cached is not None:
            return FetchResult.success(cached)

        if not self._coalesce:
            return await self._request_quote(key)

        pending = self._inflight.get(key)
        if pending is None:
            pending = asyncio.ensure_future(self._request_quote(key))
            self._inflight[key] = pending
            pending.add_done_callback(lambda done: self._forget(key, done))
        # One caller being cancelled must not cancel the shared request
        return await asyncio.shield(pending)

    async def get_historical_series(
        self,
        market: Union[Market, str],
        code: str,
        days: int = DEFAULT_HISTORY_DAYS,
    ) -> list[PricePoint]:
        """Return the last `days` daily candles, oldest first; [] on any failure. Not cached."""
        result = await self.fetch_historical_series(market, code, days)
        if not result.ok:
            logger.warning(f"Historical data unavailable for {Market(market).value} {code}: {result.error}")
            return []
        return result.value

    async def fetch_historical_series(
        self,
        market: Union[Market, str],
        code: str,
        days: int = DEFAULT_HISTORY_DAYS,
    ) -> FetchResult[list[PricePoint]]:
        """Like get_historical_series but reports why the series is missing."""
        market = Market(market)
        if days < 1:
            return FetchResult.failure(FetchErrorKind.LOGICAL, f"days must be positive, got {days}")

        response = await self._call_provider(
            KLINE_PATH,
            {"region": market.value, "code": code, "kType": DAILY_KLINE_TYPE, "limit": days},
        )
        payload = unwrap_envelope(response)
        if not payload.ok:
            return payload
        try:
            return FetchResult.success(parse_candles(payload.value))
        except _PAYLOAD_ERRORS as e:
            return FetchResult.failure(FetchErrorKind.MALFORMED, f"Malformed kline payload: {e!r}")

    async def _request_quote(self, key: QuoteKey) -> FetchResult[Quote]:
        response = await self._call_provider(
            QUOTE_PATH,
            {"region": key.market.value, "code": key.code},
        )
        payload = unwrap_envelope(response)
        if not payload.ok:
            return payload
        try:
            quote = parse_quote(payload.value)
        except _PAYLOAD_ERRORS as e:
            return FetchResult.failure(FetchErrorKind.MALFORMED, f"Malformed quote payload: {e!r}")

        self._cache.put(key, quote, self._clock())
        return FetchResult.success(quote)

    async def _call_provider(self, path: str, params: QueryParams) -> FetchResult[Any]:
        """Call the provider; an exception it raises becomes a TRANSPORT failure."""
        try:
            return await self._provider.fetch_json(path, params)
        except Exception as e:
            logger.exception(f"Provider raised for GET {path} {params}: {e!r}")
            return FetchResult.failure(FetchErrorKind.TRANSPORT, f"Provider error: {e!r}")

    def _forget(self, key: QuoteKey, done: "asyncio.Future[FetchResult[Quote]]") -> None:
        # Mark the outcome as retrieved even when every waiter was cancelled
        if not done.cancelled() and done.exception() is not None:
            logger.error(f"Shared quote request for {key.market.value} {key.code} failed: {done.exception()!r}")
        if self._inflight.get(key) is done:
            del self._inflight[key]
