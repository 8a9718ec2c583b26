"""
Unit tests for quote providers.

Tests cover:
- ITickProvider request shape (path, params, headers)
- Transport failures reported as values: HTTP errors, timeouts, connection errors, bad JSON
- End-to-end QuoteFetcher over ITickProvider
- StubMarketDataProvider envelopes
- Provider selection from settings
"""

import asyncio
from decimal import Decimal

import httpx
import pytest

from fund_monitor.app_context import build_provider
from fund_monitor.config.settings import Settings
from fund_monitor.core.exceptions import ConfigurationError
from fund_monitor.domain.models import FetchErrorKind, Market
from fund_monitor.providers import ITickProvider, StubMarketDataProvider
from fund_monitor.services import QuoteCache, QuoteFetcher

from tests.conftest import quote_envelope


BASE_URL = "https://api.itick.test"


def _provider(handler, token: str = "secret") -> ITickProvider:
    return ITickProvider(base_url=BASE_URL, token=token, transport=httpx.MockTransport(handler))


def _fetch(provider: ITickProvider, path: str = "/stock/quote", params=None):
    async def scenario():
        async with provider:
            return await provider.fetch_json(path, params or {"region": "US", "code": "AAPL"})

    return asyncio.run(scenario())


# =============================================================================
# ITICK PROVIDER TESTS
# =============================================================================


class TestITickProvider:
    """Tests for the HTTP client."""

    def test_sends_fixed_headers_and_params(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = request.url
            seen["headers"] = request.headers
            return httpx.Response(200, json=quote_envelope("AAPL", 185.5))

        result = _fetch(_provider(handler), params={"region": "US", "code": "AAPL"})

        assert result.ok
        assert result.value["data"]["ld"] == 185.5
        assert seen["url"].path == "/stock/quote"
        assert seen["url"].params["region"] == "US"
        assert seen["url"].params["code"] == "AAPL"
        assert seen["headers"]["token"] == "secret"
        assert seen["headers"]["accept"] == "application/json"

    def test_no_token_header_without_token(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["headers"] = request.headers
            return httpx.Response(200, json={"code": 0, "data": {}})

        _fetch(_provider(handler, token=None))

        assert "token" not in seen["headers"]

    def test_http_error_status_is_transport_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="upstream down")

        result = _fetch(_provider(handler))

        assert not result.ok
        assert result.error.kind == FetchErrorKind.TRANSPORT
        assert result.error.status_code == 500

    def test_timeout_is_transport_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("too slow", request=request)

        result = _fetch(_provider(handler))

        assert result.error.kind == FetchErrorKind.TRANSPORT
        assert "timed out" in result.error.message

    def test_connection_error_is_transport_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        result = _fetch(_provider(handler))

        assert result.error.kind == FetchErrorKind.TRANSPORT

    def test_non_json_body_is_transport_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>maintenance</html>")

        result = _fetch(_provider(handler))

        assert result.error.kind == FetchErrorKind.TRANSPORT

    def test_logical_error_envelope_is_returned_as_body(self):
        """Envelope interpretation belongs to the fetcher, not the transport."""
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"code": 1, "msg": "bad token"})

        result = _fetch(_provider(handler))

        assert result.ok
        assert result.value == {"code": 1, "msg": "bad token"}

    def test_aclose_allows_reuse(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"code": 0, "data": {}})

        provider = _provider(handler)

        async def scenario():
            first = await provider.fetch_json("/stock/quote", {"region": "US", "code": "AAPL"})
            await provider.aclose()
            second = await provider.fetch_json("/stock/quote", {"region": "US", "code": "AAPL"})
            await provider.aclose()
            return first, second

        first, second = asyncio.run(scenario())

        assert first.ok and second.ok


class TestQuoteFetcherOverHttp:
    """End-to-end fetches through the HTTP client."""

    def test_server_error_yields_no_quote_and_no_cache(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503)

        cache = QuoteCache()
        fetcher = QuoteFetcher(provider=_provider(handler), cache=cache)

        assert asyncio.run(fetcher.get_quote(Market.US, "AAPL")) is None
        assert len(cache) == 0

    def test_quote_and_history(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/stock/quote":
                return httpx.Response(200, json=quote_envelope(request.url.params["code"], 378.2))
            assert request.url.params["kType"] == "10"
            assert request.url.params["limit"] == "2"
            return httpx.Response(200, json={"code": 0, "data": [
                {"t": 1717999200000, "o": 370, "h": 380, "l": 369, "c": 375.4, "v": 10},
                {"t": 1718085600000, "o": 375, "h": 379, "l": 371, "c": 378.2, "v": 12},
            ]})

        fetcher = QuoteFetcher(provider=_provider(handler), cache=QuoteCache())

        async def scenario():
            return (
                await fetcher.get_quote(Market.HONG_KONG, "700"),
                await fetcher.get_historical_series(Market.HONG_KONG, "700", days=2),
            )

        quote, history = asyncio.run(scenario())

        assert quote.symbol == "700"
        assert quote.last_price == Decimal("378.2")
        assert [p.close for p in history] == [Decimal("375.4"), Decimal("378.2")]


# =============================================================================
# STUB PROVIDER TESTS
# =============================================================================


class TestStubProvider:
    """Tests for the offline provider."""

    def test_known_code_has_fixed_price(self):
        fetcher = QuoteFetcher(provider=StubMarketDataProvider(), cache=QuoteCache())

        quote = asyncio.run(fetcher.get_quote(Market.US, "AAPL"))

        assert quote.last_price == Decimal("185.5")

    def test_unknown_code_is_deterministic(self):
        async def scenario():
            first = await StubMarketDataProvider(seed=7).fetch_json("/stock/quote", {"region": "US", "code": "ZZZ"})
            second = await StubMarketDataProvider(seed=7).fetch_json("/stock/quote", {"region": "US", "code": "ZZZ"})
            return first, second

        first, second = asyncio.run(scenario())

        assert first.value["data"]["ld"] == second.value["data"]["ld"]

    def test_history_ends_at_quote_price(self):
        fetcher = QuoteFetcher(provider=StubMarketDataProvider(), cache=QuoteCache())

        history = asyncio.run(fetcher.get_historical_series(Market.HONG_KONG, "700", days=5))

        assert len(history) == 5
        assert history[-1].close == Decimal("378.2")
        assert history == sorted(history, key=lambda p: p.timestamp)

    def test_unknown_endpoint_is_logical_error(self):
        result = asyncio.run(StubMarketDataProvider().fetch_json("/stock/depth", {"region": "US", "code": "AAPL"}))

        assert result.ok
        assert result.value["code"] != 0


# =============================================================================
# PROVIDER SELECTION TESTS
# =============================================================================


class TestBuildProvider:
    """Tests for choosing the provider from settings."""

    def test_itick_provider_uses_settings(self):
        settings = Settings(provider="itick", provider_token="abc", provider_timeout_seconds=3)

        provider = build_provider(settings)

        assert isinstance(provider, ITickProvider)
        assert provider.timeout == 3
        assert provider.default_headers["token"] == "abc"

    def test_stub_provider(self):
        assert isinstance(build_provider(Settings(provider="stub")), StubMarketDataProvider)

    def test_unknown_provider_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            build_provider(Settings(provider="bloomberg"))
