"""Market data providers module."""

from fund_monitor.providers.market_data_provider import MarketDataProvider
from fund_monitor.providers.itick_provider import ITickProvider
from fund_monitor.providers.stub_provider import StubMarketDataProvider

__all__ = [
    "MarketDataProvider",
    "ITickProvider",
    "StubMarketDataProvider",
]
