"""Domain models package."""

from fund_monitor.domain.models.enums import Market, Category, ValueFallback, FetchErrorKind
from fund_monitor.domain.models.quote import QuoteKey, Quote, PricePoint, CacheEntry
from fund_monitor.domain.models.holding import HoldingConfig, CategoryConfig, PortfolioConfig
from fund_monitor.domain.models.result import FetchError, FetchResult

__all__ = [
    "Market",
    "Category",
    "ValueFallback",
    "FetchErrorKind",
    "QuoteKey",
    "Quote",
    "PricePoint",
    "CacheEntry",
    "HoldingConfig",
    "CategoryConfig",
    "PortfolioConfig",
    "FetchError",
    "FetchResult",
]
