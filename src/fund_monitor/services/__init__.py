"""Service layer - quote acquisition and aggregation."""

from fund_monitor.services.quote_cache import QuoteCache, is_fresh
from fund_monitor.services.quote_fetcher import QuoteFetcher
from fund_monitor.services.portfolio_fetcher import PortfolioFetcher
from fund_monitor.services.summary_calculator import (
    summarize_category,
    summarize_portfolio,
    total_assets,
)
from fund_monitor.services.refresh_service import RefreshService
from fund_monitor.services.nav_service import NavService

__all__ = [
    "QuoteCache",
    "is_fresh",
    "QuoteFetcher",
    "PortfolioFetcher",
    "summarize_category",
    "summarize_portfolio",
    "total_assets",
    "RefreshService",
    "NavService",
]
