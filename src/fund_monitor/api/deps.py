"""Dependency injection for FastAPI."""

from fastapi import Depends, Request

from fund_monitor.app_context import AppContext
from fund_monitor.core.exceptions import NotFoundError
from fund_monitor.domain.models import Category, CategoryConfig, Market
from fund_monitor.services import NavService, QuoteFetcher, RefreshService


def get_context(request: Request) -> AppContext:
    """Provide the AppContext created by the lifespan handler."""
    return request.app.state.context


def get_quote_fetcher(context: AppContext = Depends(get_context)) -> QuoteFetcher:
    """Provide QuoteFetcher instance."""
    return context.quotes


def get_refresh_service(context: AppContext = Depends(get_context)) -> RefreshService:
    """Provide RefreshService instance."""
    return context.refresh_service


def get_nav_service(context: AppContext = Depends(get_context)) -> NavService:
    """Provide NavService instance."""
    return context.nav


def parse_category(value: str) -> Category:
    try:
        return Category(value.lower())
    except ValueError:
        raise NotFoundError("Category", value) from None


def parse_market(value: str) -> Market:
    try:
        return Market(value.upper())
    except ValueError:
        raise NotFoundError("Market", value) from None


def get_category_config(
    category: str,
    context: AppContext = Depends(get_context),
) -> CategoryConfig:
    """Resolve the {category} path parameter to its configuration."""
    return context.portfolio_config.get(parse_category(category))
