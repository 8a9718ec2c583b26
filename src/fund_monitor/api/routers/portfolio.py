"""Portfolio API: snapshots, category summaries and NAV curves."""

from fastapi import APIRouter, Depends, Query

from fund_monitor.api.deps import get_category_config, get_nav_service, get_refresh_service, parse_category
from fund_monitor.api.schemas.portfolio import (
    CategorySummaryResponse,
    NavPointResponse,
    PortfolioSnapshotResponse,
)
from fund_monitor.core.exceptions import RefreshInProgressError
from fund_monitor.domain.models import CategoryConfig
from fund_monitor.domain.views import PortfolioSnapshot
from fund_monitor.services import NavService, RefreshService

router = APIRouter(prefix="/portfolio", tags=["portfolio"])


async def _current_snapshot(service: RefreshService, refresh: bool) -> PortfolioSnapshot:
    """Refresh when asked to (or when there is nothing yet), else serve the latest snapshot."""
    snapshot = None
    if refresh or service.latest is None:
        snapshot = await service.refresh()
    snapshot = snapshot or service.latest
    if snapshot is None:
        raise RefreshInProgressError()
    return snapshot


@router.get("", response_model=PortfolioSnapshotResponse)
async def get_portfolio(
    refresh: bool = Query(False, description="Run a refresh cycle before answering."),
    service: RefreshService = Depends(get_refresh_service),
):
    """
    Return the portfolio snapshot: per-category summaries and portfolio totals.

    Serves the latest refresh-cycle result; the first request (or refresh=true)
    runs a cycle. Holdings whose quote could not be fetched have null prices
    and count towards missing_prices.
    """
    snapshot = await _current_snapshot(service, refresh)
    return PortfolioSnapshotResponse.from_view(snapshot)


@router.get("/{category}", response_model=CategorySummaryResponse)
async def get_category(
    category: str,
    refresh: bool = Query(False, description="Run a refresh cycle before answering."),
    service: RefreshService = Depends(get_refresh_service),
):
    """Return one category's summary from the current snapshot."""
    key = parse_category(category)
    snapshot = await _current_snapshot(service, refresh)
    return CategorySummaryResponse.from_view(snapshot.categories[key])


@router.get("/{category}/nav", response_model=list[NavPointResponse])
async def get_category_nav(
    days: int = Query(30, ge=1, le=365, description="Number of daily candles."),
    category_config: CategoryConfig = Depends(get_category_config),
    nav_service: NavService = Depends(get_nav_service),
):
    """Return the category's net-value curve over the last `days` days."""
    points = await nav_service.category_nav(category_config, days=days)
    return [NavPointResponse.from_view(p) for p in points]
