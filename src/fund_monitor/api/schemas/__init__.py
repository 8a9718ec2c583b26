"""API schemas package."""

from fund_monitor.api.schemas.portfolio import (
    HoldingRowResponse,
    CategorySummaryResponse,
    PortfolioSnapshotResponse,
    NavPointResponse,
)
from fund_monitor.api.schemas.quote import QuoteResponse, PricePointResponse

__all__ = [
    "HoldingRowResponse",
    "CategorySummaryResponse",
    "PortfolioSnapshotResponse",
    "NavPointResponse",
    "QuoteResponse",
    "PricePointResponse",
]
