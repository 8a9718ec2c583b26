"""View models package."""

from fund_monitor.domain.views.summary import (
    EnrichedHolding,
    HoldingRow,
    CategorySummary,
    PortfolioSnapshot,
    NavPoint,
)

__all__ = [
    "EnrichedHolding",
    "HoldingRow",
    "CategorySummary",
    "PortfolioSnapshot",
    "NavPoint",
]
