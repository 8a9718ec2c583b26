"""Pydantic schemas for portfolio summary API."""

import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from fund_monitor.domain.views import CategorySummary, HoldingRow, NavPoint, PortfolioSnapshot


def _float(value: Optional[Decimal]) -> Optional[float]:
    return float(value) if value is not None else None


class HoldingRowResponse(BaseModel):
    """A single holding row; price fields are null when the quote is missing."""

    code: str
    name: str
    allocation: float
    currency: str
    cost_basis: float
    current_value: float
    purchase_price: Optional[float] = None
    current_price: Optional[float] = None
    profit_rate: Optional[float] = None
    price_available: bool

    @classmethod
    def from_view(cls, row: HoldingRow) -> "HoldingRowResponse":
        return cls(
            code=row.code,
            name=row.name,
            allocation=float(row.allocation),
            currency=row.currency,
            cost_basis=float(row.cost_basis),
            current_value=float(row.current_value),
            purchase_price=_float(row.purchase_price),
            current_price=_float(row.current_price),
            profit_rate=_float(row.profit_rate),
            price_available=row.price_available,
        )


class CategorySummaryResponse(BaseModel):
    """Totals and rows for one category."""

    category: str
    currency: str
    total_current_value: float
    total_cost: float
    total_profit: float
    total_profit_rate: float
    missing_prices: int
    holdings: list[HoldingRowResponse]

    @classmethod
    def from_view(cls, summary: CategorySummary) -> "CategorySummaryResponse":
        return cls(
            category=summary.category.value,
            currency=summary.currency,
            total_current_value=float(summary.total_current_value),
            total_cost=float(summary.total_cost),
            total_profit=float(summary.total_profit),
            total_profit_rate=float(summary.total_profit_rate),
            missing_prices=summary.missing_prices,
            holdings=[HoldingRowResponse.from_view(r) for r in summary.rows],
        )


class PortfolioSnapshotResponse(BaseModel):
    """Response for GET /portfolio."""

    as_of: dt.datetime
    total_assets: float
    total_cost: float
    total_profit: float
    total_profit_rate: float
    missing_prices: int
    categories: dict[str, CategorySummaryResponse]

    @classmethod
    def from_view(cls, snapshot: PortfolioSnapshot) -> "PortfolioSnapshotResponse":
        return cls(
            as_of=snapshot.as_of,
            total_assets=float(snapshot.total_assets),
            total_cost=float(snapshot.total_cost),
            total_profit=float(snapshot.total_profit),
            total_profit_rate=float(snapshot.total_profit_rate),
            missing_prices=snapshot.missing_prices,
            categories={
                category.value: CategorySummaryResponse.from_view(summary)
                for category, summary in snapshot.categories.items()
            },
        )


class NavPointResponse(BaseModel):
    """One point of a category's net-value curve."""

    date: dt.date
    value: float
    nav: Optional[float] = None

    @classmethod
    def from_view(cls, point: NavPoint) -> "NavPointResponse":
        return cls(date=point.date, value=float(point.value), nav=_float(point.nav))
