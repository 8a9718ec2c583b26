"""View models for refresh-cycle outputs."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from fund_monitor.domain.models import Category, HoldingConfig, Quote


@dataclass(frozen=True)
class EnrichedHolding:
    """A configured holding paired with this cycle's quote (None when the fetch failed)."""

    holding: HoldingConfig
    quote: Optional[Quote] = None

    @property
    def current_price(self) -> Optional[Decimal]:
        return self.quote.last_price if self.quote is not None else None

    @property
    def code(self) -> str:
        return self.holding.code

    @property
    def name(self) -> str:
        return self.holding.name


@dataclass
class HoldingRow:
    """Computed figures for one holding."""

    code: str
    name: str
    allocation: Decimal
    currency: str
    cost_basis: Decimal
    current_value: Decimal
    purchase_price: Optional[Decimal] = None
    current_price: Optional[Decimal] = None
    profit_rate: Optional[Decimal] = None  # None means "not computable", not 0%

    @property
    def price_available(self) -> bool:
        return self.current_price is not None


@dataclass
class CategorySummary:
    """Totals for one category plus its rows in configuration order."""

    category: Category
    currency: str
    total_current_value: Decimal
    total_cost: Decimal
    total_profit: Decimal
    total_profit_rate: Decimal
    rows: list[HoldingRow] = field(default_factory=list)

    @property
    def missing_prices(self) -> int:
        return sum(1 for row in self.rows if not row.price_available)


@dataclass
class PortfolioSnapshot:
    """Result of one refresh cycle across all categories."""

    categories: dict[Category, CategorySummary]
    total_assets: Decimal
    total_cost: Decimal
    total_profit: Decimal
    total_profit_rate: Decimal
    as_of: datetime

    @property
    def missing_prices(self) -> int:
        return sum(summary.missing_prices for summary in self.categories.values())


@dataclass(frozen=True)
class NavPoint:
    """Category value on one day; nav is value / cost basis."""

    date: date
    value: Decimal
    nav: Optional[Decimal] = None
