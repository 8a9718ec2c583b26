"""
Per-holding, per-category and portfolio-wide figures.

Value basis: a holding's cost basis is its allocation share of the
category's capital; the units bought are cost basis / purchase price, and
current value is units x current price. When the current price or purchase
price is unavailable, the category's value_fallback decides the value
(cost basis or zero), so every row still has a number.

Everything here is pure.
"""

from collections.abc import Iterable, Mapping
from datetime import datetime
from decimal import Decimal
from typing import Optional

from fund_monitor.core.exceptions import ValidationError
from fund_monitor.domain.models import (
    Category,
    CategoryConfig,
    HoldingConfig,
    PortfolioConfig,
    ValueFallback,
)
from fund_monitor.domain.views import (
    CategorySummary,
    EnrichedHolding,
    HoldingRow,
    PortfolioSnapshot,
)

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def cost_basis(holding: HoldingConfig, category_config: CategoryConfig) -> Decimal:
    """Amount invested in the holding: capital x allocation / 100."""
    return category_config.capital * holding.allocation / HUNDRED


def holding_value(
    holding: HoldingConfig,
    cost: Decimal,
    price: Optional[Decimal],
    fallback: ValueFallback,
) -> Decimal:
    """Current value of a holding at price, or its fallback value."""
    if price is not None and holding.purchase_price:
        return cost / holding.purchase_price * price
    if fallback == ValueFallback.ZERO:
        return ZERO
    return cost


def profit_rate(
    current_price: Optional[Decimal],
    purchase_price: Optional[Decimal],
) -> Optional[Decimal]:
    """Percentage change from purchase to current price; None when not computable."""
    if current_price is None or purchase_price is None or purchase_price == 0:
        return None
    return (current_price - purchase_price) / purchase_price * HUNDRED


def rate_of(profit: Decimal, cost: Decimal) -> Decimal:
    """profit / cost x 100, defined as 0 for zero cost."""
    if cost == 0:
        return ZERO
    return profit / cost * HUNDRED


def holding_row(enriched: EnrichedHolding, category_config: CategoryConfig) -> HoldingRow:
    """Compute the figures of one holding."""
    holding = enriched.holding
    cost = cost_basis(holding, category_config)
    price = enriched.current_price
    return HoldingRow(
        code=holding.code,
        name=holding.name,
        allocation=holding.allocation,
        currency=holding.currency,
        cost_basis=cost,
        current_value=holding_value(holding, cost, price, category_config.value_fallback),
        purchase_price=holding.purchase_price,
        current_price=price,
        profit_rate=profit_rate(price, holding.purchase_price),
    )


def summarize_category(
    holdings: Iterable[EnrichedHolding],
    category_config: CategoryConfig,
) -> CategorySummary:
    """Rows and totals for one category; rows keep the input order."""
    rows = [holding_row(h, category_config) for h in holdings]
    total_value = sum((r.current_value for r in rows), ZERO)
    total_cost = sum((r.cost_basis for r in rows), ZERO)
    total_profit = total_value - total_cost

    return CategorySummary(
        category=category_config.category,
        currency=category_config.currency,
        total_current_value=total_value,
        total_cost=total_cost,
        total_profit=total_profit,
        total_profit_rate=rate_of(total_profit, total_cost),
        rows=rows,
    )


def total_assets(summaries: Iterable[CategorySummary]) -> Decimal:
    """Sum of every category's total current value."""
    return sum((s.total_current_value for s in summaries), ZERO)


def summarize_portfolio(
    enriched: Mapping[Category, list[EnrichedHolding]],
    config: PortfolioConfig,
    as_of: datetime,
) -> PortfolioSnapshot:
    """
    Summaries for all categories plus portfolio-wide totals.

    Category figures are summed as-is, without currency conversion.
    """
    categories: dict[Category, CategorySummary] = {}
    for category_config in config:
        holdings = enriched.get(category_config.category)
        if holdings is None:
            raise ValidationError(f"No fetched holdings for category {category_config.category.value}")
        if len(holdings) != len(category_config.holdings):
            raise ValidationError(
                f"Category {category_config.category.value} has {len(holdings)} fetched holdings, "
                f"expected {len(category_config.holdings)}"
            )
        categories[category_config.category] = summarize_category(holdings, category_config)

    assets = total_assets(categories.values())
    cost = sum((s.total_cost for s in categories.values()), ZERO)
    profit = assets - cost

    return PortfolioSnapshot(
        categories=categories,
        total_assets=assets,
        total_cost=cost,
        total_profit=profit,
        total_profit_rate=rate_of(profit, cost),
        as_of=as_of,
    )
