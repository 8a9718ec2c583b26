"""Net-value curves built from historical daily candles."""

import asyncio
from collections.abc import Sequence
from datetime import date
from decimal import Decimal
from typing import Optional

from fund_monitor.core.exceptions import ValidationError
from fund_monitor.domain.models import CategoryConfig, PricePoint
from fund_monitor.domain.views import NavPoint
from fund_monitor.services.quote_fetcher import DEFAULT_HISTORY_DAYS, QuoteFetcher
from fund_monitor.services.summary_calculator import ZERO, cost_basis, holding_value


def build_nav_series(
    category_config: CategoryConfig,
    series: Sequence[Sequence[PricePoint]],
) -> list[NavPoint]:
    """
    Combine per-holding candles into one value/NAV point per calendar day.

    series[i] belongs to category_config.holdings[i]. Days are the union of
    all candle dates; a holding without a close on a day uses its previous
    close, and before its first close (or with no series at all) its
    fallback value.
    """
    holdings = category_config.holdings
    if len(series) != len(holdings):
        raise ValidationError(f"Expected {len(holdings)} series, got {len(series)}")

    costs = [cost_basis(h, category_config) for h in holdings]
    total_cost = sum(costs, ZERO)
    closes: list[dict[date, Decimal]] = [
        {point.timestamp.date(): point.close for point in points} for points in series
    ]
    days = sorted(set().union(*closes)) if closes else []

    last_close: list[Optional[Decimal]] = [None] * len(holdings)
    points: list[NavPoint] = []
    for day in days:
        value = ZERO
        for i, holding in enumerate(holdings):
            close = closes[i].get(day)
            if close is not None:
                last_close[i] = close
            value += holding_value(holding, costs[i], last_close[i], category_config.value_fallback)
        nav = value / total_cost if total_cost != 0 else None
        points.append(NavPoint(date=day, value=value, nav=nav))
    return points


class NavService:
    """Fetches a category's historical series and turns them into a NAV curve."""

    def __init__(self, quote_fetcher: QuoteFetcher):
        self._quotes = quote_fetcher

    async def category_nav(
        self,
        category_config: CategoryConfig,
        days: int = DEFAULT_HISTORY_DAYS,
    ) -> list[NavPoint]:
        """NAV curve over the last `days` daily candles; [] when no series is available."""
        series = await asyncio.gather(
            *(
                self._quotes.get_historical_series(category_config.market, h.code, days)
                for h in category_config.holdings
            )
        )
        return build_nav_series(category_config, series)
