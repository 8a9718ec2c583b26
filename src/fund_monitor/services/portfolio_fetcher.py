"""Concurrent quote fetching for every configured holding."""

import asyncio
import logging
from typing import Optional

from fund_monitor.domain.models import Category, CategoryConfig, PortfolioConfig, Quote
from fund_monitor.domain.views import EnrichedHolding
from fund_monitor.services.quote_fetcher import QuoteFetcher

logger = logging.getLogger(__name__)


class PortfolioFetcher:
    """
    Pairs every configured holding with its current quote.

    All holdings of all categories are fetched concurrently. A holding whose
    fetch fails keeps its place with quote=None; no retries are made here.
    """

    def __init__(self, quote_fetcher: QuoteFetcher):
        self._quotes = quote_fetcher

    async def fetch_all(self, config: PortfolioConfig) -> dict[Category, list[EnrichedHolding]]:
        """
        Fetch every category independently.

        Returns category -> enriched holdings in configuration order.
        """
        category_configs = list(config)
        results = await asyncio.gather(*(self.fetch_category(c) for c in category_configs))
        return {c.category: holdings for c, holdings in zip(category_configs, results)}

    async def fetch_category(self, category_config: CategoryConfig) -> list[EnrichedHolding]:
        """Fetch one category's holdings concurrently, preserving their order."""
        holdings = category_config.holdings
        outcomes = await asyncio.gather(
            *(self._quotes.get_quote(category_config.market, h.code) for h in holdings),
            return_exceptions=True,
        )
        return [
            EnrichedHolding(holding=holding, quote=self._as_quote(category_config, holding.code, outcome))
            for holding, outcome in zip(holdings, outcomes)
        ]

    @staticmethod
    def _as_quote(category_config: CategoryConfig, code: str, outcome: object) -> Optional[Quote]:
        if isinstance(outcome, BaseException):
            # get_quote reports provider failures as None; this is a bug, not an outage
            logger.error(
                f"Unexpected error fetching {category_config.category.value} {code}: {outcome!r}",
                exc_info=outcome,
            )
            return None
        return outcome
