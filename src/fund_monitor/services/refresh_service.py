"""Refresh cycles: fetch every holding, summarize, keep the latest snapshot."""

import asyncio
import logging
from datetime import datetime
from typing import Callable, Optional

from fund_monitor.core.timezone import now_market
from fund_monitor.domain.models import PortfolioConfig
from fund_monitor.domain.views import PortfolioSnapshot
from fund_monitor.services.portfolio_fetcher import PortfolioFetcher
from fund_monitor.services.summary_calculator import summarize_portfolio

logger = logging.getLogger(__name__)


class RefreshService:
    """
    Runs refresh cycles and holds the most recent snapshot.

    By default a cycle requested while another is in flight is skipped.
    With allow_overlap, cycles run concurrently; a cycle that finishes after
    a newer one does not replace the newer snapshot.
    """

    def __init__(
        self,
        portfolio_fetcher: PortfolioFetcher,
        config: PortfolioConfig,
        allow_overlap: bool = False,
        clock: Callable[[], datetime] = now_market,
    ):
        self._fetcher = portfolio_fetcher
        self._config = config
        self._allow_overlap = allow_overlap
        self._clock = clock
        self._latest: Optional[PortfolioSnapshot] = None
        self._latest_cycle = 0
        self._next_cycle = 0
        self._in_flight = 0

    @property
    def latest(self) -> Optional[PortfolioSnapshot]:
        """Snapshot of the most recent completed cycle, or None."""
        return self._latest

    @property
    def is_refreshing(self) -> bool:
        return self._in_flight > 0

    async def refresh(self) -> Optional[PortfolioSnapshot]:
        """
        Run one cycle and return its snapshot.

        Returns None without fetching when a cycle is already running and
        overlap is not allowed.
        """
        if self._in_flight and not self._allow_overlap:
            logger.info("Refresh already in progress; skipping this cycle")
            return None

        self._next_cycle += 1
        cycle = self._next_cycle
        self._in_flight += 1
        logger.info(f"Refresh cycle {cycle} started for {self._config.holding_count} holdings")
        try:
            enriched = await self._fetcher.fetch_all(self._config)
        finally:
            self._in_flight -= 1

        snapshot = summarize_portfolio(enriched, self._config, as_of=self._clock())
        if cycle > self._latest_cycle:
            self._latest = snapshot
            self._latest_cycle = cycle

        if snapshot.missing_prices:
            logger.warning(f"Refresh cycle {cycle} finished; {snapshot.missing_prices} holdings without a price")
        else:
            logger.info(f"Refresh cycle {cycle} finished; total assets {snapshot.total_assets}")
        return snapshot

    async def run_periodic(self, interval_seconds: float, stop_event: asyncio.Event) -> None:
        """
        Start a cycle immediately and then every interval_seconds until stop_event is set.

        Cycles are started on schedule without waiting for the previous one,
        so the overlap policy of refresh() decides what a slow cycle means.
        Cycles still running when the loop stops are cancelled.
        """
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")

        running: set[asyncio.Task] = set()
        try:
            while not stop_event.is_set():
                task = asyncio.ensure_future(self._safe_refresh())
                running.add(task)
                task.add_done_callback(running.discard)
                try:
                    await asyncio.wait_for(stop_event.wait(), timeout=interval_seconds)
                except asyncio.TimeoutError:
                    pass
        finally:
            for task in running:
                task.cancel()
            if running:
                await asyncio.gather(*running, return_exceptions=True)

    async def _safe_refresh(self) -> None:
        try:
            await self.refresh()
        except Exception:
            logger.exception("Refresh cycle failed")
