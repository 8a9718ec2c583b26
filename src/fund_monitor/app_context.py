"""Application context: owns the provider, the quote cache and every service.

The cache lives here rather than in a module global, so each context (and
each test) gets its own.
"""

from datetime import timedelta
from typing import Optional

from fund_monitor.config.settings import Settings, get_settings
from fund_monitor.config.portfolio_config import load_portfolio_config
from fund_monitor.core.exceptions import ConfigurationError
from fund_monitor.domain.models import PortfolioConfig
from fund_monitor.providers import ITickProvider, MarketDataProvider, StubMarketDataProvider
from fund_monitor.services import (
    NavService,
    PortfolioFetcher,
    QuoteCache,
    QuoteFetcher,
    RefreshService,
)


def build_provider(settings: Settings) -> MarketDataProvider:
    """Create the provider named by settings.provider."""
    name = settings.provider.lower()
    if name == "itick":
        return ITickProvider(
            base_url=settings.provider_base_url,
            token=settings.provider_token,
            timeout=settings.provider_timeout_seconds,
        )
    if name == "stub":
        return StubMarketDataProvider()
    raise ConfigurationError(f"Unknown quote provider: {settings.provider}")


class AppContext:
    """
    Composition root for the fund monitor.

    Services are created lazily and shared for the lifetime of the context.
    Call aclose() to release the provider's network resources.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        portfolio_config: Optional[PortfolioConfig] = None,
        provider: Optional[MarketDataProvider] = None,
    ):
        self._settings = settings
        self._portfolio_config = portfolio_config
        self._provider = provider

        self._quote_cache: Optional[QuoteCache] = None
        self._quote_fetcher: Optional[QuoteFetcher] = None
        self._portfolio_fetcher: Optional[PortfolioFetcher] = None
        self._refresh_service: Optional[RefreshService] = None
        self._nav_service: Optional[NavService] = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def has_portfolio_config(self) -> bool:
        return self._portfolio_config is not None or self.settings.portfolio_config_path is not None

    @property
    def portfolio_config(self) -> PortfolioConfig:
        """The static holdings, loaded from settings.portfolio_config_path if not given."""
        if self._portfolio_config is None:
            path = self.settings.portfolio_config_path
            if path is None:
                raise ConfigurationError("No portfolio configuration: set FUND_MONITOR_PORTFOLIO_CONFIG_PATH")
            self._portfolio_config = load_portfolio_config(path)
        return self._portfolio_config

    @property
    def provider(self) -> MarketDataProvider:
        if self._provider is None:
            self._provider = build_provider(self.settings)
        return self._provider

    @property
    def quote_cache(self) -> QuoteCache:
        if self._quote_cache is None:
            self._quote_cache = QuoteCache(ttl=timedelta(seconds=self.settings.quote_cache_ttl_seconds))
        return self._quote_cache

    @property
    def quotes(self) -> QuoteFetcher:
        """Get the QuoteFetcher instance."""
        if self._quote_fetcher is None:
            self._quote_fetcher = QuoteFetcher(
                provider=self.provider,
                cache=self.quote_cache,
                coalesce_inflight=self.settings.coalesce_inflight_quotes,
            )
        return self._quote_fetcher

    @property
    def portfolio_fetcher(self) -> PortfolioFetcher:
        if self._portfolio_fetcher is None:
            self._portfolio_fetcher = PortfolioFetcher(self.quotes)
        return self._portfolio_fetcher

    @property
    def refresh_service(self) -> RefreshService:
        """Get the RefreshService instance."""
        if self._refresh_service is None:
            self._refresh_service = RefreshService(
                portfolio_fetcher=self.portfolio_fetcher,
                config=self.portfolio_config,
                allow_overlap=self.settings.allow_overlapping_refresh,
            )
        return self._refresh_service

    @property
    def nav(self) -> NavService:
        """Get the NavService instance."""
        if self._nav_service is None:
            self._nav_service = NavService(self.quotes)
        return self._nav_service

    async def aclose(self) -> None:
        """Clean up resources."""
        if self._provider is not None:
            await self._provider.aclose()
