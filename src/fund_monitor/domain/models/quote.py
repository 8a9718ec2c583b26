"""Quote, price series and cache entry models."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

from fund_monitor.domain.models.enums import Market


@dataclass(frozen=True)
class QuoteKey:
    """Identifies one cache slot: a code within a market's namespace."""

    market: Market
    code: str

    def __str__(self) -> str:
        return f"{self.market.value}_{self.code}"


@dataclass(frozen=True)
class Quote:
    """
    Normalized real-time quote.

    Immutable; every successful fetch produces a new instance.
    """

    symbol: str
    last_price: Decimal
    open: Optional[Decimal] = None
    high: Optional[Decimal] = None
    low: Optional[Decimal] = None
    volume: Optional[Decimal] = None
    timestamp: Optional[datetime] = None


@dataclass(frozen=True)
class PricePoint:
    """One daily candle of a historical series."""

    timestamp: datetime
    close: Decimal
    open: Optional[Decimal] = None
    high: Optional[Decimal] = None
    low: Optional[Decimal] = None
    volume: Optional[Decimal] = None


@dataclass(frozen=True)
class CacheEntry:
    """
    Last fetched quote for a key plus the local time it was fetched.

    Replaced wholesale on every successful fetch; never edited.
    """

    quote: Quote
    fetched_at: datetime

    def age(self, now: datetime) -> timedelta:
        """Time elapsed since the quote was fetched."""
        return now - self.fetched_at
