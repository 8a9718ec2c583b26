"""Pydantic schemas for quote API."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from fund_monitor.domain.models import PricePoint, Quote


def _float(value: Optional[Decimal]) -> Optional[float]:
    return float(value) if value is not None else None


class QuoteResponse(BaseModel):
    """Normalized quote."""

    market: str
    symbol: str
    last_price: float
    open: Optional[float] = None
    high: Optional[float] = None
    low: Optional[float] = None
    volume: Optional[float] = None
    timestamp: Optional[datetime] = None

    @classmethod
    def from_view(cls, market: str, quote: Quote) -> "QuoteResponse":
        return cls(
            market=market,
            symbol=quote.symbol,
            last_price=float(quote.last_price),
            open=_float(quote.open),
            high=_float(quote.high),
            low=_float(quote.low),
            volume=_float(quote.volume),
            timestamp=quote.timestamp,
        )


class PricePointResponse(BaseModel):
    """One daily candle."""

    timestamp: datetime
    close: float
    open: Optional[float] = None
    high: Optional[float] = None
    low: Optional[float] = None
    volume: Optional[float] = None

    @classmethod
    def from_view(cls, point: PricePoint) -> "PricePointResponse":
        return cls(
            timestamp=point.timestamp,
            close=float(point.close),
            open=_float(point.open),
            high=_float(point.high),
            low=_float(point.low),
            volume=_float(point.volume),
        )
