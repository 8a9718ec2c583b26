"""Quote API: single quotes and historical candles."""

from fastapi import APIRouter, Depends, Query

from fund_monitor.api.deps import get_quote_fetcher, parse_market
from fund_monitor.api.schemas.quote import PricePointResponse, QuoteResponse
from fund_monitor.core.exceptions import NotFoundError
from fund_monitor.services import QuoteFetcher

router = APIRouter(prefix="/quotes", tags=["quotes"])


@router.get("/{market}/{code}", response_model=QuoteResponse)
async def get_quote(
    market: str,
    code: str,
    quotes: QuoteFetcher = Depends(get_quote_fetcher),
):
    """Return the (possibly cached) quote for code; 404 when it cannot be fetched."""
    region = parse_market(market)
    quote = await quotes.get_quote(region, code)
    if quote is None:
        raise NotFoundError("Quote", f"{region.value} {code}")
    return QuoteResponse.from_view(region.value, quote)


@router.get("/{market}/{code}/history", response_model=list[PricePointResponse])
async def get_history(
    market: str,
    code: str,
    days: int = Query(30, ge=1, le=365, description="Number of daily candles."),
    quotes: QuoteFetcher = Depends(get_quote_fetcher),
):
    """Return daily candles, oldest first; empty when the provider has none."""
    points = await quotes.get_historical_series(parse_market(market), code, days=days)
    return [PricePointResponse.from_view(p) for p in points]
