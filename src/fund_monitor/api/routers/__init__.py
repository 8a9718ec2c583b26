"""API routers."""

from fund_monitor.api.routers.portfolio import router as portfolio_router
from fund_monitor.api.routers.quotes import router as quotes_router

__all__ = [
    "portfolio_router",
    "quotes_router",
]
