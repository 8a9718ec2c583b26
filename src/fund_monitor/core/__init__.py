"""Core utilities and shared functionality."""

from fund_monitor.core.timezone import (
    now_market,
    to_market,
    from_epoch_millis,
    MARKET_TZ,
)
from fund_monitor.core.exceptions import (
    AppError,
    ValidationError,
    NotFoundError,
    ConfigurationError,
    RefreshInProgressError,
)

__all__ = [
    "now_market",
    "to_market",
    "from_epoch_millis",
    "MARKET_TZ",
    "AppError",
    "ValidationError",
    "NotFoundError",
    "ConfigurationError",
    "RefreshInProgressError",
]
