"""Timezone utilities for provider timestamps and local fetch times."""

from datetime import datetime
from typing import Union

import pytz

MARKET_TZ = pytz.timezone("Asia/Shanghai")


def now_market() -> datetime:
    """Return current time in the portfolio's home timezone (Asia/Shanghai)."""
    return datetime.now(MARKET_TZ)


def to_market(dt: datetime) -> datetime:
    """Convert a datetime to the home timezone."""
    if dt.tzinfo is None:
        # Assume naive datetime is already local market time
        return MARKET_TZ.localize(dt)
    return dt.astimezone(MARKET_TZ)


def from_epoch_millis(value: Union[int, float, str]) -> datetime:
    """
    Convert a provider epoch-milliseconds timestamp to a home-timezone datetime.

    Raises ValueError/TypeError/OverflowError on values that are not a timestamp.
    """
    if isinstance(value, bool):
        raise TypeError("Boolean is not a timestamp")
    millis = int(value)
    return datetime.fromtimestamp(millis / 1000, tz=pytz.utc).astimezone(MARKET_TZ)
