"""Enumerations for domain models."""

from enum import Enum


class Market(str, Enum):
    """Exchanges supported by the quote provider, valued by provider region code."""

    A_SHARE = "SZ"
    HONG_KONG = "HK"
    US = "US"


class Category(str, Enum):
    """Portfolio partitions, aggregated independently."""

    A_SHARE = "a-share"
    HK = "hk"
    US = "us"

    @property
    def default_market(self) -> Market:
        """Market whose code namespace the category's holdings use."""
        return _CATEGORY_MARKETS[self]


_CATEGORY_MARKETS = {
    Category.A_SHARE: Market.A_SHARE,
    Category.HK: Market.HONG_KONG,
    Category.US: Market.US,
}


class ValueFallback(str, Enum):
    """What a holding is worth when it has no usable current price."""

    COST = "cost"  # value at cost basis
    ZERO = "zero"


class FetchErrorKind(str, Enum):
    """Why a provider fetch produced no data."""

    TRANSPORT = "TRANSPORT"  # network error, timeout, non-2xx status, undecodable body
    LOGICAL = "LOGICAL"  # envelope code != 0
    MALFORMED = "MALFORMED"  # success envelope with missing/invalid fields
