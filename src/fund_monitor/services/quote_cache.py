"""In-memory quote cache with a freshness window."""

from datetime import datetime, timedelta
from typing import Optional

from fund_monitor.domain.models import CacheEntry, Quote, QuoteKey

DEFAULT_TTL = timedelta(seconds=30)


def is_fresh(entry: CacheEntry, now: datetime, ttl: timedelta) -> bool:
    """An entry is fresh while strictly less than ttl has elapsed since its fetch."""
    return now - entry.fetched_at < ttl


class QuoteCache:
    """
    Last fetched quote per (market, code).

    Entries are superseded on every successful fetch and never evicted;
    the key space is bounded by the configured holdings.
    """

    def __init__(self, ttl: timedelta = DEFAULT_TTL):
        self._ttl = ttl
        self._entries: dict[QuoteKey, CacheEntry] = {}

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def get(self, key: QuoteKey) -> Optional[CacheEntry]:
        """Return the entry for key regardless of age, or None."""
        return self._entries.get(key)

    def put(self, key: QuoteKey, quote: Quote, fetched_at: datetime) -> CacheEntry:
        """Replace the entry for key."""
        entry = CacheEntry(quote=quote, fetched_at=fetched_at)
        self._entries[key] = entry
        return entry

    def get_fresh(self, key: QuoteKey, now: datetime) -> Optional[Quote]:
        """Return the cached quote only if it is still within the TTL."""
        entry = self._entries.get(key)
        if entry is None or not is_fresh(entry, now, self._ttl):
            return None
        return entry.quote

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
