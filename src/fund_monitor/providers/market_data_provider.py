"""Market data provider protocol."""

from typing import Any, Optional, Protocol, Union

from fund_monitor.domain.models import FetchResult

QueryParams = dict[str, Union[str, int]]


class MarketDataProvider(Protocol):
    """
    Protocol for quote providers.

    Implementations perform one GET against the provider and return the
    decoded JSON body. Transport problems (network errors, timeouts, non-2xx
    statuses, undecodable bodies) come back as a TRANSPORT FetchResult, never
    as an exception. Interpreting the provider envelope is left to the caller.
    """

    async def fetch_json(self, path: str, params: Optional[QueryParams] = None) -> FetchResult[Any]:
        """GET path with query params; return the decoded body."""
        ...

    async def aclose(self) -> None:
        """Release network resources."""
        ...
