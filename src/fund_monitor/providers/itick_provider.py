"""HTTP client for the iTick quote API."""

import logging
from typing import Any, Optional

import httpx

from fund_monitor.domain.models import FetchErrorKind, FetchResult
from fund_monitor.providers.market_data_provider import QueryParams

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.itick.org"
DEFAULT_TIMEOUT_SECONDS = 10.0


class ITickProvider:
    """
    Async HTTP client for the iTick REST API.

    Sends the fixed accept/token headers on every request and enforces a
    request timeout. One httpx.AsyncClient is created lazily and reused
    until aclose().
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        token: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        headers: Optional[dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.default_headers = {"accept": "application/json", **(headers or {})}
        if token:
            self.default_headers["token"] = token
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy initialization of HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=self.default_headers,
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "ITickProvider":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def fetch_json(self, path: str, params: Optional[QueryParams] = None) -> FetchResult[Any]:
        """
        GET path and decode the JSON body.

        Returns a TRANSPORT failure on HTTP errors, timeouts, connection
        failures or a body that is not JSON.
        """
        try:
            response = await self.client.get(path, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.warning(f"HTTP {status} for GET {path}: {e.response.text[:200]}")
            return FetchResult.failure(
                FetchErrorKind.TRANSPORT,
                f"HTTP {status}: {e.response.reason_phrase}",
                status_code=status,
            )
        except httpx.TimeoutException:
            logger.warning(f"Timeout for GET {path}")
            return FetchResult.failure(FetchErrorKind.TRANSPORT, f"Request timed out: {path}")
        except httpx.HTTPError as e:
            logger.warning(f"Request error for GET {path}: {e}")
            return FetchResult.failure(FetchErrorKind.TRANSPORT, f"Request failed: {path}: {e}")

        try:
            return FetchResult.success(response.json())
        except ValueError:
            logger.warning(f"Non-JSON body for GET {path}: {response.text[:200]}")
            return FetchResult.failure(
                FetchErrorKind.TRANSPORT,
                "Response body is not valid JSON",
                status_code=response.status_code,
            )
