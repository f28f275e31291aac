"""Base class for the bearer-token JSON API clients."""

import logging
from abc import ABC
from typing import Any

import httpx

from search_eval.clients.errors import ApiError

logger = logging.getLogger(__name__)


class BaseApiClient(ABC):
    """Shared HTTP plumbing for the search and scoring clients.

    The underlying ``httpx.AsyncClient`` is created lazily and can be
    injected (e.g. with a mock transport in tests).
    """

    error_class: type[ApiError] = ApiError

    def __init__(
        self,
        url: str,
        api_key: str,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize client.

        Args:
            url: Full endpoint URL requests are POSTed to.
            api_key: Bearer token.
            timeout: Request timeout in seconds.
            client: Optional pre-built HTTP client.
        """
        self.url = url
        self.api_key = api_key
        self.timeout = timeout
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout))
        return self._client

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _raise_for_status(self, response: httpx.Response) -> None:
        """Raise the client's error type on a non-2xx response."""
        if not response.is_success:
            raise self.error_class(response.status_code, response.reason_phrase)

    async def _post_json(self, body: dict[str, Any]) -> Any:
        """POST a JSON body and return the decoded JSON response."""
        client = await self._get_client()
        response = await client.post(self.url, headers=self._headers(), json=body)
        self._raise_for_status(response)
        return response.json()

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
