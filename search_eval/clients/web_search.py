"""Web search API client.

Sends one POST per query/engine pair and normalizes the two payload shapes
the API is known to return:

- pre-shaped ``{"results": [...], "total_count": n, "request_id": "..."}``
- raw ``{"search_result": [...], "request_id": "..."}``
"""

import logging
import random
import string
import time
from typing import Any

import httpx

from search_eval.clients.base_client import BaseApiClient
from search_eval.clients.errors import SearchApiError
from search_eval.consts import SEARCH_TIMEOUT
from search_eval.models.model_config import ApiConfig
from search_eval.models.model_search import (
    SearchResultItem,
    WebSearchRequest,
    WebSearchResponse,
)

logger = logging.getLogger(__name__)

_REQUEST_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_request_id() -> str:
    """Generate a request id like 'req_1718000000000_k3j9x0a2b'."""
    suffix = "".join(random.choices(_REQUEST_ID_ALPHABET, k=9))
    return f"req_{int(time.time() * 1000)}_{suffix}"


def normalize_search_payload(data: dict[str, Any]) -> WebSearchResponse:
    """Map a raw search API payload onto WebSearchResponse.

    Raw items get rank = 1-based index and snippet falls back to the
    ``content`` field.
    """
    raw_items = data.get("search_result")
    if isinstance(raw_items, list):
        results = [
            SearchResultItem(
                title=item.get("title") or "",
                url=item.get("url") or "",
                snippet=item.get("snippet") or item.get("content") or "",
                rank=index,
            )
            for index, item in enumerate(raw_items, 1)
        ]
        return WebSearchResponse(
            results=results,
            total_count=len(raw_items),
            request_id=data.get("request_id") or data.get("id") or "",
        )

    return WebSearchResponse.model_validate(data)


class WebSearchClient(BaseApiClient):
    """Client for the web search endpoint."""

    error_class = SearchApiError

    def __init__(
        self,
        url: str,
        api_key: str,
        timeout: float = SEARCH_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ):
        super().__init__(url, api_key, timeout=timeout, client=client)

    @classmethod
    def from_config(cls, config: ApiConfig, client: httpx.AsyncClient | None = None) -> "WebSearchClient":
        return cls(config.websearch_url, config.api_key, client=client)

    async def search(self, request: WebSearchRequest) -> WebSearchResponse:
        """Run one search.

        Args:
            request: Search parameters. A request id is generated if absent.

        Returns:
            Normalized search response.

        Raises:
            SearchApiError: On a non-2xx response.
            httpx.HTTPError: On transport failures.
        """
        body = request.model_dump()
        body["request_id"] = request.request_id or generate_request_id()

        try:
            data = await self._post_json(body)
        except Exception as e:
            logger.error(
                f"WebSearch call failed for engine={request.search_engine} "
                f"query='{request.search_query}': {e}"
            )
            raise

        response = normalize_search_payload(data)
        logger.debug(
            f"WebSearch engine={request.search_engine} returned {len(response.results)} results"
        )
        return response
