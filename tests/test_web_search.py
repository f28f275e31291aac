"""Tests for the web search client."""

import json
import re

import httpx
import pytest

from search_eval.clients.errors import SearchApiError
from search_eval.clients.web_search import (
    WebSearchClient,
    generate_request_id,
    normalize_search_payload,
)
from search_eval.models.model_config import ApiConfig
from search_eval.models.model_search import WebSearchRequest

SEARCH_URL = "https://search.test/web_search"


def make_client(handler) -> WebSearchClient:
    transport = httpx.MockTransport(handler)
    return WebSearchClient(SEARCH_URL, "secret", client=httpx.AsyncClient(transport=transport))


class TestNormalizeSearchPayload:
    """Tests for mapping raw and pre-shaped payloads."""

    def test_raw_payload_mapped(self) -> None:
        data = {
            "search_result": [
                {"title": "A", "link": "ignored", "url": "https://a.test", "content": "body A"},
                {"title": "B", "url": "https://b.test", "snippet": "snip B", "content": "body B"},
            ],
            "request_id": "req-1",
        }

        response = normalize_search_payload(data)

        assert [r.rank for r in response.results] == [1, 2]
        assert response.results[0].snippet == "body A"
        assert response.results[1].snippet == "snip B"
        assert response.total_count == 2
        assert response.request_id == "req-1"

    def test_raw_payload_falls_back_to_id(self) -> None:
        response = normalize_search_payload({"search_result": [], "id": "abc"})

        assert response.results == []
        assert response.request_id == "abc"

    def test_raw_payload_missing_fields(self) -> None:
        response = normalize_search_payload({"search_result": [{}]})

        item = response.results[0]
        assert (item.title, item.url, item.snippet, item.rank) == ("", "", "", 1)
        assert response.request_id == ""

    def test_preshaped_payload(self) -> None:
        data = {
            "results": [{"title": "T", "url": "https://t.test", "snippet": "S", "rank": 1}],
            "total_count": 1,
            "request_id": "r",
        }

        response = normalize_search_payload(data)

        assert response.results[0].title == "T"
        assert response.total_count == 1


class TestRequestId:
    def test_format(self) -> None:
        assert re.fullmatch(r"req_\d+_[a-z0-9]{9}", generate_request_id())

    def test_unique(self) -> None:
        assert len({generate_request_id() for _ in range(20)}) == 20


class TestWebSearchClient:
    """Tests for WebSearchClient HTTP behavior."""

    @pytest.mark.asyncio
    async def test_search_sends_defaults_and_auth(self) -> None:
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, json={"search_result": [{"title": "A", "url": "u", "content": "c"}]})

        async with make_client(handler) as client:
            response = await client.search(
                WebSearchRequest(search_query="python", search_engine="search_std")
            )

        assert len(response.results) == 1
        request = captured[0]
        assert str(request.url) == SEARCH_URL
        assert request.headers["Authorization"] == "Bearer secret"

        body = json.loads(request.content)
        assert body["search_query"] == "python"
        assert body["search_engine"] == "search_std"
        assert body["count"] == 10
        assert body["search_recency_filter"] == "noLimit"
        assert body["content_size"] == "medium"
        assert body["user_id"] == "default_user"
        assert body["request_id"].startswith("req_")

    @pytest.mark.asyncio
    async def test_search_keeps_explicit_request_id(self) -> None:
        bodies = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json={"results": []})

        async with make_client(handler) as client:
            await client.search(
                WebSearchRequest(search_query="q", search_engine="e", request_id="fixed")
            )

        assert bodies[0]["request_id"] == "fixed"

    @pytest.mark.asyncio
    async def test_search_non_2xx_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, json={"error": "bad key"})

        async with make_client(handler) as client:
            with pytest.raises(SearchApiError) as exc_info:
                await client.search(WebSearchRequest(search_query="q", search_engine="e"))

        assert exc_info.value.status_code == 401
        assert exc_info.value.reason == "Unauthorized"
        assert "401" in str(exc_info.value)

    def test_from_config(self) -> None:
        config = ApiConfig(websearch_url="https://x.test/search", api_key="k")

        client = WebSearchClient.from_config(config)

        assert client.url == "https://x.test/search"
        assert client.api_key == "k"
