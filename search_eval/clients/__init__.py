"""HTTP clients for the web search and scoring APIs."""

from search_eval.clients.base_client import BaseApiClient
from search_eval.clients.errors import ApiError, EvaluationApiError, SearchApiError
from search_eval.clients.evaluation_api import EvaluationClient
from search_eval.clients.rate_limiter import RequestPacer
from search_eval.clients.sse import SseStreamParser, parse_sse_line, parse_stream_deltas
from search_eval.clients.web_search import (
    WebSearchClient,
    generate_request_id,
    normalize_search_payload,
)

__all__ = [
    # Clients
    "BaseApiClient",
    "EvaluationClient",
    "WebSearchClient",
    # Errors
    "ApiError",
    "EvaluationApiError",
    "SearchApiError",
    # Pacing
    "RequestPacer",
    # Parsing helpers
    "SseStreamParser",
    "generate_request_id",
    "normalize_search_payload",
    "parse_sse_line",
    "parse_stream_deltas",
]
