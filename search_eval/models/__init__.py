"""Pydantic models for search-eval."""

from search_eval.models.model_config import (
    ApiConfig,
    Dimension,
    EvaluationConfig,
    ScoringSystem,
    SearchEngine,
)
from search_eval.models.model_eval import (
    EvaluationProgress,
    EvaluationResult,
    SearchResultEvent,
    StreamMessage,
)
from search_eval.models.model_search import (
    ChatMessage,
    Choice,
    EvaluationRequest,
    EvaluationResponse,
    SearchResultItem,
    Usage,
    WebSearchRequest,
    WebSearchResponse,
)
from search_eval.models.model_summary import (
    EngineStats,
    LogEntry,
    LogStatus,
    OverallStats,
)

__all__ = [
    # Configuration models
    "ApiConfig",
    "Dimension",
    "EvaluationConfig",
    "ScoringSystem",
    "SearchEngine",
    # Wire models
    "ChatMessage",
    "Choice",
    "EvaluationRequest",
    "EvaluationResponse",
    "SearchResultItem",
    "Usage",
    "WebSearchRequest",
    "WebSearchResponse",
    # Run records
    "EvaluationProgress",
    "EvaluationResult",
    "SearchResultEvent",
    "StreamMessage",
    # View models
    "EngineStats",
    "LogEntry",
    "LogStatus",
    "OverallStats",
]
