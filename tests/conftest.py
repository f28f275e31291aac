"""Pytest configuration and fixtures."""

from datetime import UTC, datetime, timedelta

import pytest

from search_eval.models.model_config import Dimension, EvaluationConfig, SearchEngine
from search_eval.models.model_eval import EvaluationResult
from search_eval.models.model_search import (
    ChatMessage,
    Choice,
    EvaluationResponse,
    SearchResultItem,
)


@pytest.fixture
def engines() -> list[SearchEngine]:
    """Two engines, mirroring the defaults."""
    return [
        SearchEngine(id=1, code="search_std", name="Standard"),
        SearchEngine(id=3, code="search_pro_sogou", name="Sogou"),
    ]


@pytest.fixture
def dimensions() -> list[Dimension]:
    return [
        Dimension(id=1, name="权威性", weight=0.4),
        Dimension(id=2, name="相关性", weight=0.35),
        Dimension(id=3, name="时效性", weight=0.25),
    ]


@pytest.fixture
def evaluation_config() -> EvaluationConfig:
    """Valid config with pacing disabled."""
    return EvaluationConfig(
        websearch_url="https://search.test/web_search",
        evaluation_url="https://llm.test/chat/completions",
        api_key="test-key",
        model_key="test-model",
        scoring_delay_seconds=0,
    )


@pytest.fixture
def search_items() -> list[SearchResultItem]:
    return [
        SearchResultItem(
            title=f"Result {i}",
            url=f"https://example.com/{i}",
            snippet=f"Snippet {i}",
            rank=i,
        )
        for i in range(1, 6)
    ]


@pytest.fixture
def scored_response():
    """Factory for a chat-completion response carrying the given text."""

    def _make(content: str = "分析……\n最终得分：2") -> EvaluationResponse:
        return EvaluationResponse(
            choices=[Choice(message=ChatMessage(role="assistant", content=content), finish_reason="stop")]
        )

    return _make


@pytest.fixture
def make_result():
    """Factory for EvaluationResults with increasing timestamps."""
    base = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)

    def _make(
        engine_id: int = 1,
        engine_name: str = "Standard",
        query: str = "python asyncio",
        round: int = 1,
        scores: dict[str, float] | None = None,
        weighted_score: float = 1.0,
        offset_seconds: int = 0,
    ) -> EvaluationResult:
        return EvaluationResult(
            engine_id=engine_id,
            engine_name=engine_name,
            query=query,
            round=round,
            scores=scores or {},
            weighted_score=weighted_score,
            timestamp=base + timedelta(seconds=offset_seconds),
        )

    return _make
