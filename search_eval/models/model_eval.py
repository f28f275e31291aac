"""Evaluation run records: results, progress and live events."""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field

from search_eval.models.model_search import SearchResultItem


def _utc_now() -> datetime:
    return datetime.now(UTC)


class EvaluationResult(BaseModel):
    """Scores for one (query, engine, round) combination.

    Immutable once created.
    """

    model_config = ConfigDict(frozen=True)

    engine_id: int
    engine_name: str
    query: str
    round: int = Field(ge=1)
    search_results: list[SearchResultItem] = Field(default_factory=list)
    scores: dict[str, float] = Field(default_factory=dict, description="Key: dimension name")
    weighted_score: float = 0.0
    timestamp: datetime = Field(default_factory=_utc_now)


class EvaluationProgress(BaseModel):
    """Transient progress snapshot, overwritten on each update."""

    current_engine: str
    current_round: int
    total_rounds: int
    current_dimension: str | None = None
    progress: int = Field(ge=0, le=100, description="Percent complete")


class SearchResultEvent(BaseModel):
    """Emitted as soon as one engine's search call returns."""

    engine_id: int
    engine_name: str
    query: str
    search_results: list[SearchResultItem] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=_utc_now)


class StreamMessage(BaseModel):
    """A raw streamed chunk from the scoring endpoint plus its context."""

    message: str
    timestamp: datetime = Field(default_factory=_utc_now)
    engine: str | None = None
    query: str | None = None
    dimension: str | None = None
