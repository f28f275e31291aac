"""View models for the summary and log panels."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class EngineStats(BaseModel):
    """Aggregated scores for one engine across all of its results."""

    engine_id: int
    engine_name: str
    average_score: float = 0.0
    total_rounds: int = Field(default=0, ge=0)
    dimension_scores: dict[str, float] = Field(default_factory=dict)
    score_history: list[float] = Field(default_factory=list, description="Oldest first")


class OverallStats(BaseModel):
    total_evaluations: int = 0
    average_score: float = 0.0
    unique_queries: int = 0
    active_engines: int = 0


class LogStatus(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"


class LogEntry(BaseModel):
    """One row of the live log, grouping output of a single API call."""

    id: str
    timestamp: datetime
    engine: str | None = None
    query: str | None = None
    type: str
    content: str
    details: list[str] = Field(default_factory=list)
    status: LogStatus = LogStatus.SUCCESS
    is_stream: bool = False
