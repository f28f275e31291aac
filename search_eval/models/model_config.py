"""Configuration models: engines, dimensions, scoring systems and API settings."""

from pydantic import BaseModel, Field, model_validator

from search_eval.consts import (
    BINARY_SCORING_SYSTEM,
    DEFAULT_EVALUATION_URL,
    DEFAULT_MODEL_KEY,
    DEFAULT_SEARCH_COUNT,
    DEFAULT_WEBSEARCH_URL,
    SCORING_DELAY_SECONDS,
    SCORING_MAX_TOKENS,
    SCORING_TEMPERATURE,
)


class SearchEngine(BaseModel):
    """A search backend, identified by the code sent to the search API."""

    id: int = Field(description="Local identifier")
    code: str = Field(description="Engine code sent as search_engine")
    name: str = Field(description="Display name")


class Dimension(BaseModel):
    """An evaluation axis graded by the scoring model.

    Weights are not required to sum to 1.0; the weighted score normalizes by
    the weights of the dimensions actually scored.
    """

    id: int
    name: str
    weight: float = Field(default=0.33, ge=0.0, le=1.0)
    enabled: bool = True
    prompt: str | None = Field(default=None, description="Dimension-specific grading instruction")


class ScoringSystem(BaseModel):
    """Numeric range convention used when prompting the grading model."""

    key: str
    label: str
    min_score: float
    max_score: float

    @model_validator(mode="after")
    def min_below_max(self) -> "ScoringSystem":
        """Validate that the range is not empty."""
        if self.min_score >= self.max_score:
            msg = f"min_score must be below max_score, got {self.min_score} >= {self.max_score}"
            raise ValueError(msg)
        return self

    @property
    def score_range(self) -> str:
        """Range text used in prompts, e.g. '0-2分'."""
        return f"{self.min_score:g}-{self.max_score:g}分"


class ApiConfig(BaseModel):
    """Endpoint and credential settings shared by both API clients."""

    websearch_url: str = DEFAULT_WEBSEARCH_URL
    evaluation_url: str = DEFAULT_EVALUATION_URL
    api_key: str = ""
    model_key: str = DEFAULT_MODEL_KEY


class EvaluationConfig(ApiConfig):
    """Settings for one evaluation run."""

    scoring_system: str = Field(default=BINARY_SCORING_SYSTEM, description="Scoring system key")
    search_count: int = Field(default=DEFAULT_SEARCH_COUNT, ge=1)
    temperature: float = Field(default=SCORING_TEMPERATURE, ge=0.0, le=2.0)
    max_tokens: int = Field(default=SCORING_MAX_TOKENS, ge=1)
    scoring_delay_seconds: float = Field(default=SCORING_DELAY_SECONDS, ge=0.0, allow_inf_nan=False)
    stream: bool = Field(default=False, description="Request streamed scoring responses")
