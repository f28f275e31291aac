"""Wire models for the web search and chat-completion APIs."""

from pydantic import BaseModel, Field

from search_eval.consts import (
    DEFAULT_CONTENT_SIZE,
    DEFAULT_MAX_TOKENS,
    DEFAULT_RECENCY_FILTER,
    DEFAULT_SEARCH_COUNT,
    DEFAULT_TEMPERATURE,
    DEFAULT_USER_ID,
)


class SearchResultItem(BaseModel):
    """One normalized search hit."""

    title: str = ""
    url: str = ""
    snippet: str = ""
    rank: int = Field(ge=1, description="1-based position in the result list")


class WebSearchRequest(BaseModel):
    """Parameters for one web search call."""

    search_query: str
    search_engine: str
    search_intent: bool = False
    count: int = DEFAULT_SEARCH_COUNT
    search_domain_filter: str = ""
    search_recency_filter: str = DEFAULT_RECENCY_FILTER
    content_size: str = DEFAULT_CONTENT_SIZE
    request_id: str | None = None
    user_id: str = DEFAULT_USER_ID


class WebSearchResponse(BaseModel):
    """Normalized search response."""

    results: list[SearchResultItem] = Field(default_factory=list)
    total_count: int = 0
    request_id: str = ""


class ChatMessage(BaseModel):
    role: str = "assistant"
    content: str = ""


class EvaluationRequest(BaseModel):
    """Chat-completion request sent to the scoring endpoint."""

    model: str | None = None
    messages: list[ChatMessage]
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS
    stream: bool = False


class Choice(BaseModel):
    message: ChatMessage
    finish_reason: str | None = None


class Usage(BaseModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class EvaluationResponse(BaseModel):
    """OpenAI-style chat-completion response."""

    choices: list[Choice] = Field(default_factory=list)
    usage: Usage = Field(default_factory=Usage)

    @property
    def content(self) -> str:
        """Content of the first choice, or an empty string."""
        if not self.choices:
            return ""
        return self.choices[0].message.content or ""
