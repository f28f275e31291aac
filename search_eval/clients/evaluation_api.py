"""Chat-completion client used to grade search results."""

import logging
from collections.abc import Callable

import httpx

from search_eval.clients.base_client import BaseApiClient
from search_eval.clients.errors import EvaluationApiError
from search_eval.clients.sse import SseStreamParser
from search_eval.consts import DEFAULT_MODEL_KEY, EVALUATION_TIMEOUT
from search_eval.models.model_config import ApiConfig
from search_eval.models.model_search import (
    ChatMessage,
    Choice,
    EvaluationRequest,
    EvaluationResponse,
)

logger = logging.getLogger(__name__)


class EvaluationClient(BaseApiClient):
    """Client for an OpenAI-style chat-completion endpoint.

    Supports both plain JSON responses and streamed (SSE) responses. In
    streaming mode every raw chunk is handed to the optional observer and the
    incremental deltas are merged into a single assistant message.
    """

    error_class = EvaluationApiError

    def __init__(
        self,
        url: str,
        api_key: str,
        model_key: str = DEFAULT_MODEL_KEY,
        timeout: float = EVALUATION_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ):
        super().__init__(url, api_key, timeout=timeout, client=client)
        self.model_key = model_key

    @classmethod
    def from_config(cls, config: ApiConfig, client: httpx.AsyncClient | None = None) -> "EvaluationClient":
        return cls(config.evaluation_url, config.api_key, model_key=config.model_key, client=client)

    async def evaluate(
        self,
        request: EvaluationRequest,
        on_chunk: Callable[[str], None] | None = None,
    ) -> EvaluationResponse:
        """Send a chat-completion request.

        Streaming is used when the request asks for it or an observer is given.

        Args:
            request: Messages and sampling parameters.
            on_chunk: Optional observer receiving each raw streamed chunk.

        Returns:
            Response with the full answer in ``choices[0].message.content``.

        Raises:
            EvaluationApiError: On a non-2xx response.
        """
        use_stream = request.stream or on_chunk is not None
        body = {
            "model": request.model or self.model_key,
            "messages": [message.model_dump() for message in request.messages],
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
            "stream": use_stream,
        }

        try:
            if use_stream:
                return await self._evaluate_streamed(body, on_chunk)
            data = await self._post_json(body)
            return EvaluationResponse.model_validate(data)
        except Exception as e:
            logger.error(f"Evaluation call failed: {e}")
            raise

    async def _evaluate_streamed(
        self,
        body: dict,
        on_chunk: Callable[[str], None] | None,
    ) -> EvaluationResponse:
        client = await self._get_client()
        parser = SseStreamParser()
        parts: list[str] = []

        async with client.stream("POST", self.url, headers=self._headers(), json=body) as response:
            self._raise_for_status(response)
            async for chunk in response.aiter_text():
                if on_chunk is not None:
                    on_chunk(chunk)
                parts.extend(parser.feed(chunk))

        parts.extend(parser.flush())

        return EvaluationResponse(
            choices=[
                Choice(
                    message=ChatMessage(role="assistant", content="".join(parts)),
                    finish_reason="stop",
                )
            ]
        )
