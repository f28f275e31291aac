"""Parsing of server-sent-event chunks from streamed chat completions.

Each event line looks like ``data: {...}`` with an incremental
``choices[0].delta.content`` field; the stream ends with ``data: [DONE]``.
Unparseable lines are ignored.
"""

import json
import logging

from search_eval.consts import SSE_DATA_PREFIX, SSE_DONE_SENTINEL

logger = logging.getLogger(__name__)


def parse_sse_line(line: str) -> str | None:
    """Return the delta content carried by one SSE line, if any."""
    line = line.strip()
    if not line.startswith(SSE_DATA_PREFIX):
        return None

    payload = line[len(SSE_DATA_PREFIX):].strip()
    if not payload or payload == SSE_DONE_SENTINEL:
        return None

    try:
        data = json.loads(payload)
    except json.JSONDecodeError:
        logger.debug(f"Ignoring unparseable stream line: {payload[:80]}")
        return None

    try:
        content = data["choices"][0]["delta"]["content"]
    except (KeyError, IndexError, TypeError):
        return None

    if isinstance(content, str) and content:
        return content
    return None


def parse_stream_deltas(text: str) -> list[str]:
    """Extract all delta contents from a block of complete SSE lines."""
    deltas = []
    for line in text.split("\n"):
        content = parse_sse_line(line)
        if content is not None:
            deltas.append(content)
    return deltas


class SseStreamParser:
    """Incremental parser that reassembles lines split across chunks."""

    def __init__(self) -> None:
        self._buffer = ""

    def feed(self, chunk: str) -> list[str]:
        """Consume a chunk and return deltas from every completed line."""
        self._buffer += chunk
        *lines, self._buffer = self._buffer.split("\n")
        return parse_stream_deltas("\n".join(lines))

    def flush(self) -> list[str]:
        """Parse whatever is left once the stream has ended."""
        remainder, self._buffer = self._buffer, ""
        return parse_stream_deltas(remainder)
