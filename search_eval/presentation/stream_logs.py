"""Builds the live log from search events and streamed scoring chunks.

Output of a single API call is grouped into one entry: each search event
yields an "API call" entry (shown slightly before the result) and a "search
request" entry; streamed chunks are merged per (engine, query, dimension).
"""

from collections.abc import Sequence
from datetime import timedelta

from search_eval.clients.sse import parse_stream_deltas
from search_eval.consts import LOG_DETAIL_LIMIT
from search_eval.models.model_eval import SearchResultEvent, StreamMessage
from search_eval.models.model_summary import LogEntry, LogStatus

API_CALL_LEAD = timedelta(milliseconds=500)


def _search_entries(event: SearchResultEvent) -> list[LogEntry]:
    log_id = f"search-{event.engine_id}-{event.query}-{event.timestamp.isoformat()}"
    api_call = LogEntry(
        id=log_id,
        timestamp=event.timestamp - API_CALL_LEAD,
        engine=event.engine_name,
        query=event.query,
        type="API call",
        content="Calling WebSearch API",
        status=LogStatus.PENDING,
    )
    search_request = LogEntry(
        id=log_id,
        timestamp=event.timestamp,
        engine=event.engine_name,
        query=event.query,
        type="Search request",
        content=f"Received {len(event.search_results)} search results",
        details=[f"{r.rank}. {r.title}" for r in event.search_results[:LOG_DETAIL_LIMIT]],
    )
    return [api_call, search_request]


def _stream_details(message: str) -> list[str]:
    """Parsed deltas of a chunk, or the raw chunk when none parse."""
    return parse_stream_deltas(message) or [message]


def _stream_entries(messages: Sequence[StreamMessage]) -> list[LogEntry]:
    groups: dict[str, list[StreamMessage]] = {}
    for message in messages:
        key = f"sse-{message.engine or ''}-{message.query or ''}-{message.dimension or ''}"
        groups.setdefault(key, []).append(message)

    entries = []
    for key, group in groups.items():
        group.sort(key=lambda m: m.timestamp)
        first = group[0]

        if first.dimension:
            content = f"{first.dimension} scoring"
        elif parse_stream_deltas(first.message):
            content = "Model stream fragment"
        else:
            content = first.message

        entries.append(
            LogEntry(
                id=key,
                timestamp=first.timestamp,
                engine=first.engine or "",
                query=first.query or "",
                type="Stream",
                content=content,
                details=[detail for m in group for detail in _stream_details(m.message)],
                is_stream=True,
            )
        )
    return entries


def build_log_entries(
    search_events: Sequence[SearchResultEvent],
    stream_messages: Sequence[StreamMessage],
) -> list[LogEntry]:
    """Merge search and stream logs into one timeline, oldest first."""
    entries: list[LogEntry] = []
    for event in search_events:
        entries.extend(_search_entries(event))
    entries.extend(_stream_entries(stream_messages))

    return sorted(entries, key=lambda entry: entry.timestamp)
