"""Tests for SSE chunk parsing."""

from search_eval.clients.sse import SseStreamParser, parse_sse_line, parse_stream_deltas

DELTA = 'data: {"choices": [{"delta": {"content": "%s"}}]}'


class TestParseSseLine:
    def test_delta_content(self) -> None:
        assert parse_sse_line(DELTA % "hello") == "hello"

    def test_no_space_after_prefix(self) -> None:
        assert parse_sse_line('data:{"choices": [{"delta": {"content": "x"}}]}') == "x"

    def test_done_sentinel(self) -> None:
        assert parse_sse_line("data: [DONE]") is None

    def test_non_data_lines(self) -> None:
        assert parse_sse_line("") is None
        assert parse_sse_line("event: message") is None
        assert parse_sse_line(": comment") is None

    def test_invalid_json(self) -> None:
        assert parse_sse_line("data: {broken") is None

    def test_missing_delta(self) -> None:
        assert parse_sse_line('data: {"choices": [{"message": {}}]}') is None
        assert parse_sse_line('data: {"choices": []}') is None
        assert parse_sse_line('data: {"choices": [{"delta": {"content": ""}}]}') is None


class TestParseStreamDeltas:
    def test_multiple_lines(self) -> None:
        text = "\n".join([DELTA % "a", "", DELTA % "b", "data: [DONE]"])

        assert parse_stream_deltas(text) == ["a", "b"]

    def test_empty(self) -> None:
        assert parse_stream_deltas("") == []


class TestSseStreamParser:
    def test_partial_line_buffered(self) -> None:
        parser = SseStreamParser()
        line = DELTA % "split" + "\n"

        assert parser.feed(line[:15]) == []
        assert parser.feed(line[15:]) == ["split"]

    def test_flush_parses_unterminated_line(self) -> None:
        parser = SseStreamParser()

        assert parser.feed(DELTA % "tail") == []
        assert parser.flush() == ["tail"]
        assert parser.flush() == []

    def test_several_lines_in_one_chunk(self) -> None:
        parser = SseStreamParser()
        chunk = f"{DELTA % 'a'}\n\n{DELTA % 'b'}\n\n"

        assert parser.feed(chunk) == ["a", "b"]
