"""Tests for the SSE line parser."""

from __future__ import annotations

from plan_agent.llm.sse import SSEEvent, parse_sse_lines


def _parse(text: str) -> list[SSEEvent]:
    return list(parse_sse_lines(iter(text.split("\n"))))


class TestParseSSELines:
    def test_single_event(self) -> None:
        events = _parse('data: {"a": 1}\n\n')
        assert events == [SSEEvent(event="message", data='{"a": 1}')]

    def test_named_event_with_id(self) -> None:
        events = _parse("event: message_stop\nid: 7\ndata: {}\n\n")
        assert events == [SSEEvent(event="message_stop", data="{}", id="7")]

    def test_multiline_data_joined(self) -> None:
        events = _parse("data: line one\ndata: line two\n\n")
        assert events[0].data == "line one\nline two"

    def test_comments_and_unknown_fields_ignored(self) -> None:
        events = _parse(": keep-alive\nretry: 100\ndata: x\n\n")
        assert events == [SSEEvent(data="x")]

    def test_blank_lines_without_data_dispatch_nothing(self) -> None:
        assert _parse("\n\nevent: ping\n\n") == []

    def test_only_one_leading_space_stripped(self) -> None:
        assert _parse("data:  spaced\n\n")[0].data == " spaced"

    def test_no_space_after_colon(self) -> None:
        assert _parse("data:tight\n\n")[0].data == "tight"

    def test_trailing_event_without_blank_line(self) -> None:
        assert _parse("data: a\n\ndata: b")[1].data == "b"

    def test_crlf(self) -> None:
        events = list(parse_sse_lines(iter(["data: x\r", "\r", ""])))
        assert events == [SSEEvent(data="x")]

    def test_event_name_resets_between_events(self) -> None:
        events = _parse("event: error\ndata: 1\n\ndata: 2\n\n")
        assert [e.event for e in events] == ["error", "message"]
