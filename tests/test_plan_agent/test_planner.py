"""Tests for planning request construction and stream consumption."""

from __future__ import annotations

import pytest

from plan_agent.config import AgentConfig
from plan_agent.errors import PlanningTransportError, StreamError
from plan_agent.llm.stub import StubTransport
from plan_agent.llm.types import PlanningRequest, StreamEvent
from plan_agent.models import ContextEntry
from plan_agent.planner import (
    SYSTEM_PROMPT,
    PlanAccumulator,
    PlanStream,
    build_planning_prompt,
    build_planning_request,
    estimate_tokens,
)


# --- Helpers ---


def _request() -> PlanningRequest:
    return PlanningRequest(model="test-model", system=SYSTEM_PROMPT, prompt="do it")


def _context() -> dict[str, ContextEntry]:
    return {
        "main.py": ContextEntry(content="print('hi')", handle=1),
        "util.py": ContextEntry(content="def f(): pass"),
    }


class TestPlanningPrompt:
    def test_contains_task(self) -> None:
        prompt = build_planning_prompt("add logging", _context())
        assert "add logging" in prompt

    def test_contains_every_entry_fenced_in_order(self) -> None:
        prompt = build_planning_prompt("task", _context())
        first = prompt.index("File: main.py\n```\nprint('hi')\n```")
        second = prompt.index("File: util.py\n```\ndef f(): pass\n```")
        assert first < second

    def test_asks_for_numbered_list(self) -> None:
        prompt = build_planning_prompt("task", {})
        assert "numbered list" in prompt


class TestPlanningRequest:
    def test_offers_no_tools(self) -> None:
        request = build_planning_request("task", _context(), AgentConfig(provider="stub"))
        assert request.tools == ()

    def test_uses_config(self) -> None:
        config = AgentConfig(provider="openai", model="gpt-test", max_tokens=123, temperature=0.2)
        request = build_planning_request("task", {}, config)
        assert request.model == "gpt-test"
        assert request.max_tokens == 123
        assert request.temperature == 0.2
        assert request.system == SYSTEM_PROMPT

    def test_prompt_embeds_task(self) -> None:
        request = build_planning_request("refactor parser", {}, AgentConfig(provider="stub"))
        assert "refactor parser" in request.prompt


class TestEstimateTokens:
    def test_counts_words(self) -> None:
        assert estimate_tokens("one two  three\nfour") == pytest.approx(4 * 1.3)

    def test_empty(self) -> None:
        assert estimate_tokens("") == 0.0
        assert estimate_tokens("   \n ") == 0.0


class TestPlanAccumulator:
    def test_accumulates_text(self) -> None:
        acc = PlanAccumulator()
        acc.process(StreamEvent.start())
        assert acc.process(StreamEvent.text("1. Add ")) == "1. Add "
        assert acc.process(StreamEvent.text("import\n")) == "import\n"
        acc.process(StreamEvent.finish("stop"))
        assert acc.started
        assert acc.finished
        assert acc.finish_reason == "stop"
        assert acc.text == "1. Add import\n"

    def test_token_estimate_is_cumulative(self) -> None:
        acc = PlanAccumulator()
        acc.process(StreamEvent.text("two words"))
        acc.process(StreamEvent.text(" three more words"))
        assert acc.estimated_tokens == pytest.approx(5 * 1.3)

    def test_empty_delta_ignored(self) -> None:
        acc = PlanAccumulator()
        assert acc.process(StreamEvent.text("")) is None
        assert acc.text == ""

    def test_error_event_raises(self) -> None:
        acc = PlanAccumulator()
        with pytest.raises(PlanningTransportError, match="overloaded") as exc_info:
            acc.process(StreamEvent.failure(StreamError("overloaded")))
        assert isinstance(exc_info.value.cause, StreamError)

    def test_size_bound(self) -> None:
        acc = PlanAccumulator(max_chars=10)
        acc.process(StreamEvent.text("12345"))
        with pytest.raises(PlanningTransportError, match="exceeded 10 characters"):
            acc.process(StreamEvent.text("678901"))
        assert acc.text == "12345"


class TestPlanStream:
    def test_pump_yields_one_event_at_a_time(self) -> None:
        transport = StubTransport.from_text("1. A\n", "2. B\n")
        stream = PlanStream(transport, _request())
        assert stream.pump() is None  # start
        assert stream.pump() == "1. A\n"
        assert not stream.done
        assert stream.pump() == "2. B\n"
        assert stream.pump() is None  # finish
        assert stream.done
        assert stream.accumulator.text == "1. A\n2. B\n"

    def test_stream_is_opened_lazily(self) -> None:
        transport = StubTransport.from_text("x")
        stream = PlanStream(transport, _request())
        assert transport.requests == []
        stream.pump()
        assert transport.requests == [_request()]

    def test_consume(self) -> None:
        stream = PlanStream(StubTransport.from_text("hello ", "world"), _request())
        assert stream.consume() == "hello world"
        assert stream.pump() is None

    def test_end_without_finish_is_clean(self) -> None:
        transport = StubTransport(stream_events=[[StreamEvent.start(), StreamEvent.text("partial")]])
        stream = PlanStream(transport, _request())
        assert stream.consume() == "partial"
        assert stream.done
        assert not stream.accumulator.finished

    def test_transport_exception_is_wrapped(self) -> None:
        transport = StubTransport(
            stream_events=[[StreamEvent.start(), StreamEvent.text("1. A\n")]],
            raise_error=ConnectionError("connection reset"),
        )
        stream = PlanStream(transport, _request())
        with pytest.raises(PlanningTransportError, match="connection reset") as exc_info:
            stream.consume()
        assert isinstance(exc_info.value.cause, ConnectionError)
        assert stream.done

    def test_exception_without_message_uses_type_name(self) -> None:
        transport = StubTransport(stream_events=[[]], raise_error=TimeoutError())
        stream = PlanStream(transport, _request())
        with pytest.raises(PlanningTransportError, match="TimeoutError"):
            stream.pump()

    def test_error_event_stops_stream(self) -> None:
        stream = PlanStream(StubTransport.failing(StreamError("bad gateway")), _request())
        stream.pump()
        with pytest.raises(PlanningTransportError, match="bad gateway"):
            stream.pump()
        assert stream.done

    def test_size_bound_from_constructor(self) -> None:
        stream = PlanStream(StubTransport.from_text("x" * 20), _request(), max_chars=5)
        with pytest.raises(PlanningTransportError, match="exceeded 5"):
            stream.consume()
