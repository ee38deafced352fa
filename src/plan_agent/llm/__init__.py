"""LLM transport layer: streaming requests to a provider."""

from plan_agent.llm.client import create_transport
from plan_agent.llm.sse import SSEEvent, parse_sse_lines
from plan_agent.llm.stub import StubTransport
from plan_agent.llm.types import PlanningRequest, StreamEvent, StreamEventType, StreamTransport

__all__ = [
    "PlanningRequest",
    "SSEEvent",
    "StreamEvent",
    "StreamEventType",
    "StreamTransport",
    "StubTransport",
    "create_transport",
    "parse_sse_lines",
]
