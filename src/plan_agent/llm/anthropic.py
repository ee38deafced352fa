"""Anthropic Messages API streaming transport."""
from __future__ import annotations

import json
from collections.abc import Iterator
from typing import Any

import httpx

from plan_agent.errors import StreamError
from plan_agent.llm.http import HttpStreamClient
from plan_agent.llm.sse import parse_sse_lines
from plan_agent.llm.types import PlanningRequest, StreamEvent, StreamEventType


class AnthropicTransport:
    """Streams from ``/v1/messages``."""

    ANTHROPIC_VERSION = "2023-06-01"
    DEFAULT_MAX_TOKENS = 4096

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.anthropic.com",
        *,
        connect_timeout: float = 5.0,
        read_timeout: float = 120.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._http = HttpStreamClient(
            base_url.rstrip("/"),
            {
                "x-api-key": api_key,
                "anthropic-version": self.ANTHROPIC_VERSION,
                "content-type": "application/json",
            },
            provider=self.name,
            connect_timeout=connect_timeout,
            read_timeout=read_timeout,
            transport=transport,
        )

    @property
    def name(self) -> str:
        return "anthropic"

    def build_body(self, request: PlanningRequest) -> dict[str, Any]:
        body: dict[str, Any] = {
            "model": request.model,
            "max_tokens": request.max_tokens or self.DEFAULT_MAX_TOKENS,
            "system": request.system,
            "messages": [{"role": "user", "content": request.prompt}],
            "stream": True,
        }
        if request.tools:
            body["tools"] = list(request.tools)
        if request.temperature is not None:
            body["temperature"] = request.temperature
        return body

    def stream(self, request: PlanningRequest) -> Iterator[StreamEvent]:
        """Send a request and yield streaming events."""
        lines = self._http.post_stream("/v1/messages", self.build_body(request))

        stop_reason = "end_turn"
        usage: dict[str, int] = {}
        for sse_event in parse_sse_lines(lines):
            event_type = sse_event.event
            if not sse_event.data or event_type == "ping":
                continue
            try:
                data = json.loads(sse_event.data)
            except json.JSONDecodeError:
                continue

            if event_type == "message_start":
                raw_usage = data.get("message", {}).get("usage", {})
                usage["input_tokens"] = raw_usage.get("input_tokens", 0)
                yield StreamEvent(type=StreamEventType.STREAM_START, raw=data)

            elif event_type == "content_block_delta":
                delta = data.get("delta", {})
                if delta.get("type") == "text_delta":
                    yield StreamEvent.text(delta.get("text", ""))

            elif event_type == "message_delta":
                stop_reason = data.get("delta", {}).get("stop_reason") or stop_reason
                usage["output_tokens"] = data.get("usage", {}).get("output_tokens", 0)

            elif event_type == "message_stop":
                yield StreamEvent.finish(stop_reason, usage)
                return

            elif event_type == "error":
                error_data = data.get("error", data)
                yield StreamEvent(
                    type=StreamEventType.ERROR,
                    error=StreamError(error_data.get("message", str(error_data))),
                    raw=data,
                )
                return

        raise StreamError("Stream ended before message_stop")

    def close(self) -> None:
        self._http.close()
