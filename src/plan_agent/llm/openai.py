"""OpenAI Chat Completions streaming transport."""
from __future__ import annotations

import json
from collections.abc import Iterator
from typing import Any

import httpx

from plan_agent.errors import StreamError
from plan_agent.llm.http import HttpStreamClient
from plan_agent.llm.sse import parse_sse_lines
from plan_agent.llm.types import PlanningRequest, StreamEvent, StreamEventType


class OpenAITransport:
    """Streams from ``/v1/chat/completions`` (or any compatible server)."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openai.com",
        *,
        connect_timeout: float = 5.0,
        read_timeout: float = 120.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._http = HttpStreamClient(
            base_url.rstrip("/"),
            {
                "authorization": f"Bearer {api_key}",
                "content-type": "application/json",
            },
            provider=self.name,
            connect_timeout=connect_timeout,
            read_timeout=read_timeout,
            transport=transport,
        )

    @property
    def name(self) -> str:
        return "openai"

    def build_body(self, request: PlanningRequest) -> dict[str, Any]:
        body: dict[str, Any] = {
            "model": request.model,
            "messages": [
                {"role": "system", "content": request.system},
                {"role": "user", "content": request.prompt},
            ],
            "stream": True,
            "stream_options": {"include_usage": True},
        }
        if request.tools:
            body["tools"] = list(request.tools)
        if request.max_tokens is not None:
            body["max_tokens"] = request.max_tokens
        if request.temperature is not None:
            body["temperature"] = request.temperature
        return body

    def stream(self, request: PlanningRequest) -> Iterator[StreamEvent]:
        """Send a request and yield streaming events."""
        lines = self._http.post_stream("/v1/chat/completions", self.build_body(request))
        yield StreamEvent.start()

        finish_reason = "stop"
        usage: dict[str, int] | None = None
        for sse_event in parse_sse_lines(lines):
            if sse_event.data == "[DONE]":
                break
            try:
                data = json.loads(sse_event.data)
            except json.JSONDecodeError:
                continue

            if "error" in data:
                error_data = data["error"]
                message = error_data.get("message", str(error_data)) if isinstance(error_data, dict) else str(error_data)
                yield StreamEvent(type=StreamEventType.ERROR, error=StreamError(message), raw=data)
                return

            if data.get("usage"):
                raw_usage = data["usage"]
                usage = {
                    "input_tokens": raw_usage.get("prompt_tokens", 0),
                    "output_tokens": raw_usage.get("completion_tokens", 0),
                }

            for choice in data.get("choices") or []:
                content = (choice.get("delta") or {}).get("content")
                if content:
                    yield StreamEvent.text(content)
                if choice.get("finish_reason"):
                    finish_reason = choice["finish_reason"]

        yield StreamEvent.finish(finish_reason, usage)

    def close(self) -> None:
        self._http.close()
