"""Request, stream event and transport protocol types."""
from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Protocol, runtime_checkable


class StreamEventType(StrEnum):
    """Types of events emitted during streaming."""

    STREAM_START = "stream_start"
    TEXT_DELTA = "text_delta"
    FINISH = "finish"
    ERROR = "error"


@dataclass(frozen=True)
class PlanningRequest:
    """A single-turn streaming request: one system text, one user prompt."""

    model: str
    system: str
    prompt: str
    tools: tuple[dict[str, Any], ...] = ()
    max_tokens: int | None = None
    temperature: float | None = None


@dataclass(frozen=True)
class StreamEvent:
    """A single event emitted during streaming."""

    type: StreamEventType | str
    delta: str | None = None
    finish_reason: str | None = None
    usage: dict[str, int] | None = None
    error: Exception | None = field(default=None, compare=False, hash=False)
    raw: dict[str, Any] | None = None

    @classmethod
    def start(cls) -> StreamEvent:
        return cls(type=StreamEventType.STREAM_START)

    @classmethod
    def text(cls, delta: str) -> StreamEvent:
        return cls(type=StreamEventType.TEXT_DELTA, delta=delta)

    @classmethod
    def finish(cls, reason: str = "stop", usage: dict[str, int] | None = None) -> StreamEvent:
        return cls(type=StreamEventType.FINISH, finish_reason=reason, usage=usage)

    @classmethod
    def failure(cls, error: Exception) -> StreamEvent:
        return cls(type=StreamEventType.ERROR, error=error)


@runtime_checkable
class StreamTransport(Protocol):
    """Protocol every LLM transport must satisfy.

    ``stream`` yields events as they arrive. A failure is reported either as
    an ERROR event or by raising from the iterator.
    """

    @property
    def name(self) -> str: ...

    def stream(self, request: PlanningRequest) -> Iterator[StreamEvent]: ...

    def close(self) -> None: ...
