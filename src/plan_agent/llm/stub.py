"""In-memory transport for testing."""
from __future__ import annotations

from collections.abc import Iterator

from plan_agent.llm.types import PlanningRequest, StreamEvent


class StubTransport:
    """Test stub that replays predefined event sequences.

    Each ``stream`` call replays the next sequence, cycling the last one when
    exhausted. ``raise_error`` makes the iterator raise after replaying its
    events, as a dropped connection would.
    """

    def __init__(
        self,
        stream_events: list[list[StreamEvent]] | None = None,
        raise_error: Exception | None = None,
    ) -> None:
        self._stream_events = stream_events or [[StreamEvent.start(), StreamEvent.finish()]]
        self._raise_error = raise_error
        self._index = 0
        self.requests: list[PlanningRequest] = []
        self.closed = False

    @classmethod
    def from_text(cls, *chunks: str) -> StubTransport:
        """Build a stub streaming ``chunks`` as text deltas, then finishing."""
        events = [StreamEvent.start()]
        events.extend(StreamEvent.text(chunk) for chunk in chunks)
        events.append(StreamEvent.finish())
        return cls(stream_events=[events])

    @classmethod
    def failing(cls, error: Exception) -> StubTransport:
        """Build a stub whose stream reports ``error`` as an ERROR event."""
        return cls(stream_events=[[StreamEvent.start(), StreamEvent.failure(error)]])

    @property
    def name(self) -> str:
        return "stub"

    def stream(self, request: PlanningRequest) -> Iterator[StreamEvent]:
        self.requests.append(request)
        if self._index < len(self._stream_events):
            events = self._stream_events[self._index]
            self._index += 1
        else:
            events = self._stream_events[-1]
        yield from events
        if self._raise_error is not None:
            raise self._raise_error

    def close(self) -> None:
        self.closed = True
