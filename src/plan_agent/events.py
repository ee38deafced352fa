"""Event system for the plan agent."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable


# --- Event dataclasses ---


@dataclass(frozen=True)
class SessionStartEvent:
    session_id: str
    task: str


@dataclass(frozen=True)
class SessionEndEvent:
    session_id: str
    reason: str = "completed"  # "completed", "cancelled", "failed"


@dataclass(frozen=True)
class ContextCollectedEvent:
    session_id: str
    identifiers: tuple[str, ...] = ()


@dataclass(frozen=True)
class PlanChunkEvent:
    session_id: str
    text: str


@dataclass(frozen=True)
class PlanReadyEvent:
    session_id: str
    step_count: int
    estimated_tokens: float = 0.0


@dataclass(frozen=True)
class PlanDecisionEvent:
    session_id: str
    confirmed: bool


@dataclass(frozen=True)
class StepStartEvent:
    session_id: str
    index: int
    description: str


@dataclass(frozen=True)
class ErrorEvent:
    session_id: str
    error: str


class EventEmitter:
    """Synchronous callback-based event emitter.

    Events are dispatched synchronously in registration order.
    """

    def __init__(self) -> None:
        self._listeners: dict[type, list[Callable]] = {}
        self._global_listeners: list[Callable] = []

    def subscribe(self, event_type: type, callback: Callable) -> None:
        """Register a callback for a specific event type."""
        self._listeners.setdefault(event_type, []).append(callback)

    def on_all(self, callback: Callable) -> None:
        """Register a callback that receives every event."""
        self._global_listeners.append(callback)

    def emit(self, event: Any) -> None:
        """Dispatch event to all matching listeners."""
        for cb in self._global_listeners:
            cb(event)
        for cb in self._listeners.get(type(event), []):
            cb(event)
