"""Session, context and step data model."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class SessionState(Enum):
    IDLE = "idle"
    PLANNING = "planning"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (SessionState.COMPLETED, SessionState.CANCELLED, SessionState.FAILED)


UNTITLED = "untitled"


@dataclass(frozen=True)
class Artifact:
    """The artifact the host currently has focused (e.g. an open editor buffer).

    With nothing focused the host passes an empty artifact named ``UNTITLED``.
    """

    identifier: str
    content: str = ""
    handle: Any = None


@dataclass(frozen=True)
class ContextEntry:
    """One piece of task context.

    ``handle`` is set for an open editable artifact and ``None`` for a
    read-only file snapshot.
    """

    content: str
    handle: Any = None

    @property
    def is_snapshot(self) -> bool:
        return self.handle is None


@dataclass(frozen=True)
class Step:
    """One unit of the parsed plan.

    ``file_edits`` and ``terminal_commands`` are reserved; the parser always
    leaves them empty and the executor advances on the description alone.
    """

    description: str
    file_edits: tuple[Any, ...] = ()
    terminal_commands: tuple[Any, ...] = ()


@dataclass
class AgentSession:
    """Mutable record tracking one task from request to completion.

    Owned by the orchestrator run that created it. ``current_step`` is a
    1-based cursor into ``steps``.
    """

    task: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    active: bool = True
    state: SessionState = SessionState.IDLE
    context: dict[str, ContextEntry] = field(default_factory=dict)
    steps: list[Step] = field(default_factory=list)
    current_step: int = 1
    response_text: str = ""
    estimated_tokens: float = 0.0

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "task" and "task" in self.__dict__:
            raise AttributeError("task is immutable once set")
        super().__setattr__(name, value)

    @property
    def current(self) -> Step | None:
        """The step the cursor points at, or None past the end."""
        if 1 <= self.current_step <= len(self.steps):
            return self.steps[self.current_step - 1]
        return None

    @property
    def exhausted(self) -> bool:
        return self.current_step > len(self.steps)
