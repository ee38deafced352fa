"""Step executor: advances through a confirmed plan one step per tick."""

from __future__ import annotations

import logging
from typing import Callable

from plan_agent.events import EventEmitter, StepStartEvent
from plan_agent.models import AgentSession, SessionState
from plan_agent.scheduler import CancellationToken, Scheduler

logger = logging.getLogger(__name__)

COMPLETED_LOG = "Task completed!"
COMPLETED_RESULT = "Task completed successfully."

FinishCallback = Callable[[SessionState, str | None, str | None], None]


class StepExecutor:
    """Runs the ``Idle -> Running -> Completed`` part of the session.

    Each :meth:`advance` either finishes the session or logs the current
    step, moves the cursor and schedules the next advance after
    ``step_delay_ms``. Steps therefore run strictly one after another.

    Cancellation is deferred: clearing ``session.active`` or cancelling the
    token is noticed at the next advance, which reports normal completion.
    """

    def __init__(
        self,
        session: AgentSession,
        scheduler: Scheduler,
        on_log: Callable[[str], None],
        on_finish: FinishCallback,
        *,
        step_delay_ms: int = 1000,
        token: CancellationToken | None = None,
        event_emitter: EventEmitter | None = None,
    ) -> None:
        self.session = session
        self.scheduler = scheduler
        self.step_delay_ms = step_delay_ms
        self.token = token or CancellationToken()
        self.event_emitter = event_emitter or EventEmitter()
        self._on_log = on_log
        self._on_finish = on_finish

    def start(self) -> None:
        self.session.state = SessionState.RUNNING
        self.advance()

    def advance(self) -> None:
        session = self.session
        if session.state.is_terminal:
            return

        if not session.active or self.token.cancelled or session.exhausted:
            session.active = False
            try:
                self._on_log(COMPLETED_LOG)
            except Exception as exc:
                logger.exception("Completion log failed")
                self._on_finish(SessionState.FAILED, None, f"Agent step failed: {exc}")
                return
            self._on_finish(SessionState.COMPLETED, COMPLETED_RESULT, None)
            return

        index = session.current_step
        step = session.steps[index - 1]
        try:
            self._on_log(f"Executing step {index}: {step.description}")
            self.event_emitter.emit(StepStartEvent(
                session_id=session.id, index=index, description=step.description,
            ))
        except Exception as exc:
            logger.exception("Step %d failed", index)
            session.current_step += 1
            session.active = False
            self._on_finish(SessionState.FAILED, None, f"Agent step failed: {exc}")
            return

        session.current_step += 1
        self.scheduler.call_later(self.step_delay_ms, self.advance)
