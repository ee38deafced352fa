"""The Orchestrator: from a task request to a confirmed, executed plan."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from plan_agent.config import AgentConfig
from plan_agent.context import collect_context
from plan_agent.errors import InvocationError, PlanningTransportError, SessionActiveError
from plan_agent.events import (
    ContextCollectedEvent,
    ErrorEvent,
    EventEmitter,
    PlanChunkEvent,
    PlanDecisionEvent,
    PlanReadyEvent,
    SessionEndEvent,
    SessionStartEvent,
)
from plan_agent.executor import StepExecutor
from plan_agent.files import FileReader, LocalFileReader
from plan_agent.gate import PLAN_TITLE, ConfirmationGate, PlanPresenter
from plan_agent.llm.types import StreamTransport
from plan_agent.models import UNTITLED, AgentSession, Artifact, SessionState
from plan_agent.parser import format_plan, parse_steps
from plan_agent.planner import PlanStream, build_planning_request
from plan_agent.scheduler import CancellationToken, TaskQueue

logger = logging.getLogger(__name__)

LogCallback = Callable[[str], None]
CompleteCallback = Callable[[str | None, str | None], None]

CANCELLED_RESULT = "Plan cancelled by the user."

_END_REASONS = {
    SessionState.COMPLETED: "completed",
    SessionState.CANCELLED: "cancelled",
    SessionState.FAILED: "failed",
}


def _untitled() -> Artifact:
    return Artifact(identifier=UNTITLED)


@dataclass
class _Run:
    """Everything one invocation owns. Callbacks hold their run, never the orchestrator's latest."""

    session: AgentSession
    file_paths: list[str]
    on_log: LogCallback
    on_complete: CompleteCallback
    token: CancellationToken = field(default_factory=CancellationToken)
    stream: PlanStream | None = None
    finished: bool = False


class Orchestrator:
    """Drives one task at a time through context, planning, confirmation and steps.

    All work runs as tasks on ``scheduler``; the host drives it (see
    :meth:`wait`). Starting a task while another is still in progress is
    rejected. The completion callback fires exactly once per task.
    """

    def __init__(
        self,
        transport: StreamTransport,
        presenter: PlanPresenter,
        *,
        reader: FileReader | None = None,
        focus: Callable[[], Artifact] | None = None,
        scheduler: TaskQueue | None = None,
        config: AgentConfig | None = None,
        event_emitter: EventEmitter | None = None,
    ) -> None:
        self.transport = transport
        self.reader = reader or LocalFileReader()
        self.focus = focus or _untitled
        self.scheduler = scheduler or TaskQueue()
        self.config = config or AgentConfig()
        self.event_emitter = event_emitter or EventEmitter()
        self.gate = ConfirmationGate(presenter, scheduler=self.scheduler)
        self._run: _Run | None = None

    # --- Public API ---

    @property
    def session(self) -> AgentSession | None:
        """The most recent session, finished or not."""
        return self._run.session if self._run else None

    @property
    def busy(self) -> bool:
        return self._run is not None and not self._run.finished

    def run(
        self,
        prompt: str,
        file_paths: list[str] | None = None,
        on_log: LogCallback | None = None,
        on_complete: CompleteCallback | None = None,
    ) -> tuple[bool, str | None]:
        """Accept a task. Returns ``(accepted, rejection_reason)``.

        Rejected when ``on_complete`` is missing or a task is in progress.
        """
        try:
            self.start(prompt, file_paths, on_log=on_log, on_complete=on_complete)
        except (InvocationError, SessionActiveError) as exc:
            return False, str(exc)
        return True, None

    def start(
        self,
        prompt: str,
        file_paths: list[str] | None = None,
        *,
        on_log: LogCallback | None = None,
        on_complete: CompleteCallback | None = None,
    ) -> AgentSession:
        """Like :meth:`run` but raises on rejection and returns the new session.

        Raises:
            InvocationError: ``on_complete`` was not supplied.
            SessionActiveError: a previous task has not finished.
        """
        if on_complete is None:
            raise InvocationError("on_complete not provided")
        if self.busy:
            raise SessionActiveError("session already active")

        run = _Run(
            session=AgentSession(task=prompt),
            file_paths=list(file_paths or []),
            on_log=on_log or (lambda _line: None),
            on_complete=on_complete,
        )
        self._run = run
        self._schedule(run, "planning", lambda: self._begin(run))
        return run.session

    def cancel(self) -> bool:
        """Request cancellation of the task in progress.

        Takes effect at the next iteration boundary. Returns False when
        there is nothing to cancel.
        """
        run = self._run
        if run is None or run.finished:
            return False
        run.session.active = False
        run.token.cancel()
        if run.session.state is SessionState.AWAITING_CONFIRMATION:
            self._schedule(run, "cancellation", lambda: self._cancel_pending(run))
        return True

    def wait(self, timeout: float | None = None) -> AgentSession | None:
        """Drive the scheduler until the current task finishes."""
        self.scheduler.run(until=lambda: not self.busy, timeout=timeout)
        return self.session

    # --- Pipeline stages ---

    def _schedule(self, run: _Run, stage: str, task: Callable[[], None]) -> None:
        self.scheduler.call_soon(lambda: self._guard(run, stage, task))

    def _guard(self, run: _Run, stage: str, task: Callable[[], None]) -> None:
        """Run one pipeline task. An exception escaping it fails the session."""
        try:
            task()
        except Exception as exc:
            logger.exception("Session %s: %s stage raised", run.session.id, stage)
            if run.finished:
                return
            if run.stream is not None:
                run.stream.close()
            self._fail(run, f"Agent {stage} failed: {exc}")

    def _begin(self, run: _Run) -> None:
        session = run.session
        if run.token.cancelled:
            self._finish(run, SessionState.CANCELLED, CANCELLED_RESULT, None)
            return

        self._log(run, f"Starting agent for task: {session.task}")
        self.event_emitter.emit(SessionStartEvent(session_id=session.id, task=session.task))

        self._log(run, "Collecting project context...")
        session.context = collect_context(self.focus(), run.file_paths, self.reader)
        self.event_emitter.emit(ContextCollectedEvent(
            session_id=session.id, identifiers=tuple(session.context),
        ))

        self._log(run, "Planning steps for the task...")
        session.state = SessionState.PLANNING
        request = build_planning_request(session.task, session.context, self.config)
        stream = PlanStream(self.transport, request, max_chars=self.config.max_plan_chars)
        run.stream = stream
        self._schedule(run, "planning", lambda: self._pump(run, stream))

    def _pump(self, run: _Run, stream: PlanStream) -> None:
        if run.token.cancelled:
            stream.close()
            self._finish(run, SessionState.CANCELLED, CANCELLED_RESULT, None)
            return

        try:
            delta = stream.pump()
        except PlanningTransportError as exc:
            error = f"Agent planning failed: {exc}"
            self._log(run, error)
            self._fail(run, error)
            return

        if delta:
            run.session.estimated_tokens = stream.accumulator.estimated_tokens
            self.event_emitter.emit(PlanChunkEvent(session_id=run.session.id, text=delta))

        if stream.done:
            self._plan_ready(run, stream)
        else:
            self._schedule(run, "planning", lambda: self._pump(run, stream))

    def _plan_ready(self, run: _Run, stream: PlanStream) -> None:
        session = run.session
        text = stream.accumulator.text
        session.response_text = text
        session.steps = parse_steps(text)
        logger.info(
            "Plan ready: %d step(s), ~%d tokens",
            len(session.steps), int(session.estimated_tokens),
        )
        self.event_emitter.emit(PlanReadyEvent(
            session_id=session.id,
            step_count=len(session.steps),
            estimated_tokens=session.estimated_tokens,
        ))

        session.state = SessionState.AWAITING_CONFIRMATION
        try:
            self.gate.present(
                PLAN_TITLE,
                format_plan(session.task, text),
                lambda: self._guard(run, "step", lambda: self._confirmed(run)),
                lambda: self._guard(run, "cancellation", lambda: self._cancelled(run)),
            )
        except Exception as exc:
            logger.exception("Plan presenter failed")
            error = f"Agent confirmation failed: {exc}"
            self._log(run, error)
            self._fail(run, error)

    def _confirmed(self, run: _Run) -> None:
        if run.finished:
            return
        self._log(run, "Plan confirmed, executing...")
        self.event_emitter.emit(PlanDecisionEvent(session_id=run.session.id, confirmed=True))
        executor = StepExecutor(
            run.session,
            self.scheduler,
            lambda line: self._log(run, line),
            lambda state, result, error: self._finish(run, state, result, error),
            step_delay_ms=self.config.step_delay_ms,
            token=run.token,
            event_emitter=self.event_emitter,
        )
        executor.start()

    def _cancelled(self, run: _Run) -> None:
        if run.finished:
            return
        run.session.active = False
        self._log(run, CANCELLED_RESULT)
        self.event_emitter.emit(PlanDecisionEvent(session_id=run.session.id, confirmed=False))
        self._finish(run, SessionState.CANCELLED, CANCELLED_RESULT, None)

    def _cancel_pending(self, run: _Run) -> None:
        if run.finished or run.session.state is not SessionState.AWAITING_CONFIRMATION:
            return
        self._log(run, CANCELLED_RESULT)
        self._finish(run, SessionState.CANCELLED, CANCELLED_RESULT, None)

    # --- Helpers ---

    def _log(self, run: _Run, line: str) -> None:
        logger.info("[%s] %s", run.session.id[:8], line)
        run.on_log(line)

    def _fail(self, run: _Run, error: str) -> None:
        try:
            self.event_emitter.emit(ErrorEvent(session_id=run.session.id, error=error))
        except Exception:
            logger.exception("Error listener raised for session %s", run.session.id)
        self._finish(run, SessionState.FAILED, None, error)

    def _finish(
        self,
        run: _Run,
        state: SessionState,
        result: str | None,
        error: str | None,
    ) -> None:
        """The single terminal transition: marks the session done and completes once."""
        if run.finished:
            logger.warning("Session %s already finished; ignoring %s", run.session.id, state.value)
            return
        run.finished = True
        run.session.active = False
        run.session.state = state
        try:
            self.event_emitter.emit(SessionEndEvent(session_id=run.session.id, reason=_END_REASONS[state]))
        except Exception:
            logger.exception("Session end listener raised for session %s", run.session.id)
        try:
            run.on_complete(result, error)
        except Exception:
            logger.exception("Completion callback raised for session %s", run.session.id)
