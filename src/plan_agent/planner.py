"""Planning request construction and streamed-response consumption."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from plan_agent.config import AgentConfig
from plan_agent.context import render_context
from plan_agent.errors import PlanningTransportError
from plan_agent.llm.types import PlanningRequest, StreamEvent, StreamEventType, StreamTransport
from plan_agent.models import ContextEntry

logger = logging.getLogger(__name__)

TOKENS_PER_WORD = 1.3

SYSTEM_PROMPT = """\
You are an expert planning assistant that helps plan and carry out complex coding tasks.
Your job is to analyze the requested task, understand the project's code and produce a detailed step-by-step plan.
Each step must be clear, concise and actionable. Be specific about which files to change and what code to change.
"""

_PROMPT_TEMPLATE = """\
I need your help planning and carrying out the following task: {task}

Break it down into concrete steps we can follow. For each step, provide:
1. A clear description of the step
2. Which files need to be modified or created
3. Whether any terminal command needs to be run
4. The exact code to write or change

Here is the relevant project context:

{context}

Format your answer as a numbered list of steps. Be specific and detailed.
"""


def build_planning_prompt(task: str, context: dict[str, ContextEntry]) -> str:
    """Embed the task description and every context entry, in mapping order."""
    return _PROMPT_TEMPLATE.format(task=task, context=render_context(context))


def build_planning_request(
    task: str,
    context: dict[str, ContextEntry],
    config: AgentConfig,
) -> PlanningRequest:
    """Build the streaming request. The planning call never offers tools."""
    return PlanningRequest(
        model=config.resolved_model,
        system=SYSTEM_PROMPT,
        prompt=build_planning_prompt(task, context),
        tools=(),
        max_tokens=config.max_tokens,
        temperature=config.temperature,
    )


def estimate_tokens(text: str) -> float:
    """Rough output size: whitespace-delimited words times 1.3. Not billing-accurate."""
    return len(text.split()) * TOKENS_PER_WORD


class PlanAccumulator:
    """Collects streamed text into the full planning response, up to ``max_chars``."""

    def __init__(self, max_chars: int = 200_000) -> None:
        self._max_chars = max_chars
        self._parts: list[str] = []
        self._size = 0
        self.estimated_tokens = 0.0
        self.started = False
        self.finished = False
        self.finish_reason: str | None = None

    def process(self, event: StreamEvent) -> str | None:
        """Apply one event; returns the appended text for a text delta.

        Raises:
            PlanningTransportError: the stream reported an error, or the
                response outgrew the size bound.
        """
        etype = event.type

        if etype == StreamEventType.STREAM_START:
            self.started = True

        elif etype == StreamEventType.TEXT_DELTA:
            if not event.delta:
                return None
            if self._size + len(event.delta) > self._max_chars:
                raise PlanningTransportError(
                    f"Planning response exceeded {self._max_chars} characters"
                )
            self._parts.append(event.delta)
            self._size += len(event.delta)
            self.estimated_tokens += estimate_tokens(event.delta)
            return event.delta

        elif etype == StreamEventType.ERROR:
            error = event.error
            message = str(error) if error is not None else "stream reported an error"
            raise PlanningTransportError(message, cause=error)

        elif etype == StreamEventType.FINISH:
            self.finished = True
            self.finish_reason = event.finish_reason

        return None

    @property
    def text(self) -> str:
        return "".join(self._parts)


class PlanStream:
    """Pull-based consumer over a transport's event iterator.

    Each :meth:`pump` pulls exactly one event, so a scheduler can yield
    between chunks. Any exception raised by the transport surfaces as
    :class:`PlanningTransportError`; nothing is retried.
    """

    def __init__(
        self,
        transport: StreamTransport,
        request: PlanningRequest,
        max_chars: int = 200_000,
    ) -> None:
        self._transport = transport
        self._request = request
        self._events: Iterator[StreamEvent] | None = None
        self.accumulator = PlanAccumulator(max_chars=max_chars)
        self.done = False

    def pump(self) -> str | None:
        """Consume the next event. Returns any text it carried.

        Sets :attr:`done` on FINISH or when the iterator is exhausted.
        """
        if self.done:
            return None
        try:
            if self._events is None:
                logger.debug("Opening planning stream: transport=%s model=%s",
                             self._transport.name, self._request.model)
                self._events = iter(self._transport.stream(self._request))
            event = next(self._events)
        except StopIteration:
            self.done = True
            return None
        except PlanningTransportError:
            self.done = True
            raise
        except Exception as exc:
            self.done = True
            raise PlanningTransportError(str(exc) or type(exc).__name__, cause=exc) from exc

        try:
            delta = self.accumulator.process(event)
        except PlanningTransportError:
            self.done = True
            self.close()
            raise
        if self.accumulator.finished:
            self.done = True
            self.close()
        return delta

    def consume(self) -> str:
        """Drain the whole stream and return the accumulated text."""
        while not self.done:
            self.pump()
        return self.accumulator.text

    def close(self) -> None:
        """Stop reading; releases the underlying HTTP stream if one is open."""
        close = getattr(self._events, "close", None)
        if close is not None:
            close()
