"""Confirmation gate and plan presenters.

A presenter shows the plan to the user and calls exactly one of the two
callbacks it is handed. The gate wraps those callbacks so that only the
first decision counts and the decision runs on the agent's scheduler.
"""

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Protocol

import click

from plan_agent.scheduler import Scheduler

logger = logging.getLogger(__name__)

Callback = Callable[[], None]

PLAN_TITLE = "Agent Plan"


class Decision(Enum):
    CONFIRM = "confirm"
    CANCEL = "cancel"


class PlanPresenter(Protocol):
    """Protocol for objects that show a plan and report a yes/no decision."""

    def present(self, title: str, body: str, on_confirm: Callback, on_cancel: Callback) -> None: ...


class ConfirmationGate:
    """The single authorization checkpoint before any step runs.

    Routes the presenter's decision and nothing else: session changes happen
    in the callbacks. A second or late decision is ignored.
    """

    def __init__(self, presenter: PlanPresenter, scheduler: Scheduler | None = None) -> None:
        self._presenter = presenter
        self._scheduler = scheduler

    def present(self, title: str, body: str, on_confirm: Callback, on_cancel: Callback) -> None:
        lock = threading.Lock()
        decided: list[Decision] = []

        def decide(decision: Decision) -> None:
            with lock:
                if decided:
                    logger.warning(
                        "Ignoring plan decision %s; already decided %s",
                        decision.value, decided[0].value,
                    )
                    return
                decided.append(decision)
            callback = on_confirm if decision is Decision.CONFIRM else on_cancel
            if self._scheduler is not None:
                self._scheduler.call_soon(callback)
            else:
                callback()

        self._presenter.present(
            title,
            body,
            lambda: decide(Decision.CONFIRM),
            lambda: decide(Decision.CANCEL),
        )


# --- Presenters ---


class CallbackPresenter:
    """Presenter that delegates the decision to a callback.

    The callback receives the title and body and returns True to confirm.
    """

    def __init__(self, callback: Callable[[str, str], bool]) -> None:
        self._callback = callback

    def present(self, title: str, body: str, on_confirm: Callback, on_cancel: Callback) -> None:
        if self._callback(title, body):
            on_confirm()
        else:
            on_cancel()


class AutoApprovePresenter:
    """Presenter that confirms every plan without user interaction."""

    def present(self, title: str, body: str, on_confirm: Callback, on_cancel: Callback) -> None:
        on_confirm()


class AutoCancelPresenter:
    """Presenter that cancels every plan; useful for dry runs."""

    def present(self, title: str, body: str, on_confirm: Callback, on_cancel: Callback) -> None:
        on_cancel()


@dataclass
class PendingPlan:
    """A plan waiting for a decision from another thread."""

    title: str
    body: str
    on_confirm: Callback
    on_cancel: Callback

    def confirm(self) -> None:
        self.on_confirm()

    def cancel(self) -> None:
        self.on_cancel()


class QueuePresenter:
    """Presenter that hands plans to a UI thread through a thread-safe queue.

    The UI side takes a :class:`PendingPlan` with :meth:`pending` and calls
    ``confirm()`` or ``cancel()`` on it when the user decides.
    """

    def __init__(self, plan_queue: queue.Queue[PendingPlan] | None = None) -> None:
        self.plan_queue: queue.Queue[PendingPlan] = plan_queue or queue.Queue()

    def present(self, title: str, body: str, on_confirm: Callback, on_cancel: Callback) -> None:
        self.plan_queue.put(PendingPlan(title, body, on_confirm, on_cancel))

    def pending(self, timeout: float | None = None) -> PendingPlan | None:
        """Retrieve the next plan awaiting a decision, if any."""
        try:
            return self.plan_queue.get(timeout=timeout)
        except queue.Empty:
            return None


class ConsolePresenter:
    """Presenter that prints the plan and reads y / n / q from the terminal.

    End of input or Ctrl-C counts as cancel.
    """

    def present(self, title: str, body: str, on_confirm: Callback, on_cancel: Callback) -> None:
        click.echo(f"\n{'=' * 60}")
        click.echo(f"  {title}")
        click.echo(f"{'=' * 60}")
        click.echo(body)
        click.echo("")
        try:
            choice = click.prompt(
                "Press 'y' to confirm, 'n' or 'q' to cancel",
                type=click.Choice(["y", "n", "q"], case_sensitive=False),
                show_choices=False,
            )
        except click.Abort:
            choice = "q"
        if choice.lower() == "y":
            on_confirm()
        else:
            on_cancel()
