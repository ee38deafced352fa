"""Cooperative scheduling: a timer-ordered task queue and a cancellation token.

All session work runs as short tasks on one driving loop. Each task runs to
completion before the next one starts; pauses are scheduled future tasks,
never blocking waits inside a task. Other threads (e.g. a UI answering the
confirmation prompt) may post tasks; the loop picks them up in order.
"""

from __future__ import annotations

import heapq
import itertools
import threading
import time
from typing import Callable, Protocol

Task = Callable[[], None]


class Scheduler(Protocol):
    """Anything that can run a callback now-ish or after a delay."""

    def call_soon(self, callback: Task) -> None: ...
    def call_later(self, delay_ms: int, callback: Task) -> None: ...


class CancellationToken:
    """An observable flag checked at each iteration boundary."""

    def __init__(self) -> None:
        self._event = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()


class TaskQueue:
    """Thread-safe queue of callbacks ordered by due time, then submission order.

    Nothing runs until a host drives the loop with :meth:`run`.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._cond = threading.Condition()
        self._heap: list[tuple[float, int, Task]] = []
        self._seq = itertools.count()

    def call_soon(self, callback: Task) -> None:
        self.call_later(0, callback)

    def call_later(self, delay_ms: int, callback: Task) -> None:
        due = self._clock() + max(delay_ms, 0) / 1000.0
        with self._cond:
            heapq.heappush(self._heap, (due, next(self._seq), callback))
            self._cond.notify()

    def __len__(self) -> int:
        with self._cond:
            return len(self._heap)

    def run(self, until: Callable[[], bool] | None = None, timeout: float | None = None) -> None:
        """Drive the loop.

        Without ``until``, runs until the queue is empty. With ``until``, runs
        until it returns True, waiting for tasks posted from other threads in
        the meantime.

        Raises:
            TimeoutError: ``timeout`` seconds elapsed first.
        """
        deadline = None if timeout is None else self._clock() + timeout
        while True:
            if until is not None and until():
                return
            with self._cond:
                now = self._clock()
                if deadline is not None and now >= deadline:
                    raise TimeoutError(f"Task queue did not finish within {timeout}s")
                remaining = None if deadline is None else deadline - now

                if not self._heap:
                    if until is None:
                        return
                    self._cond.wait(remaining)
                    continue

                due = self._heap[0][0]
                if due > now:
                    wait = due - now if remaining is None else min(due - now, remaining)
                    self._cond.wait(wait)
                    continue

                _, _, callback = heapq.heappop(self._heap)

            callback()
