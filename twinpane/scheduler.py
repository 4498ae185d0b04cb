"""Cooperative deferred-task scheduling for the single-threaded UI loop.

Tasks either run at the end of the current frame or once a deadline passes.
Nothing runs on its own: the event loop calls ``end_frame``/``run_due`` and
uses ``next_deadline`` to size its input timeout. Every scheduled task
returns a handle whose ``cancel`` turns it into a no-op.
"""

from __future__ import annotations

import heapq
import itertools
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass
class TaskHandle:
    """Cancellable reference to one pending task."""

    callback: Callable[[], None]
    cancelled: bool = False
    done: bool = False

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.done)

    def _run(self) -> None:
        if not self.pending:
            return
        self.done = True
        self.callback()


@dataclass
class FrameScheduler:
    """Frame callbacks plus monotonic-clock timers."""

    monotonic: Callable[[], float] = time.monotonic
    _frame_tasks: list[TaskHandle] = field(default_factory=list)
    _timers: list[tuple[float, int, TaskHandle]] = field(default_factory=list)
    _sequence: itertools.count = field(default_factory=itertools.count)

    def after_frame(self, callback: Callable[[], None]) -> TaskHandle:
        """Run ``callback`` once the current frame has been drawn."""
        handle = TaskHandle(callback)
        self._frame_tasks.append(handle)
        return handle

    def call_later(self, delay: float, callback: Callable[[], None]) -> TaskHandle:
        """Run ``callback`` on the first poll at or after ``delay`` seconds from now."""
        handle = TaskHandle(callback)
        deadline = self.monotonic() + max(0.0, delay)
        heapq.heappush(self._timers, (deadline, next(self._sequence), handle))
        return handle

    def end_frame(self) -> int:
        """Run frame callbacks queued so far, then any due timers.

        Callbacks queued while this frame's callbacks run wait for the next
        frame. Returns how many callbacks ran.
        """
        tasks, self._frame_tasks = self._frame_tasks, []
        ran = 0
        for handle in tasks:
            if handle.pending:
                handle._run()
                ran += 1
        return ran + self.run_due()

    def run_due(self) -> int:
        """Run timers whose deadline has passed, in deadline order."""
        now = self.monotonic()
        ran = 0
        while self._timers and self._timers[0][0] <= now:
            _deadline, _seq, handle = heapq.heappop(self._timers)
            if handle.pending:
                handle._run()
                ran += 1
        return ran

    def next_deadline(self) -> float | None:
        """Seconds until the next pending task; ``0.0`` when frame tasks wait."""
        if any(handle.pending for handle in self._frame_tasks):
            return 0.0
        while self._timers and not self._timers[0][2].pending:
            heapq.heappop(self._timers)
        if not self._timers:
            return None
        return max(0.0, self._timers[0][0] - self.monotonic())

    def cancel_all(self) -> None:
        for handle in self._frame_tasks:
            handle.cancel()
        for _deadline, _seq, handle in self._timers:
            handle.cancel()
        self._frame_tasks.clear()
        self._timers.clear()
        logger.debug("cancelled all pending tasks")
