"""
Scheduling
==========
Timer facility consumed by the playback controller.

Classes:
    Scheduler: Protocol with ``schedule_after`` / ``cancel``.
    ManualScheduler: Deterministic clock advanced explicitly (tests, scripting).
    QtScheduler: Single-shot QTimers on the running Qt event loop.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import heapq
import itertools
import logging
from typing import Any, Callable, Protocol

from PySide6.QtCore import QTimer

logger = logging.getLogger(__name__)


class Scheduler(Protocol):
    def schedule_after(self, delay_ms: int, callback: Callable[[], None]) -> Any: ...
    def cancel(self, token: Any) -> None: ...


@dataclass(order=True)
class _ScheduledCall:
    due: int
    seq: int
    callback: Callable[[], None] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)


class ManualScheduler:
    """
    Scheduler driven by an explicit clock instead of wall time.

    Callbacks run only from ``advance`` / ``run_pending``, in due-time order
    (ties in scheduling order). Callbacks may schedule further calls.
    """

    def __init__(self) -> None:
        self.now: int = 0
        self._queue: list[_ScheduledCall] = []
        self._seq = itertools.count()

    def schedule_after(self, delay_ms: int, callback: Callable[[], None]) -> _ScheduledCall:
        call = _ScheduledCall(due=self.now + max(0, int(delay_ms)), seq=next(self._seq), callback=callback)
        heapq.heappush(self._queue, call)
        return call

    def cancel(self, token: _ScheduledCall) -> None:
        token.cancelled = True
        if token in self._queue:
            self._queue.remove(token)
            heapq.heapify(self._queue)

    @property
    def pending_count(self) -> int:
        return sum(1 for call in self._queue if not call.cancelled)

    def advance(self, ms: int) -> int:
        """Move the clock forward by ``ms`` and run everything that became due."""
        if ms < 0:
            raise ValueError(f"Cannot move the clock backwards (ms={ms}).")
        target = self.now + ms
        executed = 0
        while self._queue and self._queue[0].due <= target:
            call = heapq.heappop(self._queue)
            if call.cancelled:
                continue
            self.now = call.due
            call.callback()
            executed += 1
        self.now = target
        return executed

    def run_pending(self, max_calls: int = 100_000) -> int:
        """Run calls until the queue is empty, jumping the clock as needed."""
        executed = 0
        while executed < max_calls:
            live = [call for call in self._queue if not call.cancelled]
            if not live:
                break
            executed += self.advance(min(live).due - self.now)
        return executed


class QtScheduler:
    """
    Scheduler backed by single-shot QTimers.

    Requires a running Qt event loop (QCoreApplication or QApplication);
    callbacks run on the thread that owns the loop.
    """

    def __init__(self) -> None:
        # Keep references so Python does not collect active timers
        self._timers: set[QTimer] = set()

    def schedule_after(self, delay_ms: int, callback: Callable[[], None]) -> QTimer:
        timer = QTimer()
        timer.setSingleShot(True)
        timer.setInterval(max(0, int(delay_ms)))

        def on_timeout() -> None:
            self._timers.discard(timer)
            callback()

        timer.timeout.connect(on_timeout)
        self._timers.add(timer)
        timer.start()
        return timer

    def cancel(self, token: QTimer) -> None:
        token.stop()
        self._timers.discard(token)

    @property
    def pending_count(self) -> int:
        return sum(1 for timer in self._timers if timer.isActive())
