"""Cooperative single-threaded timers. The owner calls run_due() from its main loop."""

import heapq
import itertools
import time


def monotonic_ms():
    return time.monotonic() * 1000.0


class ManualClock:
    """Clock that only moves when told to. Used headless and in tests."""

    def __init__(self, start=0.0):
        self.now = float(start)

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms
        return self.now


class TimerHandle:
    __slots__ = ("deadline", "callback", "cancelled")

    def __init__(self, deadline, callback):
        self.deadline  = deadline
        self.callback  = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class Scheduler:
    def __init__(self, clock=None):
        self.clock  = clock or monotonic_ms
        self._queue = []
        self._seq   = itertools.count()

    @property
    def pending(self):
        return sum(1 for _, _, h in self._queue if not h.cancelled)

    def call_later(self, delay_ms, callback) -> TimerHandle:
        return self.call_at(self.clock() + max(0.0, delay_ms), callback)

    def call_at(self, deadline, callback) -> TimerHandle:
        handle = TimerHandle(deadline, callback)
        heapq.heappush(self._queue, (deadline, next(self._seq), handle))
        return handle

    def run_due(self) -> int:
        """Run every due callback in deadline order; returns how many ran."""
        ran = 0
        while self._queue:
            deadline, _, handle = self._queue[0]
            if handle.cancelled:
                heapq.heappop(self._queue)
                continue
            if deadline > self.clock():
                break
            heapq.heappop(self._queue)
            handle.cancelled = True
            handle.callback()
            ran += 1
        return ran
