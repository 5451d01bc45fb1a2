"""
Purpose: The single-threaded "heartbeat" every component runs on.
What it does:
Wraps the stdlib `sched` queue with an injectable clock so timer ticks and
replayed location fixes are ordinary events on one queue:

- call_later(delay, fn)   one-shot event
- call_every(interval, fn) recurring timer, first firing after one interval
- run(until)              drain events up to a point in time

With SystemClock it really waits; with ManualClock time jumps straight to the
next event, which is what simulations and tests use.
"""

from __future__ import annotations

import logging
import sched
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class SystemClock:
    def now(self) -> float:
        return time.monotonic()

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)


class ManualClock:
    """A clock that only moves when something sleeps on it."""

    def __init__(self, start: float = 0.0):
        self._now = float(start)

    def now(self) -> float:
        return self._now

    def sleep(self, seconds: float) -> None:
        if seconds > 0:
            self._now += seconds


class TimerHandle:
    """
    Returned by Scheduler.call_later / call_every.
    cancel() is idempotent and safe to call from inside the callback itself.
    """
    def __init__(self, scheduler: Scheduler):
        self._scheduler = scheduler
        self._event: Optional[sched.Event] = None
        self.cancelled = False

    def cancel(self) -> None:
        if self.cancelled:
            return
        self.cancelled = True
        if self._event is not None:
            self._scheduler._discard(self._event)
            self._event = None


class Scheduler:
    def __init__(self, clock=None):
        self.clock = clock or SystemClock()
        self._queue = sched.scheduler(self.clock.now, self.clock.sleep)

    def now(self) -> float:
        return self.clock.now()

    def call_later(self, delay: float, fn: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(self)

        def fire():
            handle._event = None
            if not handle.cancelled:
                fn()

        handle._event = self._queue.enter(max(0.0, delay), 0, fire)
        return handle

    def call_every(self, interval: float, fn: Callable[[], None]) -> TimerHandle:
        if interval <= 0:
            raise ValueError("interval must be > 0")
        handle = TimerHandle(self)

        def fire():
            handle._event = None
            if handle.cancelled:
                return
            # re-arm first so a callback that cancels the handle also stops the re-arm
            handle._event = self._queue.enter(interval, 0, fire)
            fn()

        handle._event = self._queue.enter(interval, 0, fire)
        return handle

    def pending(self) -> int:
        return len(self._queue.queue)

    def run(self, until: Optional[float] = None) -> None:
        """
        Run due events in time order.

        until=None drains the queue completely (never returns while a
        call_every timer is live). With `until`, events scheduled after it stay
        queued and the clock is advanced to `until`.
        """
        while not self._queue.empty():
            next_at = self._queue.queue[0].time
            if until is not None and next_at > until:
                break
            delay = next_at - self.clock.now()
            if delay > 0:
                self.clock.sleep(delay)
            self._queue.run(blocking=False)

        if until is not None:
            remaining = until - self.clock.now()
            if remaining > 0:
                self.clock.sleep(remaining)

    def _discard(self, event: sched.Event) -> None:
        try:
            self._queue.cancel(event)
        except ValueError:
            # already fired and removed from the queue
            logger.debug("timer event already gone from queue")
