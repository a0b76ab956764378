"""
Tick schedulers for the reveal engine

A scheduler produces a repeating tick at a fixed cadence until the returned
handle is cancelled. Two implementations are provided:

- AsyncioScheduler: chains ``loop.call_later`` on the running event loop
- VirtualScheduler: a manual clock, advanced explicitly (tests, replays)

Usage:
    handle = scheduler.repeat(15, on_tick)
    ...
    handle.cancel()
"""

import asyncio
from typing import Callable, List, Optional, Protocol


TickCallback = Callable[[], None]


class TimerHandle(Protocol):
    """Handle to a repeating timer"""

    def cancel(self) -> None:
        ...

    @property
    def cancelled(self) -> bool:
        ...


class Scheduler(Protocol):
    """Anything that can run a callback every ``interval_ms`` until cancelled"""

    def repeat(self, interval_ms: int, callback: TickCallback) -> TimerHandle:
        ...


class AsyncioTimer:
    """Repeating timer built from chained ``call_later`` handles"""

    def __init__(self, loop: asyncio.AbstractEventLoop, interval_ms: int, callback: TickCallback):
        self._loop = loop
        self._interval = max(interval_ms, 0) / 1000.0
        self._callback = callback
        self._cancelled = False
        self._handle: Optional[asyncio.TimerHandle] = loop.call_later(self._interval, self._fire)

    def _fire(self) -> None:
        if self._cancelled:
            return
        # Re-arm before running the callback so a cancel() from inside it sticks
        self._handle = self._loop.call_later(self._interval, self._fire)
        self._callback()

    def cancel(self) -> None:
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class AsyncioScheduler:
    """
    Scheduler driven by an asyncio event loop

    Args:
        loop: Loop to schedule on; defaults to the loop running when
              repeat() is called
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self.loop = loop

    def repeat(self, interval_ms: int, callback: TickCallback) -> AsyncioTimer:
        loop = self.loop or asyncio.get_running_loop()
        return AsyncioTimer(loop, interval_ms, callback)


class VirtualTimer:
    """Timer registered on a VirtualScheduler"""

    def __init__(self, scheduler: "VirtualScheduler", interval_ms: int, callback: TickCallback):
        self.scheduler = scheduler
        # A zero interval would never let virtual time move forward
        self.interval_ms = max(interval_ms, 1)
        self.callback = callback
        self.due_ms = scheduler.now_ms + self.interval_ms
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class VirtualScheduler:
    """
    Manually clocked scheduler

    Nothing fires until advance() or fire() is called; ties between timers
    due at the same instant fire in registration order.

    Example:
        scheduler = VirtualScheduler()
        engine = RevealEngine("Hello", scheduler=scheduler)
        engine.start()
        scheduler.fire(3)           # three ticks
        scheduler.advance(1000)     # one virtual second
    """

    def __init__(self) -> None:
        self.now_ms = 0
        self.timers: List[VirtualTimer] = []
        self.ticks_fired = 0

    def repeat(self, interval_ms: int, callback: TickCallback) -> VirtualTimer:
        timer = VirtualTimer(self, interval_ms, callback)
        self.timers.append(timer)
        return timer

    @property
    def active(self) -> List[VirtualTimer]:
        """Timers that have not been cancelled"""
        self.timers = [timer for timer in self.timers if not timer.cancelled]
        return list(self.timers)

    def timer_next(self) -> Optional[VirtualTimer]:
        """The active timer due soonest, None when nothing is scheduled"""
        pending = self.active
        if not pending:
            return None
        return min(pending, key=lambda timer: timer.due_ms)

    def timer_fire(self, timer: VirtualTimer) -> None:
        self.now_ms = max(self.now_ms, timer.due_ms)
        timer.due_ms += timer.interval_ms
        self.ticks_fired += 1
        timer.callback()

    def advance(self, ms: int) -> int:
        """
        Move the clock forward, firing every tick due on the way

        Returns:
            Number of ticks fired
        """
        target = self.now_ms + ms
        fired = 0
        while True:
            timer = self.timer_next()
            if timer is None or timer.due_ms > target:
                break
            self.timer_fire(timer)
            fired += 1
        self.now_ms = target
        return fired

    def fire(self, count: int = 1) -> int:
        """
        Fire the next ``count`` ticks, jumping the clock as needed

        Returns:
            Number of ticks actually fired (fewer when timers run out)
        """
        fired = 0
        while fired < count:
            timer = self.timer_next()
            if timer is None:
                break
            self.timer_fire(timer)
            fired += 1
        return fired

    def run_until_idle(self, limit: int = 100_000) -> int:
        """Fire ticks until no timer is active (bounded by ``limit``)"""
        return self.fire(limit)
