"""
Reveal engine - streams a growing prefix of a source document

The engine owns a (state, revealed_length) pair over a fixed source string
and advances it on a scheduler tick by a random chunk of characters, the way
a model or a person types. It knows nothing about markdown.

State machine:
    IDLE --start()--> STREAMING --pause()--> PAUSED --resume()--> STREAMING
    STREAMING --(end of source reached on a tick)--> COMPLETE
    any --reset()--> IDLE
    any --complete()--> COMPLETE
    any --start()--> STREAMING (always from zero)

Every tick and every transition is pushed to subscribers as
``listener(prefix, state)``.

Example:
    engine = RevealEngine(source, scheduler=AsyncioScheduler())
    engine.subscribe(lambda prefix, state: print(len(prefix), state))
    engine.start()
"""

import random
from typing import Callable, List, Optional

from ..config import appsettings
from ..models.reveal import RevealState, RevealSnapshot
from .scheduler import Scheduler, TimerHandle, AsyncioScheduler
from .log import LOG


RevealListener = Callable[[str, RevealState], None]


class RevealEngine:
    """
    Timer-driven reveal state machine

    The engine is single-owner: all mutation happens in the public
    transition methods or in tick callbacks, both on the scheduler's thread.

    Attributes:
        state: Current RevealState
        revealed_length: Characters of the source revealed so far
        interval_ms: Tick cadence used by the next start()/resume()
        scheduler: Tick source
        rng: Random generator for chunk sizes
    """

    def __init__(
        self,
        source: str = "",
        interval_ms: Optional[int] = None,
        scheduler: Optional[Scheduler] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        """
        Initialize an idle engine over ``source``

        Args:
            source: Document to reveal
            interval_ms: Tick cadence; defaults to the configured default speed
            scheduler: Tick source; defaults to an AsyncioScheduler, which
                       needs a running event loop by the time start() is called
            rng: Random generator for chunk sizes (seed it for reproducible runs)
        """
        self._source = source
        if interval_ms is None:
            interval_ms = appsettings.interval_resolve(appsettings.default_speed)
        self.interval_ms = interval_ms
        self.scheduler: Scheduler = scheduler or AsyncioScheduler()
        self.rng = rng or random.Random()
        self.chunk_min = appsettings.chunk_min
        self.chunk_max = max(appsettings.chunk_max, appsettings.chunk_min)

        self.state = RevealState.IDLE
        self.revealed_length = 0
        self._timer: Optional[TimerHandle] = None
        self._generation = 0
        self._listeners: List[RevealListener] = []

    # ------------------------------------------------------------------
    # Source and cadence
    # ------------------------------------------------------------------

    @property
    def source(self) -> str:
        return self._source

    @source.setter
    def source(self, value: str) -> None:
        """Replacing the document resets the engine"""
        if value == self._source:
            return
        self._source = value
        LOG(f"Source replaced ({len(value)} characters), resetting", level=2)
        self.reset()

    def speed_set(self, speed: str) -> None:
        """
        Switch to a named speed preset

        Takes effect on the next start() or resume().

        Raises:
            ValueError: If the preset name is unknown
        """
        self.interval_ms = appsettings.interval_resolve(speed)

    @property
    def prefix(self) -> str:
        """The revealed part of the source"""
        return self._source[:self.revealed_length]

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    def subscribe(self, listener: RevealListener) -> Callable[[], None]:
        """
        Register a listener for (prefix, state) updates

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit(self) -> None:
        prefix = self.prefix
        for listener in list(self._listeners):
            listener(prefix, self.state)

    def progress(self) -> float:
        """Revealed share of the source in percent, 0 for an empty source"""
        if not self._source:
            return 0.0
        return self.revealed_length / len(self._source) * 100

    def snapshot(self) -> RevealSnapshot:
        return RevealSnapshot(
            state=self.state,
            revealed_length=self.revealed_length,
            total_length=len(self._source),
            progress=self.progress(),
        )

    @property
    def is_streaming(self) -> bool:
        return self.state is RevealState.STREAMING

    @property
    def is_paused(self) -> bool:
        return self.state is RevealState.PAUSED

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Restart the reveal from zero, from any state"""
        self.schedule_cancel()
        self.revealed_length = 0
        self.state = RevealState.STREAMING
        LOG(f"Streaming {len(self._source)} characters every {self.interval_ms}ms", level=2)
        self.schedule_begin()
        self.emit()

    def pause(self) -> None:
        """Freeze the reveal; no-op unless streaming"""
        if self.state is not RevealState.STREAMING:
            return
        self.schedule_cancel()
        self.state = RevealState.PAUSED
        LOG(f"Paused at {self.revealed_length}/{len(self._source)}", level=2)
        self.emit()

    def resume(self) -> None:
        """Continue from the current position; no-op unless paused"""
        if self.state is not RevealState.PAUSED:
            return
        self.state = RevealState.STREAMING
        LOG(f"Resumed at {self.revealed_length}/{len(self._source)}", level=2)
        self.schedule_begin()
        self.emit()

    def reset(self) -> None:
        """Cancel any reveal and go back to an empty, idle engine"""
        self.schedule_cancel()
        self.revealed_length = 0
        self.state = RevealState.IDLE
        LOG("Reset", level=2)
        self.emit()

    def complete(self) -> None:
        """Skip to the end of the source, from any state"""
        self.schedule_cancel()
        self.revealed_length = len(self._source)
        self.state = RevealState.COMPLETE
        LOG("Completed", level=2)
        self.emit()

    # ------------------------------------------------------------------
    # Ticking
    # ------------------------------------------------------------------

    def chunk_draw(self) -> int:
        """Number of characters to reveal on the next tick"""
        return self.rng.randint(self.chunk_min, self.chunk_max)

    def schedule_begin(self) -> None:
        """Arm a fresh timer; ticks from any earlier timer become stale"""
        self._generation += 1
        generation = self._generation
        self._timer = self.scheduler.repeat(self.interval_ms, lambda: self.tick(generation))

    def schedule_cancel(self) -> None:
        """Cancel the current timer and invalidate any tick already in flight"""
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def tick(self, generation: int) -> None:
        """
        Advance the reveal by one chunk

        Ticks from a cancelled or superseded timer are ignored.
        """
        if generation != self._generation or self.state is not RevealState.STREAMING:
            LOG(f"Ignoring stale tick (generation {generation})", level=3)
            return

        total = len(self._source)
        self.revealed_length = min(self.revealed_length + self.chunk_draw(), total)
        LOG(f"Tick: {self.revealed_length}/{total}", level=3)

        if self.revealed_length >= total:
            self.schedule_cancel()
            self.state = RevealState.COMPLETE
            LOG("Reached end of source", level=2)

        self.emit()
