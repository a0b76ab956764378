"""
Reveal engine state machine tests

Tests transitions, their idempotence, progress reporting and listener
notifications. Time is driven by a VirtualScheduler throughout.
"""

import random

import pytest

from mdcstream.lib.engine import RevealEngine
from mdcstream.lib.scheduler import VirtualScheduler
from mdcstream.models import RevealState


SOURCE = "Hello, streaming world!"


@pytest.fixture
def scheduler():
    return VirtualScheduler()


@pytest.fixture
def engine(scheduler):
    return RevealEngine(SOURCE, interval_ms=15, scheduler=scheduler, rng=random.Random(1))


class TestInitialState:
    """Test a freshly built engine"""

    def test_idle(self, engine, scheduler):
        assert engine.state is RevealState.IDLE
        assert engine.revealed_length == 0
        assert engine.prefix == ""
        assert engine.progress() == 0
        assert scheduler.active == []

    def test_default_interval_from_settings(self, scheduler):
        engine = RevealEngine(SOURCE, scheduler=scheduler)
        assert engine.interval_ms == 15

    def test_snapshot(self, engine):
        snapshot = engine.snapshot()
        assert snapshot.state is RevealState.IDLE
        assert snapshot.total_length == len(SOURCE)
        assert snapshot.progress == 0


class TestTransitions:
    """Test each transition of the state machine"""

    def test_start(self, engine, scheduler):
        engine.start()
        assert engine.state is RevealState.STREAMING
        assert engine.is_streaming
        assert engine.revealed_length == 0
        assert len(scheduler.active) == 1
        assert scheduler.active[0].interval_ms == 15

    def test_pause_freezes_length(self, engine, scheduler):
        engine.start()
        scheduler.fire(3)
        length = engine.revealed_length

        engine.pause()
        assert engine.state is RevealState.PAUSED
        assert engine.is_paused
        assert scheduler.fire(5) == 0
        assert engine.revealed_length == length

    def test_pause_twice_is_noop(self, engine, scheduler):
        engine.start()
        scheduler.fire(2)
        engine.pause()
        snapshot = engine.snapshot()
        engine.pause()
        assert engine.snapshot() == snapshot

    def test_pause_when_idle_is_noop(self, engine):
        engine.pause()
        assert engine.state is RevealState.IDLE

    def test_resume_continues(self, engine, scheduler):
        engine.start()
        scheduler.fire(2)
        engine.pause()
        length = engine.revealed_length

        engine.resume()
        assert engine.state is RevealState.STREAMING
        scheduler.fire(1)
        assert engine.revealed_length > length

    def test_resume_when_not_paused_is_noop(self, engine, scheduler):
        engine.resume()
        assert engine.state is RevealState.IDLE
        assert scheduler.active == []

        engine.start()
        engine.resume()
        assert len(scheduler.active) == 1

    def test_reset(self, engine, scheduler):
        engine.start()
        scheduler.fire(4)
        engine.reset()
        assert engine.state is RevealState.IDLE
        assert engine.revealed_length == 0
        assert scheduler.active == []

    def test_start_after_reset_begins_at_zero(self, engine, scheduler):
        engine.start()
        scheduler.fire(4)
        engine.reset()
        engine.start()
        assert engine.revealed_length == 0
        assert engine.state is RevealState.STREAMING

    def test_start_while_streaming_restarts(self, engine, scheduler):
        engine.start()
        scheduler.fire(4)
        engine.start()
        assert engine.revealed_length == 0
        assert len(scheduler.active) == 1

    def test_complete(self, engine, scheduler):
        engine.start()
        scheduler.fire(2)
        engine.complete()
        assert engine.state is RevealState.COMPLETE
        assert engine.prefix == SOURCE
        assert engine.progress() == 100
        assert scheduler.active == []

    def test_complete_from_idle_and_twice(self, engine):
        engine.complete()
        engine.complete()
        assert engine.state is RevealState.COMPLETE
        assert engine.revealed_length == len(SOURCE)

    def test_start_after_complete_restarts(self, engine, scheduler):
        engine.complete()
        engine.start()
        assert engine.state is RevealState.STREAMING
        assert engine.revealed_length == 0

    def test_pause_after_complete_is_noop(self, engine):
        engine.complete()
        engine.pause()
        assert engine.state is RevealState.COMPLETE


class TestSourceAndSpeed:
    """Test replacing the source and switching speed"""

    def test_source_change_resets(self, engine, scheduler):
        engine.start()
        scheduler.fire(3)
        engine.source = "Another document"
        assert engine.state is RevealState.IDLE
        assert engine.revealed_length == 0
        assert scheduler.active == []

    def test_same_source_keeps_state(self, engine, scheduler):
        engine.start()
        scheduler.fire(3)
        length = engine.revealed_length
        engine.source = SOURCE
        assert engine.state is RevealState.STREAMING
        assert engine.revealed_length == length

    @pytest.mark.parametrize("speed,interval", [("slow", 30), ("normal", 15), ("fast", 5), ("FAST", 5)])
    def test_speed_set(self, engine, speed, interval):
        engine.speed_set(speed)
        assert engine.interval_ms == interval

    def test_speed_set_unknown(self, engine):
        with pytest.raises(ValueError):
            engine.speed_set("warp")

    def test_speed_applies_on_resume(self, engine, scheduler):
        engine.start()
        engine.speed_set("slow")
        assert scheduler.active[0].interval_ms == 15

        engine.pause()
        engine.resume()
        assert scheduler.active[0].interval_ms == 30


class TestProgress:
    """Test progress reporting"""

    def test_progress_monotonic(self, engine, scheduler):
        engine.start()
        values = [engine.progress()]
        while engine.state is RevealState.STREAMING:
            scheduler.fire(1)
            values.append(engine.progress())
        assert values == sorted(values)
        assert values[-1] == 100

    def test_progress_bounds(self, engine, scheduler):
        engine.start()
        for _ in range(len(SOURCE)):
            scheduler.fire(1)
            assert 0 <= engine.progress() <= 100

    def test_empty_source_progress(self, scheduler):
        engine = RevealEngine("", scheduler=scheduler)
        assert engine.progress() == 0
        engine.complete()
        assert engine.progress() == 0


class TestListeners:
    """Test update notifications"""

    def test_every_transition_notifies(self, engine, scheduler):
        updates = []
        engine.subscribe(lambda prefix, state: updates.append((prefix, state)))

        engine.start()
        scheduler.fire(1)
        engine.pause()
        engine.resume()
        engine.reset()

        states = [state for _, state in updates]
        assert states == [
            RevealState.STREAMING,
            RevealState.STREAMING,
            RevealState.PAUSED,
            RevealState.STREAMING,
            RevealState.IDLE,
        ]
        assert updates[0][0] == ""
        assert updates[1][0] == SOURCE[:len(updates[1][0])]
        assert updates[-1][0] == ""

    def test_noop_transitions_do_not_notify(self, engine):
        updates = []
        engine.subscribe(lambda prefix, state: updates.append(state))
        engine.pause()
        engine.resume()
        assert updates == []

    def test_prefix_lengths_increase(self, engine, scheduler):
        lengths = []
        engine.subscribe(lambda prefix, state: lengths.append(len(prefix)))
        engine.start()
        scheduler.run_until_idle()
        assert lengths == sorted(lengths)
        assert lengths[-1] == len(SOURCE)

    def test_unsubscribe(self, engine, scheduler):
        updates = []
        unsubscribe = engine.subscribe(lambda prefix, state: updates.append(state))
        engine.start()
        unsubscribe()
        unsubscribe()
        scheduler.fire(3)
        assert updates == [RevealState.STREAMING]
