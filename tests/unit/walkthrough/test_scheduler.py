"""Tests for keyed timer scheduling on simulated time."""

import pytest

from walkthrough.clock import ManualClock
from walkthrough.scheduler import TimerScheduler


def _scheduler(time_unit: float = 1.0) -> tuple[ManualClock, TimerScheduler]:
    clock = ManualClock()
    return clock, TimerScheduler(clock, time_unit=time_unit)


class TestArm:
    def test_fires_once_after_delay(self):
        clock, sched = _scheduler()
        fired = []
        sched.arm("a", 3, lambda: fired.append(clock.time()))

        clock.advance(2.5)
        assert fired == []
        clock.advance(0.5)
        assert fired == [3.0]
        clock.advance(10)
        assert fired == [3.0]
        assert not sched.is_armed("a")

    def test_rearming_a_key_replaces_the_pending_timer(self):
        clock, sched = _scheduler()
        fired = []
        sched.arm("a", 1, lambda: fired.append("first"))
        sched.arm("a", 2, lambda: fired.append("second"))

        clock.advance(5)
        assert fired == ["second"]

    def test_time_unit_scales_delay(self):
        clock, sched = _scheduler(time_unit=0.5)
        fired = []
        sched.arm("a", 3, lambda: fired.append(clock.time()))
        clock.advance(10)
        assert fired == [1.5]

    def test_callback_can_arm_the_next_timer_in_a_chain(self):
        clock, sched = _scheduler()
        fired = []

        def first():
            fired.append(("first", clock.time()))
            sched.arm("b", 4, lambda: fired.append(("second", clock.time())))

        sched.arm("a", 3, first)
        clock.advance(10)
        assert fired == [("first", 3.0), ("second", 7.0)]

    def test_ties_fire_in_scheduling_order(self):
        clock, sched = _scheduler()
        fired = []
        sched.arm("x", 2, lambda: fired.append("x"))
        sched.arm("y", 2, lambda: fired.append("y"))
        sched.arm("z", 2, lambda: fired.append("z"))
        clock.advance(2)
        assert fired == ["x", "y", "z"]

    def test_non_positive_time_unit_is_rejected(self):
        with pytest.raises(ValueError):
            TimerScheduler(ManualClock(), time_unit=0)


class TestCancel:
    def test_cancelled_timer_never_runs(self):
        clock, sched = _scheduler()
        fired = []
        sched.arm("a", 3, lambda: fired.append("a"))

        clock.advance(1)
        assert sched.cancel("a") is True
        clock.advance(10)
        assert fired == []

    def test_cancel_missing_key_is_noop(self):
        _, sched = _scheduler()
        assert sched.cancel("nope") is False

    def test_cancel_all_clears_every_key(self):
        clock, sched = _scheduler()
        fired = []
        sched.arm("a", 1, lambda: fired.append("a"))
        sched.arm_repeating("b", 1, lambda: fired.append("b"))

        assert sched.cancel_all() == 2
        assert sched.pending() == ()
        clock.advance(10)
        assert fired == []
        assert clock.pending == 0

    def test_callback_cancelling_a_same_instant_timer_prevents_it(self):
        clock, sched = _scheduler()
        fired = []
        sched.arm("a", 1, lambda: (fired.append("a"), sched.cancel("b")))
        sched.arm("b", 1, lambda: fired.append("b"))
        clock.advance(1)
        assert fired == ["a"]


class TestRepeating:
    def test_repeats_until_cancelled(self):
        clock, sched = _scheduler()
        ticks = []
        sched.arm_repeating("tick", 1, lambda: ticks.append(clock.time()))

        clock.advance(3.5)
        assert ticks == [1.0, 2.0, 3.0]
        assert sched.is_armed("tick")

        sched.cancel("tick")
        clock.advance(5)
        assert ticks == [1.0, 2.0, 3.0]

    def test_callback_can_stop_its_own_repetition(self):
        clock, sched = _scheduler()
        ticks = []

        def tick():
            ticks.append(clock.time())
            if len(ticks) == 2:
                sched.cancel("tick")

        sched.arm_repeating("tick", 1, tick)
        clock.advance(10)
        assert ticks == [1.0, 2.0]
        assert clock.pending == 0
