"""
Unit tests for periodic activities.
Tests tick computation, error containment and thread lifecycle.
"""

import threading

import pytest

from aw_watcher_network.scheduling.periodic import (
    ActivityState,
    DualScheduler,
    PeriodicActivity,
)


class TestNextDeadline:
    """Test fixed-rate tick computation."""

    @pytest.fixture
    def activity(self):
        return PeriodicActivity("test", 5, lambda: None)

    def test_on_time_cycle(self, activity):
        assert activity.next_deadline(previous=0, now=1) == 5

    def test_cycle_ending_exactly_on_next_tick(self, activity):
        assert activity.next_deadline(previous=0, now=5) == 5
        assert activity.skipped_ticks == 0

    def test_overrun_skips_missed_ticks(self, activity):
        assert activity.next_deadline(previous=0, now=12) == 15
        assert activity.skipped_ticks == 2

    def test_overrun_onto_tick_boundary(self, activity):
        assert activity.next_deadline(previous=0, now=10) == 10
        assert activity.skipped_ticks == 1

    def test_ten_minute_simulation(self):
        """5s polling and 300s Wi-Fi over 600s, with 30s Wi-Fi scans."""
        def simulate(interval, cycle_duration, horizon=600):
            activity = PeriodicActivity("sim", interval, lambda: None)
            ticks = []
            tick = 0.0
            while tick < horizon:
                ticks.append(tick)
                tick = activity.next_deadline(tick, tick + cycle_duration)
            return ticks

        connectivity = simulate(5, 0.01)
        wifi = simulate(300, 30)

        assert len(connectivity) == 120
        assert len(wifi) == 2
        assert connectivity[:3] == [0, 5, 10]
        assert wifi == [0, 300]

    def test_invalid_interval(self):
        with pytest.raises(ValueError):
            PeriodicActivity("bad", 0, lambda: None)


class TestRunCycle:
    """Test per-cycle error containment."""

    def test_successful_cycle(self):
        calls = []
        activity = PeriodicActivity("test", 1, lambda: calls.append(1))

        assert activity.run_cycle() is True
        assert calls == [1]
        assert activity.cycle_count == 1
        assert activity.error_count == 0
        assert activity.state == ActivityState.IDLE

    def test_failing_cycle_is_contained(self):
        def boom():
            raise RuntimeError("scan exploded")

        activity = PeriodicActivity("test", 1, boom)

        assert activity.run_cycle() is False
        assert activity.run_cycle() is False
        assert activity.cycle_count == 2
        assert activity.error_count == 2
        assert activity.state == ActivityState.IDLE

    def test_running_state_during_cycle(self):
        seen = []
        activity = PeriodicActivity("test", 1, lambda: seen.append(activity.state))

        activity.run_cycle()
        assert seen == [ActivityState.RUNNING]


class TestActivityThread:
    """Test thread start/stop behaviour."""

    def test_first_cycle_runs_immediately_and_stop_interrupts_wait(self):
        ran = threading.Event()
        activity = PeriodicActivity("test", 3600, ran.set)

        activity.start()
        assert ran.wait(timeout=5)
        activity.stop()
        activity.join(timeout=5)

        assert not activity.is_alive()
        assert activity.state == ActivityState.STOPPED
        assert activity.cycle_count == 1

    def test_errors_do_not_stop_loop(self):
        count = {"n": 0}
        done = threading.Event()

        def flaky():
            count["n"] += 1
            if count["n"] >= 3:
                done.set()
            raise RuntimeError("always failing")

        activity = PeriodicActivity("flaky", 0.01, flaky)
        activity.start()
        assert done.wait(timeout=5)
        activity.stop()
        activity.join(timeout=5)

        assert activity.error_count >= 3
        assert not activity.is_alive()

    def test_cannot_start_twice(self):
        activity = PeriodicActivity("test", 3600, lambda: None)
        activity.start()
        try:
            with pytest.raises(RuntimeError):
                activity.start()
        finally:
            activity.stop()
            activity.join(timeout=5)

    def test_stop_waits_for_in_flight_cycle(self):
        started = threading.Event()
        release = threading.Event()
        finished = []

        def slow():
            started.set()
            release.wait(timeout=5)
            finished.append(True)

        activity = PeriodicActivity("slow", 3600, slow)
        scheduler = DualScheduler([activity])
        scheduler.start()
        assert started.wait(timeout=5)

        stopper = threading.Thread(target=scheduler.stop)
        stopper.start()
        release.set()
        stopper.join(timeout=5)

        assert finished == [True]
        assert not scheduler.is_running()


class TestDualScheduler:
    """Test coordinated start/stop of independent activities."""

    def test_start_and_stop_all(self):
        a_ran = threading.Event()
        b_ran = threading.Event()
        scheduler = DualScheduler([
            PeriodicActivity("a", 3600, a_ran.set),
            PeriodicActivity("b", 3600, b_ran.set),
        ])

        scheduler.start()
        assert a_ran.wait(timeout=5)
        assert b_ran.wait(timeout=5)
        assert scheduler.is_running()

        scheduler.stop(timeout=5)
        assert not scheduler.is_running()
        for activity in scheduler.activities:
            assert activity.state == ActivityState.STOPPED
