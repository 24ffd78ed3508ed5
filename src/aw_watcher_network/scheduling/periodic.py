"""
Fixed-rate periodic activities on independent threads.
Connectivity polling and Wi-Fi scanning each get their own activity so a slow
cycle in one never delays the other.
"""

import logging
import math
import threading
import time
from enum import Enum
from typing import Callable, Iterable, List, Optional

logger = logging.getLogger(__name__)


class ActivityState(Enum):
    """Activity state machine states."""
    IDLE = "idle"          # Waiting for the next tick
    RUNNING = "running"    # Cycle in progress
    STOPPED = "stopped"    # Loop exited


class PeriodicActivity:
    """
    Runs an action at a fixed rate on a dedicated thread.

    Schedule:
    - First cycle runs immediately on start
    - Ticks are anchored to the start time, so cycle duration does not accumulate drift
    - Ticks missed while a cycle overran are skipped, not replayed
    - Errors raised by the action are logged and counted; the loop continues
    """

    def __init__(
        self,
        name: str,
        interval_seconds: float,
        action: Callable[[], object],
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize periodic activity.

        Args:
            name: Activity name, used for the thread and log messages
            interval_seconds: Period between cycle starts
            action: Callable executed once per cycle
            clock: Monotonic clock (injectable for tests)
        """
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.name = name
        self.interval_seconds = interval_seconds
        self.action = action
        self._clock = clock
        self.state = ActivityState.IDLE
        self.cycle_count = 0
        self.error_count = 0
        self.skipped_ticks = 0
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def next_deadline(self, previous: float, now: float) -> float:
        """Return the next tick after previous that is not already in the past."""
        deadline = previous + self.interval_seconds
        if deadline < now:
            behind = math.ceil((now - deadline) / self.interval_seconds)
            self.skipped_ticks += behind
            logger.debug(f"{self.name}: cycle overran, skipping {behind} tick(s)")
            deadline += behind * self.interval_seconds
        return deadline

    def run_cycle(self) -> bool:
        """
        Execute the action once.

        Returns:
            True if the action completed without raising
        """
        self.state = ActivityState.RUNNING
        try:
            self.action()
            return True
        except Exception as e:
            self.error_count += 1
            logger.error(f"{self.name} cycle failed: {e}", exc_info=True)
            return False
        finally:
            self.cycle_count += 1
            self.state = ActivityState.IDLE

    def run(self) -> None:
        """Loop until stop() is called."""
        logger.info(
            f"{self.name} activity started (interval {self.interval_seconds}s)")
        tick = self._clock()
        while not self._stop_event.is_set():
            self.run_cycle()
            tick = self.next_deadline(tick, self._clock())
            self._stop_event.wait(max(0.0, tick - self._clock()))
        self.state = ActivityState.STOPPED
        logger.info(f"{self.name} activity stopped after {self.cycle_count} cycles")

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            raise RuntimeError(f"{self.name} activity already running")
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self.run, name=f"activity-{self.name}")
        self._thread.start()

    def stop(self) -> None:
        """Request the loop to exit; an in-flight cycle is allowed to finish."""
        self._stop_event.set()

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()


class DualScheduler:
    """Starts, stops and joins a set of independent periodic activities."""

    def __init__(self, activities: Iterable[PeriodicActivity]):
        self.activities: List[PeriodicActivity] = list(activities)

    def start(self) -> None:
        for activity in self.activities:
            activity.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        """Signal every activity and wait for in-flight cycles to complete."""
        for activity in self.activities:
            activity.stop()
        for activity in self.activities:
            activity.join(timeout)
            if activity.is_alive():
                logger.warning(f"{activity.name} still running after stop")

    def is_running(self) -> bool:
        return any(activity.is_alive() for activity in self.activities)
