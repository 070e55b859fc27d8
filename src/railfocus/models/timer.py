"""Session timer state machine for a single focus journey.

States and transitions::

    idle --start--> running <--pause/resume--> paused
    running --elapsed reaches duration (tick)--> completed
    running | paused --interrupt--> interrupted
    any --reset--> idle

Elapsed time is measured on a monotonic clock and only accrues while the
timer is running. Progress and remaining time are always derived from it.
"""

from __future__ import annotations

import logging
import math
from enum import Enum

from railfocus.exceptions import InvalidJourney, InvalidTransition
from railfocus.utils.clock import Clock, SystemClock

logger = logging.getLogger(__name__)


class TimerState(str, Enum):
    """Current state of the session timer."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"
    INTERRUPTED = "interrupted"

    @property
    def is_terminal(self) -> bool:
        return self in (TimerState.COMPLETED, TimerState.INTERRUPTED)


class JourneyPhase(str, Enum):
    """Stage of the trip, derived from progress."""

    BOARDING = "boarding"
    DEPARTING = "departing"
    CRUISING = "cruising"
    APPROACHING = "approaching"
    ARRIVED = "arrived"

    @classmethod
    def for_progress(cls, progress: float) -> JourneyPhase:
        if progress < 0.03:
            return cls.BOARDING
        if progress < 0.12:
            return cls.DEPARTING
        if progress < 0.85:
            return cls.CRUISING
        if progress < 0.97:
            return cls.APPROACHING
        return cls.ARRIVED

    @property
    def announcement(self) -> str:
        return _ANNOUNCEMENTS[self]


_ANNOUNCEMENTS = {
    JourneyPhase.BOARDING: "Doors closing, settle in.",
    JourneyPhase.DEPARTING: "We're on our way. Stay focused.",
    JourneyPhase.CRUISING: "Smooth ride, keep going.",
    JourneyPhase.APPROACHING: "Final stretch, almost there.",
    JourneyPhase.ARRIVED: "You've arrived. Well done.",
}


class SessionTimer:
    """Countdown for exactly one session.

    Every mutating method accepts an optional ``now`` (monotonic seconds);
    when omitted the injected clock is read.

    Usage:
        timer = SessionTimer()
        timer.start(25 * 60)
        timer.pause()
        timer.resume()
        if timer.tick():
            print("arrived")
    """

    def __init__(self, clock: Clock | None = None):
        self.clock = clock or SystemClock()
        self._state = TimerState.IDLE
        self._planned = 0.0
        self._accumulated = 0.0
        self._last_resume: float | None = None

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def planned_duration(self) -> float:
        return self._planned

    @property
    def is_active(self) -> bool:
        return self._state in (TimerState.RUNNING, TimerState.PAUSED)

    def _now(self, now: float | None) -> float:
        return self.clock.monotonic() if now is None else now

    def _running_delta(self, now: float) -> float:
        # A clock reading earlier than the last resume never subtracts time
        return max(0.0, now - self._last_resume)

    def _require(self, *allowed: TimerState, action: str) -> None:
        if self._state not in allowed:
            raise InvalidTransition(f"Cannot {action} timer while {self._state.value}")

    def start(self, duration: float, now: float | None = None) -> None:
        """Start counting down *duration* seconds."""
        self._require(TimerState.IDLE, action="start")
        if not math.isfinite(duration) or duration <= 0:
            raise InvalidJourney(f"Timer duration must be positive and finite, got {duration}")

        self._planned = float(duration)
        self._accumulated = 0.0
        self._last_resume = self._now(now)
        self._state = TimerState.RUNNING
        logger.info(f"Timer started for {self._planned:.0f}s")

    def pause(self, now: float | None = None) -> None:
        """Pause a running timer; no time accrues until resume."""
        self._require(TimerState.RUNNING, action="pause")
        now = self._now(now)

        self._accumulated = min(self._planned, self._accumulated + self._running_delta(now))
        self._last_resume = None
        self._state = TimerState.PAUSED
        logger.info(f"Timer paused at {self._accumulated:.1f}s")

    def resume(self, now: float | None = None) -> None:
        """Resume a paused timer."""
        self._require(TimerState.PAUSED, action="resume")
        self._last_resume = self._now(now)
        self._state = TimerState.RUNNING
        logger.info("Timer resumed")

    def interrupt(self, now: float | None = None) -> None:
        """End the session early, freezing elapsed time."""
        self._require(TimerState.RUNNING, TimerState.PAUSED, action="interrupt")
        if self._state is TimerState.RUNNING:
            now = self._now(now)
            self._accumulated = min(
                self._planned, self._accumulated + self._running_delta(now)
            )
        self._last_resume = None
        self._state = TimerState.INTERRUPTED
        logger.info(f"Timer interrupted at {self._accumulated:.1f}s")

    def reset(self) -> None:
        """Return to idle from any state."""
        self._state = TimerState.IDLE
        self._planned = 0.0
        self._accumulated = 0.0
        self._last_resume = None

    def tick(self, now: float | None = None) -> bool:
        """
        Re-evaluate the timer at *now*.

        Reads elapsed time without folding it into the accumulated total.
        When a running timer reaches its planned duration it transitions to
        completed and elapsed clamps to the planned duration.

        Returns:
            True only for the call that performed the completion transition.
        """
        if self._state is not TimerState.RUNNING:
            return False

        now = self._now(now)
        if self._accumulated + self._running_delta(now) < self._planned:
            return False

        self._accumulated = self._planned
        self._last_resume = None
        self._state = TimerState.COMPLETED
        logger.info(f"Timer completed after {self._planned:.0f}s")
        return True

    def elapsed(self, now: float | None = None) -> float:
        """Seconds counted while running, excluding paused intervals."""
        if self._state is TimerState.RUNNING:
            total = self._accumulated + self._running_delta(self._now(now))
            return min(self._planned, total)
        return self._accumulated

    def remaining(self, now: float | None = None) -> float:
        return max(0.0, self._planned - self.elapsed(now))

    def progress(self, now: float | None = None) -> float:
        """Fraction of the planned duration elapsed, in [0, 1]."""
        if self._planned <= 0:
            return 0.0
        return min(1.0, self.elapsed(now) / self._planned)
