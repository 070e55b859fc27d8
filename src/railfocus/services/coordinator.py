"""Session coordinator: the single owner of the live timer and pending journey.

The host drives it by calling operations (start, pause, resume, interrupt)
and ``on_tick`` on a fixed cadence. Observers read ``snapshot()`` or
subscribe to receive a snapshot after every completed transition.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date

from railfocus.exceptions import NoActiveSession, PersistenceFailure, SessionAlreadyActive
from railfocus.models.achievements import Achievement, unlocked_achievements
from railfocus.models.journey import FocusTag, Journey, JourneyFactory
from railfocus.models.ledger import JourneyLedger, LedgerStatistics
from railfocus.models.station import Station
from railfocus.models.timer import JourneyPhase, SessionTimer, TimerState
from railfocus.utils.clock import Clock, SystemClock

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of the session, always taken between transitions."""

    event: str
    state: TimerState
    progress: float
    elapsed: float
    remaining: float
    phase: JourneyPhase | None
    journey: Journey | None
    last_journey: Journey | None
    statistics: LedgerStatistics
    warning: str | None = None

    @property
    def is_active(self) -> bool:
        return self.journey is not None

    @property
    def formatted_remaining(self) -> str:
        minutes, seconds = divmod(int(self.remaining), 60)
        return f"{minutes}:{seconds:02d}"


Listener = Callable[[SessionSnapshot], None]


class SessionCoordinator:
    """Mediates between user intent, the session timer and the journey ledger.

    Usage:
        coordinator = SessionCoordinator(ledger=JourneyLedger(store))
        coordinator.subscribe(lambda snap: print(snap.formatted_remaining))
        coordinator.start_journey(find_station("TYO"), find_station("OSA"), 25 * 60)
        coordinator.on_tick()  # call about once per second
    """

    def __init__(
        self,
        ledger: JourneyLedger | None = None,
        clock: Clock | None = None,
        factory: JourneyFactory | None = None,
        timer: SessionTimer | None = None,
    ):
        self.clock = clock or SystemClock()
        self.ledger = ledger if ledger is not None else JourneyLedger(clock=self.clock)
        self.factory = factory if factory is not None else JourneyFactory(clock=self.clock)
        self.timer = timer if timer is not None else SessionTimer(clock=self.clock)

        self._active: Journey | None = None
        self._last_journey: Journey | None = None
        self._warning: str | None = None
        self._listeners: list[Listener] = []
        self._stats_cache: tuple[date, LedgerStatistics] | None = None

    @property
    def active_journey(self) -> Journey | None:
        return self._active.model_copy() if self._active else None

    @property
    def is_active(self) -> bool:
        return self._active is not None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener for snapshots.

        Returns:
            A function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def start_journey(
        self,
        origin: Station,
        destination: Station,
        duration: float,
        tag: FocusTag | str | None = None,
    ) -> Journey:
        """
        Build a journey and start its timer.

        Raises:
            SessionAlreadyActive: If a journey is already in progress
            InvalidJourney: If the request is malformed; nothing changes
        """
        if self._active is not None:
            raise SessionAlreadyActive(
                f"Journey {self._active.route_code} is already in progress"
            )

        journey = self.factory.create(origin, destination, duration, tag)

        self.timer.reset()
        self.timer.start(journey.planned_duration)
        self._active = journey
        self._warning = None

        logger.info(
            f"Journey {journey.id} started: {journey.route_code}, "
            f"{journey.planned_duration:.0f}s, {journey.distance_miles:.0f} mi"
        )
        self._publish("started")
        return journey.model_copy()

    def pause(self) -> None:
        """Pause the active journey. Raises InvalidTransition if the timer refuses."""
        self.timer.pause()
        self._publish("paused")

    def resume(self) -> None:
        """Resume the active journey. Raises InvalidTransition if the timer refuses."""
        self.timer.resume()
        self._publish("resumed")

    def interrupt_journey(self) -> Journey:
        """
        End the active journey early and record it.

        Raises:
            NoActiveSession: If no journey is in progress
        """
        if self._active is None:
            raise NoActiveSession("No journey in progress to interrupt")

        self.timer.interrupt()
        journey = self._active
        journey.interrupt(self.clock.now(), self.timer.elapsed())
        self._finalize(journey)
        self._publish("interrupted")
        return journey.model_copy()

    def on_tick(self, now: float | None = None) -> Journey | None:
        """
        Advance the session to *now* (monotonic seconds).

        Returns:
            The journey that completed on this tick, otherwise None
        """
        if self._active is None:
            return None

        if not self.timer.tick(now):
            self._publish("tick", now)
            return None

        journey = self._active
        journey.complete(self.clock.now(), self.timer.elapsed())
        self._finalize(journey)
        self._publish("completed")
        return journey.model_copy()

    def _finalize(self, journey: Journey) -> None:
        """Hand a terminal journey to the ledger and free the active slot."""
        self._active = None
        self._last_journey = journey
        self._stats_cache = None

        try:
            self.ledger.append(journey)
        except PersistenceFailure as e:
            # In-memory ledger already holds the journey
            logger.warning(f"Journey {journey.id} kept in memory only: {e}")
            self._warning = f"Journey saved for this session only: {e}"

    def statistics(self) -> LedgerStatistics:
        today = self.clock.now().date()
        if self._stats_cache is None or self._stats_cache[0] != today:
            self._stats_cache = (today, self.ledger.statistics(today))
        return self._stats_cache[1]

    def achievements(self) -> list[Achievement]:
        return unlocked_achievements(self.statistics(), self.ledger.history())

    def snapshot(self, event: str = "snapshot", now: float | None = None) -> SessionSnapshot:
        """Current state of the session for presentation."""
        if now is None and self.timer.state is TimerState.RUNNING:
            now = self.clock.monotonic()

        progress = self.timer.progress(now)
        return SessionSnapshot(
            event=event,
            state=self.timer.state,
            progress=progress,
            elapsed=self.timer.elapsed(now),
            remaining=self.timer.remaining(now),
            phase=(
                JourneyPhase.for_progress(progress)
                if self.timer.state is not TimerState.IDLE
                else None
            ),
            journey=self._active.model_copy() if self._active else None,
            last_journey=self._last_journey.model_copy() if self._last_journey else None,
            statistics=self.statistics(),
            warning=self._warning,
        )

    def _publish(self, event: str, now: float | None = None) -> None:
        if not self._listeners:
            return

        snap = self.snapshot(event, now)
        for listener in list(self._listeners):
            try:
                listener(snap)
            except Exception as e:
                logger.error(f"Error in session listener: {e}")

    def close(self) -> None:
        """Tear down: interrupt a live journey so it leaves a terminal record."""
        if self._active is not None:
            logger.info("Closing coordinator with a journey in progress, interrupting it")
            self.interrupt_journey()
        self._listeners.clear()
