"""Journey ledger: append-only record of finalized journeys and their statistics."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from railfocus.exceptions import InvalidJourney, PersistenceFailure
from railfocus.models.journey import Journey, JourneyOutcome
from railfocus.repositories.repository import JourneyStore, MemoryJourneyStore
from railfocus.utils.clock import Clock, SystemClock

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CountingPolicy:
    """Which finalized journeys feed streaks and totals."""

    count_interrupted: bool = False

    def counts(self, journey: Journey) -> bool:
        if journey.outcome is JourneyOutcome.COMPLETED:
            return True
        return self.count_interrupted and journey.outcome is JourneyOutcome.INTERRUPTED


@dataclass(frozen=True)
class LedgerStatistics:
    """Aggregate user progress derived from the ledger."""

    current_streak: int = 0
    longest_streak: int = 0
    total_focus_time: float = 0.0  # seconds
    total_journeys: int = 0
    interrupted_journeys: int = 0
    total_distance_miles: float = 0.0
    completion_rate: float = 0.0
    visited_stations: frozenset[str] = field(default_factory=frozenset)
    last_journey_at: datetime | None = None

    @property
    def formatted_focus_time(self) -> str:
        hours, rem = divmod(int(self.total_focus_time), 3600)
        minutes = rem // 60
        if hours > 0:
            return f"{hours}h {minutes}m"
        return f"{minutes}m"

    @property
    def formatted_distance(self) -> str:
        if self.total_distance_miles >= 1000:
            return f"{self.total_distance_miles / 1000:.1f}k mi"
        return f"{self.total_distance_miles:.0f} mi"


def local_day(moment: datetime) -> date:
    """Local calendar day of a timestamp."""
    return moment.astimezone().date()


def current_streak(days: set[date], today: date) -> int:
    """
    Count consecutive days ending today, or yesterday as a grace day.

    A streak stays alive while today has no session yet; it only breaks once
    a full day is skipped.
    """
    expected = today if today in days else today - timedelta(days=1)
    streak = 0
    while expected in days:
        streak += 1
        expected -= timedelta(days=1)
    return streak


def longest_streak(days: set[date]) -> int:
    longest = 0
    run = 0
    previous: date | None = None
    for day in sorted(days):
        if previous is not None and (day - previous).days == 1:
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        previous = day
    return longest


class JourneyLedger:
    """Owns finalized journeys and derives statistics from them.

    Journeys are kept oldest-first internally and are only ever appended, so
    history views can walk the list backwards by index without copying.
    """

    def __init__(
        self,
        store: JourneyStore | None = None,
        policy: CountingPolicy | None = None,
        clock: Clock | None = None,
    ):
        self.store = store if store is not None else MemoryJourneyStore()
        self.policy = policy if policy is not None else CountingPolicy()
        self.clock = clock or SystemClock()
        self._journeys: list[Journey] = []
        self._ids: set[str] = set()

    def __len__(self) -> int:
        return len(self._journeys)

    def __contains__(self, journey_id: object) -> bool:
        return journey_id in self._ids

    def load(self) -> int:
        """
        Hydrate the ledger from the store.

        Returns:
            Number of journeys loaded (0 on first run)

        Raises:
            PersistenceFailure: If the store could not be read
        """
        try:
            stored = self.store.load()
        except Exception as e:
            logger.error(f"Failed to load journey ledger: {e}")
            raise PersistenceFailure(f"Failed to load journeys: {e}") from e

        loaded = 0
        # Stored most-recent-first; keep internal order oldest-first
        for journey in reversed(stored):
            if not journey.is_terminal:
                logger.warning(f"Skipping unfinished journey {journey.id} from store")
                continue
            if journey.id in self._ids:
                continue
            self._journeys.append(journey)
            self._ids.add(journey.id)
            loaded += 1

        logger.info(f"Loaded {loaded} journeys from store")
        return loaded

    def append(self, journey: Journey) -> bool:
        """
        Record a finalized journey.

        Returns:
            True if added, False if a journey with the same id was already recorded

        Raises:
            InvalidJourney: If the journey is still in progress
            PersistenceFailure: If the store failed; the journey is still recorded in memory
        """
        if not journey.is_terminal:
            raise InvalidJourney(f"Cannot record journey {journey.id} while in progress")
        if journey.id in self._ids:
            logger.debug(f"Journey {journey.id} already recorded, ignoring")
            return False

        journey = journey.model_copy()
        self._journeys.append(journey)
        self._ids.add(journey.id)
        logger.info(
            f"Recorded journey {journey.id} ({journey.route_code}) as {journey.outcome.value}"
        )

        try:
            self.store.persist(list(self._newest_first()))
        except Exception as e:
            logger.error(f"Failed to persist journey {journey.id}: {e}")
            raise PersistenceFailure(f"Failed to persist journey {journey.id}: {e}") from e

        return True

    def _newest_first(self, limit: int | None = None) -> Iterator[Journey]:
        # Bounds are fixed here so journeys appended mid-iteration are not seen
        end = len(self._journeys)
        stop = 0 if limit is None else max(0, end - limit)
        return (self._journeys[index] for index in range(end - 1, stop - 1, -1))

    def history(self, limit: int | None = None) -> Iterator[Journey]:
        """Lazily yield copies of journeys, most-recent-first.

        Each call returns a fresh iterator over the journeys recorded at call
        time. Mutating a yielded journey never changes the ledger.
        """
        return (journey.model_copy() for journey in self._newest_first(limit))

    def find(self, journey_id: str) -> Journey | None:
        for journey in self._newest_first():
            if journey.id == journey_id:
                return journey.model_copy()
        return None

    def completed(self) -> list[Journey]:
        return [j for j in self.history() if j.outcome is JourneyOutcome.COMPLETED]

    def recent(self, limit: int = 10) -> list[Journey]:
        """Most recent completed journeys."""
        return self.completed()[:limit]

    def _today(self, today: date | None) -> date:
        return today or self.clock.now().date()

    def _counted(self) -> Iterator[Journey]:
        for journey in self._newest_first():
            if journey.completed_at is not None and self.policy.counts(journey):
                yield journey

    def today(self, today: date | None = None) -> list[Journey]:
        day = self._today(today)
        return [j.model_copy() for j in self._counted() if local_day(j.completed_at) == day]

    def focus_time_today(self, today: date | None = None) -> float:
        return sum(j.elapsed_seconds for j in self.today(today))

    def focus_time_this_week(self, today: date | None = None) -> float:
        """Focus seconds since Monday of the current week."""
        day = self._today(today)
        week_start = day - timedelta(days=day.weekday())
        return sum(
            j.elapsed_seconds
            for j in self._counted()
            if week_start <= local_day(j.completed_at) <= day
        )

    def focus_by_day(self, days: int, today: date | None = None) -> list[tuple[date, float]]:
        """
        Focus seconds per day for the last *days* days.

        Returns:
            List of (date, seconds), oldest first, one entry per day
        """
        day = self._today(today)
        totals: dict[date, float] = defaultdict(float)
        for journey in self._counted():
            totals[local_day(journey.completed_at)] += journey.elapsed_seconds

        return [
            (day - timedelta(days=offset), totals.get(day - timedelta(days=offset), 0.0))
            for offset in range(days - 1, -1, -1)
        ]

    def statistics(self, today: date | None = None) -> LedgerStatistics:
        """Compute user progress from the full history."""
        day = self._today(today)
        counted = list(self._counted())
        completed = sum(1 for j in self._journeys if j.outcome is JourneyOutcome.COMPLETED)
        interrupted = sum(1 for j in self._journeys if j.outcome is JourneyOutcome.INTERRUPTED)
        finished = completed + interrupted

        days = {local_day(j.completed_at) for j in counted}
        visited: set[str] = set()
        for journey in counted:
            visited.add(journey.origin.code)
            visited.add(journey.destination.code)

        return LedgerStatistics(
            current_streak=current_streak(days, day),
            longest_streak=longest_streak(days),
            total_focus_time=sum(j.elapsed_seconds for j in counted),
            total_journeys=len(counted),
            interrupted_journeys=interrupted,
            total_distance_miles=sum(j.distance_miles for j in counted),
            completion_rate=completed / finished if finished else 0.0,
            visited_stations=frozenset(visited),
            last_journey_at=self._journeys[-1].completed_at if self._journeys else None,
        )
