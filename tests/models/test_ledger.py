"""Tests for the journey ledger: recording, history views and streaks."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from railfocus.exceptions import InvalidJourney, PersistenceFailure
from railfocus.models.journey import JourneyFactory, JourneyOutcome
from railfocus.models.ledger import (
    CountingPolicy,
    JourneyLedger,
    LedgerStatistics,
    current_streak,
    longest_streak,
)
from railfocus.models.station import find_station
from railfocus.repositories.repository import JourneyStore, MemoryJourneyStore


class FailingStore(JourneyStore):
    """Store whose writes (and optionally reads) always fail."""

    def __init__(self, fail_load: bool = False):
        self.fail_load = fail_load

    def persist(self, journeys):
        raise OSError("disk full")

    def load(self):
        if self.fail_load:
            raise OSError("corrupt file")
        return []


TODAY = date(2026, 10, 17)


# ---------------------------------------------------------------------------
# Streak helpers
# ---------------------------------------------------------------------------


class TestStreaks:
    def test_three_consecutive_days(self):
        days = {TODAY, TODAY - timedelta(days=1), TODAY - timedelta(days=2)}
        assert current_streak(days, TODAY) == 3

    def test_gap_resets_streak(self):
        days = {TODAY, TODAY - timedelta(days=2), TODAY - timedelta(days=3)}
        assert current_streak(days, TODAY) == 1

    def test_grace_day_keeps_yesterdays_streak(self):
        days = {TODAY - timedelta(days=1), TODAY - timedelta(days=2)}
        assert current_streak(days, TODAY) == 2

    def test_streak_broken_after_full_skipped_day(self):
        days = {TODAY - timedelta(days=2), TODAY - timedelta(days=3)}
        assert current_streak(days, TODAY) == 0

    def test_empty(self):
        assert current_streak(set(), TODAY) == 0
        assert longest_streak(set()) == 0

    def test_longest_streak_finds_best_run(self):
        days = {TODAY - timedelta(days=n) for n in (0, 1, 5, 6, 7, 8, 20)}
        assert longest_streak(days) == 4


# ---------------------------------------------------------------------------
# append / history
# ---------------------------------------------------------------------------


class TestAppend:
    def test_append_records_and_persists(self, ledger, store, make_journey):
        journey = make_journey()
        assert ledger.append(journey) is True
        assert journey.id in ledger
        assert len(ledger) == 1
        assert store.persist_count == 1
        assert [j.id for j in store.load()] == [journey.id]

    def test_append_is_idempotent_by_id(self, ledger, store, make_journey):
        journey = make_journey()
        ledger.append(journey)
        assert ledger.append(journey) is False
        assert len(ledger) == 1
        assert store.persist_count == 1

    def test_in_progress_journey_rejected(self, ledger, clock, tokyo, osaka):
        journey = JourneyFactory(clock=clock).create(tokyo, osaka, 60)
        with pytest.raises(InvalidJourney):
            ledger.append(journey)
        assert len(ledger) == 0

    def test_persistence_failure_keeps_journey_in_memory(self, clock, make_journey):
        ledger = JourneyLedger(store=FailingStore(), clock=clock)
        journey = make_journey()

        with pytest.raises(PersistenceFailure):
            ledger.append(journey)

        assert journey.id in ledger
        assert ledger.statistics().total_journeys == 1

    def test_history_is_most_recent_first(self, ledger, make_journey):
        journeys = [make_journey(days_ago=n) for n in (3, 2, 1)]
        for journey in journeys:
            ledger.append(journey)

        assert [j.id for j in ledger.history()] == [j.id for j in reversed(journeys)]

    def test_history_limit(self, ledger, make_journey):
        journeys = [make_journey() for _ in range(5)]
        for journey in journeys:
            ledger.append(journey)

        assert [j.id for j in ledger.history(2)] == [journeys[4].id, journeys[3].id]
        assert list(ledger.history(0)) == []
        assert len(list(ledger.history(50))) == 5

    def test_history_is_lazy(self, ledger, make_journey):
        journeys = [make_journey() for _ in range(3)]
        for journey in journeys:
            ledger.append(journey)

        it = ledger.history()
        assert not isinstance(it, list)
        assert next(it).id == journeys[-1].id

        # A journey appended mid-iteration is not part of this view
        ledger.append(make_journey())
        assert [j.id for j in it] == [journeys[1].id, journeys[0].id]

    def test_readers_cannot_rewrite_history(self, ledger, make_journey):
        ledger.append(make_journey())

        for journey in ledger.history():
            journey.outcome = JourneyOutcome.IN_PROGRESS
            journey.elapsed_seconds = 0.0
        for journey in ledger.completed() + ledger.recent() + ledger.today():
            journey.outcome = JourneyOutcome.INTERRUPTED
        ledger.find(next(ledger.history()).id).elapsed_seconds = 1.0

        stats = ledger.statistics()
        assert stats.total_journeys == 1
        assert stats.total_focus_time == 1500
        assert next(ledger.history()).outcome is JourneyOutcome.COMPLETED

    def test_appended_journey_is_owned_by_ledger(self, ledger, make_journey):
        journey = make_journey()
        ledger.append(journey)

        journey.elapsed_seconds = 0.0
        assert ledger.statistics().total_focus_time == 1500

    def test_find_and_recent(self, ledger, make_journey):
        done = make_journey()
        stopped = make_journey(outcome="interrupted", elapsed=60)
        ledger.append(done)
        ledger.append(stopped)

        assert ledger.find(stopped.id) == stopped
        assert ledger.find("missing") is None
        assert ledger.recent() == [done]
        assert ledger.completed() == [done]


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------


class TestStatistics:
    def test_empty_ledger(self, ledger):
        assert ledger.statistics() == LedgerStatistics()

    def test_totals_over_completed_journeys(self, ledger, make_journey):
        ledger.append(make_journey(days_ago=0, duration=1500))
        ledger.append(make_journey(days_ago=1, duration=3000))
        ledger.append(make_journey(days_ago=2, duration=600))

        stats = ledger.statistics()
        assert stats.current_streak == 3
        assert stats.longest_streak == 3
        assert stats.total_journeys == 3
        assert stats.total_focus_time == 5100
        assert stats.completion_rate == 1.0
        assert stats.visited_stations == frozenset({"TYO", "OSA"})

    def test_interrupted_excluded_by_default(self, ledger, make_journey):
        ledger.append(make_journey(days_ago=1))
        ledger.append(make_journey(days_ago=0, outcome="interrupted", elapsed=300))

        stats = ledger.statistics()
        assert stats.total_journeys == 1
        assert stats.interrupted_journeys == 1
        assert stats.total_focus_time == 1500
        assert stats.completion_rate == pytest.approx(0.5)
        # Yesterday still counts through the grace day
        assert stats.current_streak == 1

    def test_policy_can_count_interrupted(self, store, clock, make_journey):
        ledger = JourneyLedger(store=store, policy=CountingPolicy(count_interrupted=True), clock=clock)
        ledger.append(make_journey(days_ago=1))
        ledger.append(make_journey(days_ago=0, outcome="interrupted", elapsed=300))

        stats = ledger.statistics()
        assert stats.total_journeys == 2
        assert stats.total_focus_time == 1800
        assert stats.current_streak == 2

    def test_streak_gap_scenario(self, ledger, make_journey):
        for days_ago in (0, 2, 3):
            ledger.append(make_journey(days_ago=days_ago))

        stats = ledger.statistics()
        assert stats.current_streak == 1
        assert stats.longest_streak == 2

    def test_distance_and_visited_stations(self, ledger, make_journey):
        paris, lyon = find_station("PLY"), find_station("LPD")
        first = make_journey()
        second = make_journey(origin=paris, destination=lyon)
        ledger.append(first)
        ledger.append(second)

        stats = ledger.statistics()
        assert stats.total_distance_miles == pytest.approx(
            first.distance_miles + second.distance_miles
        )
        assert stats.visited_stations == frozenset({"TYO", "OSA", "PLY", "LPD"})
        assert stats.last_journey_at == second.completed_at

    def test_formatting(self):
        stats = LedgerStatistics(total_focus_time=5400, total_distance_miles=1234)
        assert stats.formatted_focus_time == "1h 30m"
        assert stats.formatted_distance == "1.2k mi"
        assert LedgerStatistics(total_focus_time=1500).formatted_focus_time == "25m"
        assert LedgerStatistics(total_distance_miles=250.4).formatted_distance == "250 mi"


class TestDailyViews:
    def test_focus_time_today(self, ledger, make_journey):
        ledger.append(make_journey(days_ago=0, duration=1500))
        ledger.append(make_journey(days_ago=0, duration=600))
        ledger.append(make_journey(days_ago=1, duration=3000))

        assert len(ledger.today()) == 2
        assert ledger.focus_time_today() == 2100

    def test_focus_time_this_week_starts_monday(self, ledger, make_journey):
        # The clock's today is Saturday 2026-10-17; Monday is five days back
        ledger.append(make_journey(days_ago=5, duration=600))
        ledger.append(make_journey(days_ago=6, duration=900))
        ledger.append(make_journey(days_ago=0, duration=300))

        assert ledger.focus_time_this_week() == 900

    def test_focus_by_day_fills_missing_days(self, ledger, make_journey):
        ledger.append(make_journey(days_ago=0, duration=600))
        ledger.append(make_journey(days_ago=2, duration=1200))

        days = ledger.focus_by_day(3)
        assert [d for d, _ in days] == [TODAY - timedelta(days=2), TODAY - timedelta(days=1), TODAY]
        assert [s for _, s in days] == [1200, 0.0, 600]


# ---------------------------------------------------------------------------
# load
# ---------------------------------------------------------------------------


class TestLoad:
    def test_first_run_loads_nothing(self, ledger):
        assert ledger.load() == 0
        assert ledger.statistics().total_journeys == 0

    def test_load_restores_order_and_skips_unfinished(self, clock, make_journey, tokyo, osaka):
        older, newer = make_journey(days_ago=1), make_journey(days_ago=0)
        pending = JourneyFactory(clock=clock).create(tokyo, osaka, 60)
        store = MemoryJourneyStore([newer, pending, older])

        ledger = JourneyLedger(store=store, clock=clock)
        assert ledger.load() == 2
        assert [j.id for j in ledger.history()] == [newer.id, older.id]
        assert ledger.statistics().current_streak == 2

    def test_load_twice_does_not_duplicate(self, clock, make_journey):
        store = MemoryJourneyStore([make_journey()])
        ledger = JourneyLedger(store=store, clock=clock)
        ledger.load()
        assert ledger.load() == 0
        assert len(ledger) == 1

    def test_load_failure_raises(self, clock):
        ledger = JourneyLedger(store=FailingStore(fail_load=True), clock=clock)
        with pytest.raises(PersistenceFailure):
            ledger.load()
