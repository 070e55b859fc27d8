"""Shared test fixtures and configuration.

Provides a manual clock so timer and ledger tests control time
deterministically, plus stations and a ledger wired to an in-memory store.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from unittest.mock import patch

import pytest

from railfocus.models.journey import Journey, JourneyFactory
from railfocus.models.ledger import CountingPolicy, JourneyLedger
from railfocus.models.station import find_station
from railfocus.repositories.repository import MemoryJourneyStore
from railfocus.services.coordinator import SessionCoordinator


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, wall: datetime | None = None, mono: float = 1000.0):
        self._wall = wall or datetime(2026, 10, 17, 9, 0).astimezone()
        self._mono = mono

    def monotonic(self) -> float:
        return self._mono

    def now(self) -> datetime:
        return self._wall

    def advance(self, seconds: float) -> None:
        self._mono += seconds
        self._wall += timedelta(seconds=seconds)

    def set_wall(self, wall: datetime) -> None:
        """Jump the wall clock without touching monotonic time."""
        self._wall = wall


@pytest.fixture()
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture()
def tokyo():
    return find_station("TYO")


@pytest.fixture()
def osaka():
    return find_station("OSA")


@pytest.fixture()
def store() -> MemoryJourneyStore:
    return MemoryJourneyStore()


@pytest.fixture()
def ledger(store, clock) -> JourneyLedger:
    return JourneyLedger(store=store, policy=CountingPolicy(), clock=clock)


@pytest.fixture()
def coordinator(ledger, clock) -> SessionCoordinator:
    return SessionCoordinator(ledger=ledger, clock=clock)


@pytest.fixture()
def make_journey(clock, tokyo, osaka):
    """Build a finalized journey ending *days_ago* days before the clock's today."""
    factory = JourneyFactory(clock=clock)

    def _make(
        days_ago: int = 0,
        outcome: str = "completed",
        duration: float = 1500.0,
        elapsed: float | None = None,
        origin=None,
        destination=None,
    ) -> Journey:
        journey = factory.create(origin or tokyo, destination or osaka, duration)
        finished_at = clock.now() - timedelta(days=days_ago)
        spent = duration if elapsed is None else elapsed
        if outcome == "completed":
            journey.complete(finished_at, spent)
        else:
            journey.interrupt(finished_at, spent)
        return journey

    return _make


@pytest.fixture()
def tmp_dirs(tmp_path):
    """Point platformdirs lookups at *tmp_path* and clear the cached config service."""
    from railfocus.services.config_service import get_config_service

    tmpdir = str(tmp_path)
    get_config_service.cache_clear()
    with patch("railfocus.services.config_service.user_config_dir", return_value=tmpdir):
        with patch("railfocus.services.config_service.user_data_dir", return_value=tmpdir):
            yield tmp_path
    get_config_service.cache_clear()
