"""Wires configuration, storage and the session engine together."""

from __future__ import annotations

import logging

from railfocus.adapters.sqlite_store import SqliteJourneyStore
from railfocus.exceptions import PersistenceFailure
from railfocus.models.ledger import CountingPolicy, JourneyLedger
from railfocus.services.config_service import ConfigService, get_config_service
from railfocus.services.coordinator import SessionCoordinator
from railfocus.utils.clock import Clock, SystemClock

logger = logging.getLogger(__name__)


def get_session_coordinator(
    config_service: ConfigService | None = None,
    clock: Clock | None = None,
) -> SessionCoordinator:
    """
    Build a SessionCoordinator backed by the configured SQLite store.

    A ledger that cannot be loaded starts empty; the failure is logged and
    the session can still run.
    """
    svc = config_service or get_config_service()
    config = svc.load_config()
    clock = clock or SystemClock()

    store = SqliteJourneyStore(svc.database_path)
    ledger = JourneyLedger(
        store=store,
        policy=CountingPolicy(count_interrupted=config.ledger.count_interrupted),
        clock=clock,
    )
    try:
        ledger.load()
    except PersistenceFailure as e:
        logger.warning(f"Starting with an empty ledger: {e}")

    return SessionCoordinator(ledger=ledger, clock=clock)
