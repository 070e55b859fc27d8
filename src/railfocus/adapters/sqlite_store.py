"""SQLite-backed journey store."""

from __future__ import annotations

import os
import sqlite3
from datetime import datetime
from pathlib import Path

from platformdirs import user_data_dir

from railfocus.models.journey import FocusTag, Journey, JourneyOutcome
from railfocus.models.station import Station
from railfocus.repositories.repository import JourneyStore

CREATE_JOURNEYS_TABLE = """
CREATE TABLE IF NOT EXISTS journeys (
    id TEXT PRIMARY KEY,
    seq INTEGER NOT NULL,
    origin TEXT NOT NULL,
    destination TEXT NOT NULL,
    planned_duration REAL NOT NULL,
    tag TEXT,
    started_at TEXT NOT NULL,
    completed_at TEXT,
    outcome TEXT NOT NULL,
    distance_miles REAL NOT NULL,
    elapsed_seconds REAL NOT NULL DEFAULT 0
)
"""

UPSERT_JOURNEY = """
INSERT INTO journeys (
    id, seq, origin, destination, planned_duration, tag,
    started_at, completed_at, outcome, distance_miles, elapsed_seconds
) VALUES (
    ?, (SELECT COALESCE(MAX(seq), -1) + 1 FROM journeys), ?, ?, ?, ?, ?, ?, ?, ?, ?
)
ON CONFLICT(id) DO UPDATE SET
    completed_at = excluded.completed_at,
    outcome = excluded.outcome,
    elapsed_seconds = excluded.elapsed_seconds
"""


class SqliteJourneyStore(JourneyStore):
    """Stores the journey ledger in a local SQLite database."""

    def __init__(self, db_path: Path | str | None = None):
        if db_path is None:
            db_path = Path(user_data_dir("railfocus")) / "journeys.db"

        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        is_new_database = not self.db_path.exists()
        self._init_database()

        # Owner read/write only
        if is_new_database:
            os.chmod(self.db_path, 0o600)

    def _init_database(self) -> None:
        """Initialize database schema."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(CREATE_JOURNEYS_TABLE)
            conn.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_journeys_completed
                ON journeys(completed_at)
                """
            )
            conn.commit()

    @staticmethod
    def _to_row(journey: Journey) -> tuple:
        return (
            journey.id,
            journey.origin.model_dump_json(),
            journey.destination.model_dump_json(),
            journey.planned_duration,
            journey.tag.value if journey.tag else None,
            journey.started_at.isoformat(),
            journey.completed_at.isoformat() if journey.completed_at else None,
            journey.outcome.value,
            journey.distance_miles,
            journey.elapsed_seconds,
        )

    @staticmethod
    def _from_row(row: sqlite3.Row) -> Journey:
        return Journey(
            id=row["id"],
            origin=Station.model_validate_json(row["origin"]),
            destination=Station.model_validate_json(row["destination"]),
            planned_duration=row["planned_duration"],
            tag=FocusTag(row["tag"]) if row["tag"] else None,
            started_at=datetime.fromisoformat(row["started_at"]),
            completed_at=(
                datetime.fromisoformat(row["completed_at"]) if row["completed_at"] else None
            ),
            outcome=JourneyOutcome(row["outcome"]),
            distance_miles=row["distance_miles"],
            elapsed_seconds=row["elapsed_seconds"],
        )

    def persist(self, journeys: list[Journey]) -> None:
        """
        Upsert the whole snapshot in one transaction.

        Journeys not yet stored get the next sequence number, oldest first, so
        rows written by an earlier process keep their place in the order.
        """
        rows = [self._to_row(j) for j in reversed(journeys)]
        with sqlite3.connect(self.db_path) as conn:
            conn.executemany(UPSERT_JOURNEY, rows)
            conn.commit()

    def load(self) -> list[Journey]:
        """Load journeys, most recent first."""
        with sqlite3.connect(self.db_path) as conn:
            conn.row_factory = sqlite3.Row
            cursor = conn.execute("SELECT * FROM journeys ORDER BY seq DESC")
            return [self._from_row(row) for row in cursor.fetchall()]

    def count(self) -> int:
        with sqlite3.connect(self.db_path) as conn:
            return conn.execute("SELECT COUNT(*) FROM journeys").fetchone()[0]
