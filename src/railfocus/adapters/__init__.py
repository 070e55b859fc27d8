"""Storage adapters for RailFocus."""

from railfocus.adapters.sqlite_store import SqliteJourneyStore

__all__ = ["SqliteJourneyStore"]
