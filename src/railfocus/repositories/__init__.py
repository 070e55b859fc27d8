"""Repository interfaces for RailFocus persistence."""

from railfocus.repositories.repository import JourneyStore, MemoryJourneyStore

__all__ = ["JourneyStore", "MemoryJourneyStore"]
