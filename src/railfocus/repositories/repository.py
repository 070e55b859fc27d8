"""Repository abstraction layer for RailFocus.

The ledger only talks to storage through ``JourneyStore``, following the
ports & adapters pattern: the core stays independent of the storage medium
(SQLite file, memory, anything else an adapter provides).
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from railfocus.models.journey import Journey


class JourneyStore(ABC):
    """Abstract base class for ledger persistence.

    Adapters must round-trip every Journey field losslessly.
    """

    @abstractmethod
    def persist(self, journeys: list[Journey]) -> None:
        """Durably store the full ledger snapshot.

        Args:
            journeys: Finalized journeys, most recent first

        Raises:
            Exception: Any adapter error; the ledger wraps it as PersistenceFailure
        """
        raise NotImplementedError("JourneyStore.persist() must be implemented by adapter")

    @abstractmethod
    def load(self) -> list[Journey]:
        """Load the stored ledger snapshot.

        Returns:
            Finalized journeys, most recent first; empty on first run
        """
        raise NotImplementedError("JourneyStore.load() must be implemented by adapter")


class MemoryJourneyStore(JourneyStore):
    """Keeps the snapshot in memory. Useful for tests and ephemeral runs."""

    def __init__(self, journeys: list[Journey] | None = None):
        self._journeys = [j.model_copy(deep=True) for j in journeys or []]
        self.persist_count = 0

    def persist(self, journeys: list[Journey]) -> None:
        self._journeys = [j.model_copy(deep=True) for j in journeys]
        self.persist_count += 1

    def load(self) -> list[Journey]:
        return [j.model_copy(deep=True) for j in self._journeys]
