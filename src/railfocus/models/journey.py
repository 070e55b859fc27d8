"""Journey data model and factory."""

from __future__ import annotations

import math
import uuid
from collections.abc import Callable
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from railfocus.exceptions import InvalidJourney, InvalidTransition
from railfocus.models.station import Station, haversine_miles
from railfocus.utils.clock import Clock, SystemClock


class JourneyOutcome(str, Enum):
    """Lifecycle outcome of a journey."""

    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    INTERRUPTED = "interrupted"


class FocusTag(str, Enum):
    """Optional classification label for a focus journey."""

    WORK = "work"
    STUDY = "study"
    CODING = "coding"
    WRITING = "writing"
    ADMIN = "admin"
    PERSONAL = "personal"


class Journey(BaseModel):
    """One focus session, modeled as a train trip."""

    id: str
    origin: Station
    destination: Station
    planned_duration: float = Field(..., gt=0, description="Seconds")
    tag: FocusTag | None = None
    started_at: datetime
    completed_at: datetime | None = None
    outcome: JourneyOutcome = JourneyOutcome.IN_PROGRESS
    distance_miles: float = Field(..., ge=0)
    elapsed_seconds: float = Field(default=0.0, ge=0, description="Actual focus time")

    @property
    def route_code(self) -> str:
        return f"{self.origin.code} → {self.destination.code}"

    @property
    def is_terminal(self) -> bool:
        return self.outcome is not JourneyOutcome.IN_PROGRESS

    def complete(self, at: datetime, elapsed_seconds: float) -> None:
        """Mark the journey as arrived."""
        self._finish(JourneyOutcome.COMPLETED, at, elapsed_seconds)

    def interrupt(self, at: datetime, elapsed_seconds: float) -> None:
        """Mark the journey as ended early."""
        self._finish(JourneyOutcome.INTERRUPTED, at, elapsed_seconds)

    def _finish(self, outcome: JourneyOutcome, at: datetime, elapsed_seconds: float) -> None:
        if self.is_terminal:
            raise InvalidTransition(
                f"Journey {self.id} is already {self.outcome.value}, cannot mark {outcome.value}"
            )
        self.outcome = outcome
        self.completed_at = at
        self.elapsed_seconds = max(0.0, min(elapsed_seconds, self.planned_duration))


class JourneyFactory:
    """Validates a user's selection and builds an in-progress Journey."""

    def __init__(
        self,
        clock: Clock | None = None,
        id_factory: Callable[[], str] | None = None,
    ):
        self.clock = clock or SystemClock()
        self.id_factory = id_factory or (lambda: str(uuid.uuid4()))

    def create(
        self,
        origin: Station,
        destination: Station,
        duration: float,
        tag: FocusTag | str | None = None,
    ) -> Journey:
        """
        Create a new journey.

        Args:
            origin: Departure station
            destination: Arrival station, must differ from origin
            duration: Planned duration in seconds, must be positive
            tag: Optional FocusTag (or its string value)

        Raises:
            InvalidJourney: If the request is malformed. No journey is produced.
        """
        if origin.code == destination.code:
            raise InvalidJourney("Origin and destination must be different stations")
        if duration is None or not math.isfinite(duration) or duration <= 0:
            raise InvalidJourney(f"Duration must be positive, got {duration}")

        if tag is not None and not isinstance(tag, FocusTag):
            try:
                tag = FocusTag(str(tag).lower())
            except ValueError as e:
                raise InvalidJourney(f"Unknown tag '{tag}'") from e

        return Journey(
            id=self.id_factory(),
            origin=origin,
            destination=destination,
            planned_duration=float(duration),
            tag=tag,
            started_at=self.clock.now(),
            distance_miles=haversine_miles(origin, destination),
        )
