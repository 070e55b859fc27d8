"""RailFocus domain models."""

from railfocus.models.journey import FocusTag, Journey, JourneyFactory, JourneyOutcome
from railfocus.models.station import STATIONS, Station, find_station, haversine_miles
from railfocus.models.timer import JourneyPhase, SessionTimer, TimerState

__all__ = [
    "STATIONS",
    "Station",
    "find_station",
    "haversine_miles",
    "FocusTag",
    "Journey",
    "JourneyFactory",
    "JourneyOutcome",
    "JourneyPhase",
    "SessionTimer",
    "TimerState",
]
