"""Gamification badges unlocked by journey statistics."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from railfocus.models.journey import Journey, JourneyOutcome
from railfocus.models.ledger import LedgerStatistics

MARATHON_SECONDS = 90 * 60


class Achievement:
    """Represents an achievement badge."""

    def __init__(
        self,
        id: str,
        name: str,
        description: str,
        icon: str,
        requirement: dict[str, Any],
    ):
        self.id = id
        self.name = name
        self.description = description
        self.icon = icon
        self.requirement = requirement

    def __repr__(self) -> str:
        return f"Achievement({self.id!r})"


ACHIEVEMENTS = [
    Achievement(
        "first_journey",
        "First Ride",
        "Complete your first focus journey",
        "🚆",
        {"type": "total_journeys", "value": 1},
    ),
    Achievement(
        "ten_journeys",
        "Rail Regular",
        "Complete 10 focus journeys",
        "⭐",
        {"type": "total_journeys", "value": 10},
    ),
    Achievement(
        "week_warrior",
        "Week Warrior",
        "Maintain a 7-day focus streak",
        "🔥",
        {"type": "streak", "value": 7},
    ),
    Achievement(
        "globe_trotter",
        "Globe Trotter",
        "Visit 10 different stations",
        "🌍",
        {"type": "visited_stations", "value": 10},
    ),
    Achievement(
        "marathon",
        "Marathon",
        "Complete a 90-minute focus journey",
        "🏆",
        {"type": "single_journey_seconds", "value": MARATHON_SECONDS},
    ),
]


def _is_unlocked(
    achievement: Achievement, stats: LedgerStatistics, longest_planned: float
) -> bool:
    req_type = achievement.requirement["type"]
    value = achievement.requirement["value"]

    if req_type == "total_journeys":
        return stats.total_journeys >= value
    if req_type == "streak":
        return max(stats.current_streak, stats.longest_streak) >= value
    if req_type == "visited_stations":
        return len(stats.visited_stations) >= value
    if req_type == "single_journey_seconds":
        return longest_planned >= value
    return False


def unlocked_achievements(
    stats: LedgerStatistics, journeys: Iterable[Journey]
) -> list[Achievement]:
    """Achievements earned so far, in catalog order."""
    longest_planned = max(
        (j.planned_duration for j in journeys if j.outcome is JourneyOutcome.COMPLETED),
        default=0.0,
    )
    return [a for a in ACHIEVEMENTS if _is_unlocked(a, stats, longest_planned)]
