"""Clock sources for the session engine."""

from __future__ import annotations

import time
from datetime import datetime
from typing import Protocol


class Clock(Protocol):
    """Time source injected into the timer, factory and coordinator."""

    def monotonic(self) -> float:
        """Seconds from an arbitrary origin; never adjusted by wall-clock changes."""
        ...

    def now(self) -> datetime:
        """Current local wall-clock time (timezone aware), used for timestamps."""
        ...


class SystemClock:
    """Clock backed by the operating system."""

    def monotonic(self) -> float:
        return time.monotonic()

    def now(self) -> datetime:
        return datetime.now().astimezone()
