"""Fixed-interval tick pump that drives a SessionCoordinator."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from railfocus.models.journey import Journey
from railfocus.services.coordinator import SessionCoordinator

logger = logging.getLogger(__name__)


class Ticker:
    """Calls ``coordinator.on_tick()`` every *interval* seconds until the journey ends.

    Ctrl+C during the loop interrupts the journey so it is still recorded.
    """

    def __init__(
        self,
        coordinator: SessionCoordinator,
        interval: float = 1.0,
        sleep: Callable[[float], None] | None = None,
    ):
        if interval <= 0:
            raise ValueError("Tick interval must be positive")
        self.coordinator = coordinator
        self.interval = interval
        self.sleep = sleep or time.sleep

    def run(self) -> Journey | None:
        """
        Pump ticks until the active journey reaches a terminal state.

        Returns:
            The finalized journey (completed or interrupted), or None if
            nothing was active
        """
        try:
            while self.coordinator.is_active:
                finished = self.coordinator.on_tick()
                if finished is not None:
                    return finished
                self.sleep(self.interval)
        except KeyboardInterrupt:
            logger.info("Tick loop interrupted by user")
            return self.coordinator.interrupt_journey()
        return None
