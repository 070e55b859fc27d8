"""Custom exceptions for RailFocus."""


class RailFocusError(Exception):
    """Base exception for all RailFocus errors."""


class InvalidTransition(RailFocusError):
    """Raised when an operation is not legal in the current timer or journey state."""


class InvalidJourney(RailFocusError):
    """Raised when a journey request is malformed (same stations, bad duration, unknown tag)."""


class StationNotFoundError(InvalidJourney):
    """Raised when a station code does not exist in the catalog."""


class SessionAlreadyActive(RailFocusError):
    """Raised when starting a journey while another one is in progress."""


class NoActiveSession(RailFocusError):
    """Raised when a session operation needs an active journey and there is none."""


class PersistenceFailure(RailFocusError):
    """Raised when the journey store could not durably save a ledger update."""
