"""
Exit codes for the RailFocus command line.

Semantic exit codes so scripts driving the CLI can tell what happened.
"""

from railfocus.exceptions import (
    InvalidJourney,
    InvalidTransition,
    NoActiveSession,
    RailFocusError,
    SessionAlreadyActive,
    StationNotFoundError,
)

# Success
SUCCESS = 0

# General error (unspecified)
ERROR_GENERAL = 1

# Invalid arguments or validation error
ERROR_INVALID_ARGS = 2

# Operation not allowed in the current session state
ERROR_INVALID_STATE = 3

# Resource not found
ERROR_NOT_FOUND = 5


def get_exit_code_name(code: int) -> str:
    """Get the name of an exit code for display purposes."""
    code_names = {
        SUCCESS: "SUCCESS",
        ERROR_GENERAL: "ERROR_GENERAL",
        ERROR_INVALID_ARGS: "ERROR_INVALID_ARGS",
        ERROR_INVALID_STATE: "ERROR_INVALID_STATE",
        ERROR_NOT_FOUND: "ERROR_NOT_FOUND",
    }
    return code_names.get(code, f"UNKNOWN({code})")


def exit_code_for(error: RailFocusError) -> int:
    """Map a RailFocus error to its exit code."""
    # StationNotFoundError first: it is also an InvalidJourney
    if isinstance(error, StationNotFoundError):
        return ERROR_NOT_FOUND
    if isinstance(error, InvalidJourney):
        return ERROR_INVALID_ARGS
    if isinstance(error, (InvalidTransition, SessionAlreadyActive, NoActiveSession)):
        return ERROR_INVALID_STATE
    return ERROR_GENERAL
