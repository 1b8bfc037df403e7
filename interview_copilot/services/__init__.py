"""Services layer for the interview copilot."""

from .session_state import SessionState, InvalidTransitionError, SessionEndedError

__all__ = [
    "SessionState",
    "InvalidTransitionError",
    "SessionEndedError",
]
