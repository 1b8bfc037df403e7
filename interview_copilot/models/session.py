"""Session-related data models."""

from dataclasses import dataclass
from enum import Enum


class SessionStatus(Enum):
    """Lifecycle of a live copilot session."""
    NOT_STARTED = "not-started"
    LISTENING = "listening"
    PAUSED = "paused"
    ENDED = "ended"


@dataclass(frozen=True)
class TranscriptEntry:
    """One finalized line of the conversation transcript."""
    id: str
    text: str
    timestamp: str
    speaker: str = "unknown"


@dataclass
class SessionStats:
    """Running statistics for a session."""
    questions_detected: int = 0
    suggestions_generated: int = 0
    avg_response_time_ms: float = 0.0
