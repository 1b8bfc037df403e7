"""State of one live copilot session."""

import logging
import random
import string
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..models.questions import CopilotSuggestion, DetectedQuestion
from ..models.session import SessionStats, SessionStatus, TranscriptEntry

logger = logging.getLogger(__name__)


class InvalidTransitionError(Exception):
    """Requested session status change is not allowed."""


class SessionEndedError(Exception):
    """The session has ended and no longer accepts writes."""


SESSION_TRANSITIONS = {
    SessionStatus.NOT_STARTED: {SessionStatus.LISTENING, SessionStatus.ENDED},
    SessionStatus.LISTENING: {SessionStatus.PAUSED, SessionStatus.ENDED},
    SessionStatus.PAUSED: {SessionStatus.LISTENING, SessionStatus.ENDED},
    SessionStatus.ENDED: set(),
}


def new_session_id() -> str:
    """Timestamp-based session id with a random suffix."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    random_suffix = ''.join(random.choices(string.ascii_lowercase + string.digits, k=4))
    return f"{timestamp}_{random_suffix}"


def new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


class SessionState:
    """Accumulated transcript, questions, suggestions and stats for one session.

    Written only by the pipeline; the UI reads it. An ended session is
    frozen and a new session needs a new instance.
    """

    def __init__(self,
                 session_id: Optional[str] = None,
                 application_id: Optional[str] = None,
                 context_used: Optional[Dict[str, Any]] = None):
        self.session_id = session_id or new_session_id()
        self.application_id = application_id
        self.context_used: Dict[str, Any] = context_used or {}
        self.status = SessionStatus.NOT_STARTED
        self.started_at = datetime.now()
        self.ended_at: Optional[datetime] = None

        self.transcript: List[TranscriptEntry] = []
        self.detected_questions: List[DetectedQuestion] = []
        self.suggestions: List[CopilotSuggestion] = []  # newest first
        self.stats = SessionStats()

    @property
    def is_ended(self) -> bool:
        return self.status == SessionStatus.ENDED

    def mark_listening(self) -> None:
        self._transition(SessionStatus.LISTENING)

    def mark_paused(self) -> None:
        self._transition(SessionStatus.PAUSED)

    def end(self) -> None:
        """End the session. Ending twice is a no-op."""
        if self.is_ended:
            return
        self._transition(SessionStatus.ENDED)
        self.ended_at = datetime.now()
        logger.info(f"Session {self.session_id} ended: {self.stats.questions_detected} questions, "
                    f"{self.stats.suggestions_generated} suggestions")

    def _transition(self, status: SessionStatus) -> None:
        if status == self.status:
            return
        if status not in SESSION_TRANSITIONS[self.status]:
            raise InvalidTransitionError(f"Cannot move session from {self.status.value} to {status.value}")
        logger.debug(f"Session {self.session_id}: {self.status.value} -> {status.value}")
        self.status = status

    def _ensure_active(self) -> None:
        if self.is_ended:
            raise SessionEndedError(f"Session {self.session_id} has ended")

    def add_transcript_entry(self, text: str, timestamp: str, speaker: str = "unknown") -> TranscriptEntry:
        self._ensure_active()
        entry = TranscriptEntry(id=new_id("t"), text=text, timestamp=timestamp, speaker=speaker)
        self.transcript.append(entry)
        return entry

    def record_question(self, question: DetectedQuestion) -> None:
        self._ensure_active()
        self.detected_questions.append(question)
        self.stats.questions_detected += 1

    def record_suggestion(self, suggestion: CopilotSuggestion) -> None:
        """Prepend a suggestion and fold its latency into the running average."""
        self._ensure_active()
        self.suggestions.insert(0, suggestion)

        previous_count = self.stats.suggestions_generated
        previous_avg = self.stats.avg_response_time_ms
        self.stats.suggestions_generated = previous_count + 1
        self.stats.avg_response_time_ms = (
            (previous_avg * previous_count + suggestion.generation_time_ms) / (previous_count + 1)
        )

    def get_suggestion(self, question_id: str) -> Optional[CopilotSuggestion]:
        for suggestion in self.suggestions:
            if suggestion.question_id == question_id:
                return suggestion
        return None

    def duration_ms(self) -> float:
        end = self.ended_at or datetime.now()
        return (end - self.started_at).total_seconds() * 1000.0

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serializable snapshot of the session."""
        return {
            "session_id": self.session_id,
            "application_id": self.application_id,
            "status": self.status.value,
            "started_at": self.started_at.isoformat(),
            "ended_at": self.ended_at.isoformat() if self.ended_at else None,
            "duration_ms": self.duration_ms(),
            "context_used": self.context_used,
            "transcript": [
                {"id": e.id, "speaker": e.speaker, "text": e.text, "timestamp": e.timestamp}
                for e in self.transcript
            ],
            "detected_questions": [
                {
                    "id": q.id,
                    "text": q.text,
                    "type": q.type.value,
                    "confidence": q.confidence,
                    "detected_at": q.detected_at.isoformat(),
                    "source_transcript": q.source_transcript,
                }
                for q in self.detected_questions
            ],
            "suggestions": [
                {
                    "id": s.id,
                    "question_id": s.question_id,
                    "content": s.content,
                    "generated_at": s.generated_at.isoformat(),
                    "generation_time_ms": s.generation_time_ms,
                }
                for s in self.suggestions
            ],
            "stats": {
                "questions_detected": self.stats.questions_detected,
                "suggestions_generated": self.stats.suggestions_generated,
                "avg_response_time_ms": self.stats.avg_response_time_ms,
            },
        }
