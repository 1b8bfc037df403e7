"""Data models for the interview copilot."""

from .transcription import TranscriptChunk, EngineStatus
from .audio import AudioStats, AudioEvent
from .session import SessionStatus, SessionStats, TranscriptEntry
from .questions import (
    QuestionType,
    QuestionAnalysis,
    ClassificationResult,
    DetectedQuestion,
    CopilotSuggestion,
)

__all__ = [
    "TranscriptChunk",
    "EngineStatus",
    "AudioStats",
    "AudioEvent",
    "SessionStatus",
    "SessionStats",
    "TranscriptEntry",
    "QuestionType",
    "QuestionAnalysis",
    "ClassificationResult",
    "DetectedQuestion",
    "CopilotSuggestion",
]
