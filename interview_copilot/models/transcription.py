"""Transcription-related data models."""

import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class EngineStatus(Enum):
    """Status of the speech recognition engine."""
    IDLE = "idle"
    STARTING = "starting"
    LISTENING = "listening"
    PAUSED = "paused"
    ERROR = "error"
    NOT_SUPPORTED = "not-supported"


def _chunk_id(index: int) -> str:
    return f"chunk-{int(time.time() * 1000)}-{index}"


@dataclass(frozen=True)
class TranscriptChunk:
    """One incremental unit of speech-to-text output, interim or final."""
    id: str
    text: str
    is_final: bool
    confidence: float  # 0..1
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())

    @classmethod
    def create(cls, text: str, is_final: bool, confidence: float, index: int = 0) -> "TranscriptChunk":
        """Build a chunk with a generated id and the current timestamp."""
        return cls(
            id=_chunk_id(index),
            text=text,
            is_final=is_final,
            confidence=confidence,
        )
