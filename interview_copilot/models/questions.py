"""Data models for detected questions and generated suggestions."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class QuestionType(Enum):
    """Kind of interview question."""
    BEHAVIORAL = "behavioral"
    TECHNICAL = "technical"
    SITUATIONAL = "situational"
    EXPERIENCE = "experience"
    MOTIVATION = "motivation"
    CULTURE_FIT = "culture-fit"
    CLARIFYING = "clarifying"
    FOLLOW_UP = "follow-up"
    GENERAL = "general"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["QuestionType"]:
        """Map a free-form type string to a QuestionType, or None if unknown."""
        if not value:
            return None
        normalized = value.strip().lower().replace("_", "-").replace(" ", "-")
        for member in cls:
            if member.value == normalized:
                return member
        return None


@dataclass(frozen=True)
class QuestionAnalysis:
    """Result of the local question heuristic."""
    is_question: bool
    confidence: int  # 0..100
    pattern: str     # which heuristic matched: direct, behavioral, request, ...


class ClassificationResult(BaseModel):
    """Remote classifier judgment for one candidate sentence."""
    is_question: bool = Field(False, alias="isQuestion")
    confidence: float = 0.0
    question_type: Optional[str] = Field(None, alias="type")
    refined_text: Optional[str] = Field(None, alias="refinedText")

    model_config = {"populate_by_name": True}


@dataclass(frozen=True)
class DetectedQuestion:
    """A confirmed interview question."""
    id: str
    text: str
    type: QuestionType
    confidence: float
    detected_at: datetime
    source_transcript: str


@dataclass(frozen=True)
class CopilotSuggestion:
    """Generated answer suggestion for one detected question."""
    id: str
    question_id: str
    content: str
    generated_at: datetime = field(default_factory=datetime.now)
    generation_time_ms: float = 0.0
