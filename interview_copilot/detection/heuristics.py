"""Local, pattern-based question detection and typing."""

import re
from typing import List, Tuple

from ..models.questions import QuestionAnalysis, QuestionType

DIRECT_QUESTION = re.compile(r"\?$")

QUESTION_WORDS = re.compile(
    r"^(who|what|when|where|why|how|which|whose|whom|can|could|would|should|will|do|does|did|"
    r"is|are|was|were|have|has|had|may|might)\b",
    re.IGNORECASE,
)

TELL_ME_ABOUT = re.compile(
    r"^(tell me|describe|explain|walk me through|give me an example|share|talk about)",
    re.IGNORECASE,
)

BEHAVIORAL = re.compile(
    r"^(have you ever|can you (tell|describe|give)|what would you|how would you|when was a time|"
    r"describe a (time|situation)|give me an example)",
    re.IGNORECASE,
)

TECHNICAL = re.compile(
    r"^(how (do|does|would) you|what is|what are|explain|describe how|what's the difference|compare)",
    re.IGNORECASE,
)

# Checked in order; first match wins.
_PATTERNS: List[Tuple[re.Pattern, int, str]] = [
    (BEHAVIORAL, 90, "behavioral"),
    (TELL_ME_ABOUT, 85, "request"),
    (TECHNICAL, 80, "technical"),
    (QUESTION_WORDS, 70, "general"),
]


def analyze_for_question(text: str) -> QuestionAnalysis:
    """Score how likely ``text`` is an interview question (0-100)."""
    stripped = text.strip()
    if DIRECT_QUESTION.search(stripped):
        return QuestionAnalysis(is_question=True, confidence=95, pattern="direct")

    lowered = stripped.lower()
    for pattern, confidence, name in _PATTERNS:
        if pattern.search(lowered):
            return QuestionAnalysis(is_question=True, confidence=confidence, pattern=name)

    return QuestionAnalysis(is_question=False, confidence=0, pattern="statement")


# Keyword lists per type, checked in order.
_TYPE_KEYWORDS: List[Tuple[QuestionType, Tuple[str, ...]]] = [
    (QuestionType.CLARIFYING, (
        "what do you mean", "could you clarify", "can you clarify", "did you mean", "to clarify",
    )),
    (QuestionType.FOLLOW_UP, (
        "follow up", "follow-up", "going back to", "you mentioned", "earlier you said", "and then what",
    )),
    (QuestionType.BEHAVIORAL, (
        "tell me about a time", "describe a time", "describe a situation", "give me an example",
        "have you ever", "when was a time", "conflict", "failure", "failed", "mistake",
    )),
    (QuestionType.SITUATIONAL, (
        "what would you do", "how would you handle", "imagine", "suppose", "if you were", "what if",
    )),
    (QuestionType.TECHNICAL, (
        "design", "architecture", "algorithm", "complexity", "scale", "database", "api",
        "difference between", "how does", "how do you implement", "debug", "code",
    )),
    (QuestionType.MOTIVATION, (
        "why do you want", "why are you interested", "why this", "what motivates", "career goals",
        "where do you see yourself", "why are you leaving",
    )),
    (QuestionType.CULTURE_FIT, (
        "team", "culture", "work style", "values", "collaborate", "work environment",
    )),
    (QuestionType.EXPERIENCE, (
        "your experience", "walk me through your", "your background", "your resume",
        "tell me about yourself", "previous role", "current role", "worked on",
    )),
]


_TYPE_PATTERNS: List[Tuple[QuestionType, re.Pattern]] = [
    (question_type, re.compile(r"\b(" + "|".join(re.escape(k) for k in keywords) + r")\b"))
    for question_type, keywords in _TYPE_KEYWORDS
]


def classify_question_type(text: str) -> QuestionType:
    """Assign a question type from keywords, defaulting to GENERAL."""
    lowered = text.strip().lower()
    for question_type, pattern in _TYPE_PATTERNS:
        if pattern.search(lowered):
            return question_type
    return QuestionType.GENERAL
