"""Question detection for the interview copilot."""

from .heuristics import analyze_for_question, classify_question_type
from .dispatcher import DetectionDispatcher, QuestionClassifier, SuggestionGenerator
from .publisher import CopilotPublisher
from .remote import (
    ChatGPTEngine,
    ChatGPTQuestionClassifier,
    ChatGPTSuggestionGenerator,
    RemoteCallError,
)

__all__ = [
    "analyze_for_question",
    "classify_question_type",
    "DetectionDispatcher",
    "QuestionClassifier",
    "SuggestionGenerator",
    "CopilotPublisher",
    "ChatGPTEngine",
    "ChatGPTQuestionClassifier",
    "ChatGPTSuggestionGenerator",
    "RemoteCallError",
]
