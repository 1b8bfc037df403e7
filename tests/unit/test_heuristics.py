"""Unit tests for local question heuristics."""

import pytest

from interview_copilot.detection.heuristics import analyze_for_question, classify_question_type
from interview_copilot.models.questions import QuestionType


@pytest.mark.unit
class TestAnalyzeForQuestion:
    """Test cases for the local question score."""

    @pytest.mark.parametrize("text, confidence, pattern", [
        ("Can you walk me through your design?", 95, "direct"),
        ("Have you ever disagreed with a manager", 90, "behavioral"),
        ("Tell me about a time you failed.", 85, "request"),
        ("What is the difference between a process and a thread", 80, "technical"),
        ("Where did you work before", 70, "general"),
    ])
    def test_question_patterns(self, text, confidence, pattern):
        analysis = analyze_for_question(text)

        assert analysis.is_question is True
        assert analysis.confidence == confidence
        assert analysis.pattern == pattern

    @pytest.mark.parametrize("text", [
        "I worked at a startup for three years.",
        "so anyway",
        "",
    ])
    def test_statements(self, text):
        analysis = analyze_for_question(text)

        assert analysis.is_question is False
        assert analysis.confidence == 0

    def test_case_and_whitespace_insensitive(self):
        assert analyze_for_question("  HAVE YOU EVER led a team  ").confidence == 90


@pytest.mark.unit
class TestClassifyQuestionType:
    """Test cases for keyword-based question typing."""

    @pytest.mark.parametrize("text, expected", [
        ("Tell me about a time you failed.", QuestionType.BEHAVIORAL),
        ("What do you mean by that?", QuestionType.CLARIFYING),
        ("You mentioned Kafka, how did that go?", QuestionType.FOLLOW_UP),
        ("What would you do if a deploy broke production?", QuestionType.SITUATIONAL),
        ("How would you design a URL shortener?", QuestionType.TECHNICAL),
        ("Is this the API you built?", QuestionType.TECHNICAL),
        ("Why do you want to work here?", QuestionType.MOTIVATION),
        ("How do you collaborate with your team?", QuestionType.CULTURE_FIT),
        ("Walk me through your resume.", QuestionType.EXPERIENCE),
        ("Is there anything else?", QuestionType.GENERAL),
    ])
    def test_types(self, text, expected):
        assert classify_question_type(text) == expected

    def test_parse_type_strings(self):
        assert QuestionType.parse("Culture Fit") == QuestionType.CULTURE_FIT
        assert QuestionType.parse("follow_up") == QuestionType.FOLLOW_UP
        assert QuestionType.parse("riddle") is None
        assert QuestionType.parse(None) is None
