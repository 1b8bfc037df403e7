"""Unit tests for FileManager class."""

import pytest
import json
from datetime import datetime
from pathlib import Path
from unittest.mock import patch

from interview_copilot.models.questions import CopilotSuggestion, DetectedQuestion, QuestionType
from interview_copilot.services.session_state import SessionState
from interview_copilot.storage.file_manager import FileManager, SESSION_FILE


def ended_session(session_id: str) -> SessionState:
    session = SessionState(session_id=session_id)
    session.mark_listening()
    session.add_transcript_entry("How do you handle conflict?", datetime.now().isoformat())
    question = DetectedQuestion(
        id="q-1",
        text="How do you handle conflict?",
        type=QuestionType.BEHAVIORAL,
        confidence=92,
        detected_at=datetime.now(),
        source_transcript="How do you handle conflict?",
    )
    session.record_question(question)
    session.record_suggestion(CopilotSuggestion(id="s-1", question_id="q-1", content="STAR answer",
                                                generation_time_ms=420))
    session.end()
    return session


@pytest.mark.unit
class TestFileManager:
    """Test cases for FileManager class."""

    def test_initialization(self, temp_data_dir):
        """Test FileManager initialization."""
        fm = FileManager(temp_data_dir)

        assert fm.data_dir == Path(temp_data_dir)
        assert fm.sessions_dir == Path(temp_data_dir) / "sessions"
        assert fm.logs_dir == Path(temp_data_dir) / "logs"

        # Check directories were created
        assert fm.sessions_dir.exists()
        assert fm.logs_dir.exists()

    def test_initialization_default_path(self):
        """Test FileManager initialization with default path."""
        with patch.object(Path, 'mkdir') as mock_mkdir:
            fm = FileManager()

            assert fm.data_dir == Path("./data")
            assert mock_mkdir.call_count >= 3

    def test_save_and_load_session(self, temp_data_dir):
        """Test saving a session and reading it back."""
        fm = FileManager(temp_data_dir)
        session = ended_session("20260101_100000_abcd")

        path = fm.save_session(session)

        assert Path(path) == fm.get_session_path("20260101_100000_abcd") / SESSION_FILE
        with open(path, 'r', encoding='utf-8') as f:
            raw = json.load(f)
        assert raw["session_id"] == "20260101_100000_abcd"

        loaded = fm.load_session("20260101_100000_abcd")
        assert loaded["status"] == "ended"
        assert loaded["detected_questions"][0]["text"] == "How do you handle conflict?"
        assert loaded["suggestions"][0]["generation_time_ms"] == 420
        assert loaded["stats"]["questions_detected"] == 1
        assert len(loaded["transcript"]) == 1

    def test_load_missing_session(self, temp_data_dir):
        fm = FileManager(temp_data_dir)

        assert fm.load_session("nope") is None

    def test_load_corrupt_session(self, temp_data_dir):
        fm = FileManager(temp_data_dir)
        session_dir = fm.get_session_path("broken")
        session_dir.mkdir(parents=True)
        (session_dir / SESSION_FILE).write_text("{not json", encoding='utf-8')

        assert fm.load_session("broken") is None

    def test_list_sessions_newest_first(self, temp_data_dir):
        fm = FileManager(temp_data_dir)
        for session_id in ["20260101_090000_aaaa", "20260102_090000_bbbb", "20260101_120000_cccc"]:
            fm.save_session(ended_session(session_id))
        # Directories without a session file are not listed
        fm.get_session_path("20260103_000000_dddd").mkdir(parents=True)

        assert fm.list_sessions() == [
            "20260102_090000_bbbb",
            "20260101_120000_cccc",
            "20260101_090000_aaaa",
        ]

    def test_delete_session(self, temp_data_dir):
        fm = FileManager(temp_data_dir)
        fm.save_session(ended_session("20260101_090000_aaaa"))

        assert fm.delete_session("20260101_090000_aaaa") is True
        assert fm.list_sessions() == []
        assert fm.delete_session("20260101_090000_aaaa") is False

    def test_recording_path(self, temp_data_dir):
        fm = FileManager(temp_data_dir)

        path = fm.get_recording_path("20260101_090000_aaaa")

        assert path == fm.sessions_dir / "20260101_090000_aaaa" / "recording.wav"
