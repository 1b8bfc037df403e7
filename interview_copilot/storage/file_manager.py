"""File management for copilot session history and recordings."""

import json
import logging
import shutil
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..services.session_state import SessionState

logger = logging.getLogger(__name__)

SESSION_FILE = "copilot_session.json"


class FileManager:
    """Stores ended copilot sessions as JSON under the data directory."""

    def __init__(self, data_dir: str = "./data"):
        """Initialize file manager with data directory.

        Args:
            data_dir: Base directory for storing all data
        """
        self.data_dir = Path(data_dir)
        self.sessions_dir = self.data_dir / "sessions"
        self.logs_dir = self.data_dir / "logs"

        self._ensure_directories()

        logger.info(f"FileManager initialized with data_dir: {self.data_dir}")

    def _ensure_directories(self) -> None:
        for directory in [self.data_dir, self.sessions_dir, self.logs_dir]:
            directory.mkdir(parents=True, exist_ok=True)
            logger.debug(f"Ensured directory exists: {directory}")

    def get_session_path(self, session_id: str) -> Path:
        return self.sessions_dir / session_id

    def get_recording_path(self, session_id: str) -> Path:
        """Where the raw audio recording of a session is written."""
        return self.get_session_path(session_id) / "recording.wav"

    def save_session(self, session: SessionState) -> str:
        """Save a session snapshot to JSON.

        Returns:
            Path to the saved session file
        """
        session_path = self.get_session_path(session.session_id)
        session_path.mkdir(parents=True, exist_ok=True)
        session_file = session_path / SESSION_FILE

        try:
            with open(session_file, 'w', encoding='utf-8') as f:
                json.dump(session.to_dict(), f, indent=2)
            logger.info(f"Session saved: {session_file}")
            return str(session_file)
        except (OSError, TypeError) as e:
            logger.error(f"Error saving session {session.session_id}: {e}")
            raise

    def load_session(self, session_id: str) -> Optional[Dict[str, Any]]:
        """Load a saved session record, or None if it does not exist."""
        session_file = self.get_session_path(session_id) / SESSION_FILE

        if not session_file.exists():
            logger.warning(f"Session file not found: {session_file}")
            return None

        try:
            with open(session_file, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Error loading session {session_id}: {e}")
            return None

    def list_sessions(self) -> List[str]:
        """List saved session IDs, newest first."""
        sessions = [
            path.name for path in self.sessions_dir.iterdir()
            if path.is_dir() and (path / SESSION_FILE).exists()
        ]
        sessions.sort(reverse=True)
        logger.debug(f"Found {len(sessions)} sessions")
        return sessions

    def delete_session(self, session_id: str) -> bool:
        """Delete a saved session and its recording."""
        session_path = self.get_session_path(session_id)
        if not session_path.exists():
            return False

        shutil.rmtree(session_path)
        logger.info(f"Deleted session: {session_path}")
        return True
