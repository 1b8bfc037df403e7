"""Live copilot session: recognition -> accumulation -> detection -> state."""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from ..detection.dispatcher import DetectionDispatcher, QuestionClassifier, SuggestionGenerator
from ..detection.publisher import CopilotPublisher
from ..models.session import SessionStatus
from ..models.transcription import EngineStatus, TranscriptChunk
from ..recognition.adapter import RecognitionCallbacks, RecognitionEngineAdapter
from ..recognition.timers import Clock
from ..storage.file_manager import FileManager
from ..transcription.accumulator import TranscriptAccumulator
from .session_state import SessionState

logger = logging.getLogger(__name__)


@dataclass
class DetectionSettings:
    """Thresholds for queueing and confirming questions."""
    local_threshold: int = 60
    remote_threshold: int = 70
    silence_flush_ms: int = 3000
    min_flush_length: int = 15
    min_sentence_length: int = 10
    queue_size: int = 32


class CopilotService:
    """Owns one live session and wires the pipeline together.

    Must be started from inside a running asyncio loop; all handlers run on
    that loop.
    """

    def __init__(self,
                 adapter: RecognitionEngineAdapter,
                 classifier: QuestionClassifier,
                 generator: SuggestionGenerator,
                 settings: Optional[DetectionSettings] = None,
                 profile_context: Optional[str] = None,
                 file_manager: Optional[FileManager] = None,
                 publisher: Optional[CopilotPublisher] = None,
                 clock: Optional[Clock] = None,
                 on_error: Optional[Callable[[str], None]] = None):
        self.adapter = adapter
        self.classifier = classifier
        self.generator = generator
        self.settings = settings or DetectionSettings()
        self.profile_context = profile_context
        self.file_manager = file_manager
        self.publisher = publisher
        self.clock = clock or adapter.clock
        self.on_error = on_error

        self.session: Optional[SessionState] = None
        self.dispatcher: Optional[DetectionDispatcher] = None
        self.accumulator = TranscriptAccumulator()

        # Display state
        self.engine_status = adapter.get_status()
        self.live_preview = ""
        self.buffer_preview = ""
        self.errors: List[str] = []

    @property
    def is_active(self) -> bool:
        return self.session is not None and not self.session.is_ended

    def start(self,
              application_id: Optional[str] = None,
              context_used: Optional[Dict[str, Any]] = None) -> bool:
        """Create a new session and start listening.

        Returns:
            True if recognition started
        """
        if self.is_active:
            logger.warning("A copilot session is already active")
            return False

        self.session = SessionState(application_id=application_id, context_used=context_used)
        self.accumulator = TranscriptAccumulator()
        self.live_preview = ""
        self.buffer_preview = ""

        self.dispatcher = DetectionDispatcher(
            session=self.session,
            classifier=self.classifier,
            generator=self.generator,
            profile_context=self.profile_context,
            local_threshold=self.settings.local_threshold,
            remote_threshold=self.settings.remote_threshold,
            max_pending=self.settings.queue_size,
            clock=self.clock,
            on_question=self.publisher.publish_question if self.publisher else None,
            on_suggestion=self.publisher.publish_suggestion if self.publisher else None,
        )
        self.dispatcher.start()

        started = self.adapter.start(RecognitionCallbacks(
            on_transcript=self.handle_transcript,
            on_error=self.handle_error,
            on_status_change=self.handle_status_change,
            on_silence=self.handle_silence,
        ))

        if not started:
            logger.error("Failed to start speech recognition")
            self.dispatcher.shutdown()
            self.session.end()
            return False

        self.session.mark_listening()
        logger.info(f"Copilot session {self.session.session_id} started")
        return True

    def pause(self) -> None:
        if not self.is_active or self.session.status != SessionStatus.LISTENING:
            return
        self.adapter.pause()
        self.session.mark_paused()

    def resume(self) -> bool:
        if not self.is_active or self.session.status != SessionStatus.PAUSED:
            return False
        if not self.adapter.resume():
            return False
        self.session.mark_listening()
        return True

    def stop(self) -> Optional[str]:
        """End the session without waiting for in-flight detection.

        Returns:
            Path of the saved session file, if one was written
        """
        if not self.is_active:
            return None

        self.adapter.stop()
        self.dispatcher.shutdown()
        self.session.end()

        self.live_preview = ""
        self.buffer_preview = ""
        self.accumulator = TranscriptAccumulator()

        if self.file_manager is not None and self.session.detected_questions:
            return self.file_manager.save_session(self.session)
        return None

    # ------------------------------------------------------------------
    # Recognition callbacks
    # ------------------------------------------------------------------

    def handle_transcript(self, chunk: TranscriptChunk) -> None:
        if not self.is_active:
            return

        if not chunk.is_final:
            self.live_preview = chunk.text
            return

        sentences = self.accumulator.add_chunk(chunk)
        self.buffer_preview = self.accumulator.get_buffer()

        text = chunk.text.strip()
        if text:
            self.session.add_transcript_entry(text, chunk.timestamp)

        for sentence in sentences:
            if len(sentence) >= self.settings.min_sentence_length:
                self.dispatcher.submit(sentence)

        self.live_preview = ""

    def handle_silence(self, duration_ms: float) -> None:
        if not self.is_active or duration_ms < self.settings.silence_flush_ms:
            return

        remaining = self.accumulator.flush()
        # Cleared right away: the silence signal repeats every poll.
        self.buffer_preview = ""
        if len(remaining) >= self.settings.min_flush_length:
            logger.debug(f"Silence flush ({duration_ms:.0f}ms): '{remaining[:50]}'")
            self.dispatcher.submit(remaining)

    def handle_error(self, message: str) -> None:
        logger.warning(f"Recognition error: {message}")
        self.errors.append(message)
        if self.on_error:
            self.on_error(message)

    def handle_status_change(self, status: EngineStatus) -> None:
        logger.debug(f"Engine status: {status.value}")
        self.engine_status = status
