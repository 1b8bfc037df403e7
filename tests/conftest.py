"""Pytest configuration and fixtures for interview copilot tests."""

import pytest
import tempfile
import logging
from typing import Callable, List, Optional
from unittest.mock import Mock, patch
import numpy as np

from interview_copilot.models.questions import ClassificationResult
from interview_copilot.recognition.adapter import RecognitionCallbacks
from interview_copilot.recognition.base import RecognitionCapability, RecognitionResult
from interview_copilot.recognition.timers import Clock, TimerHandle


# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class ManualTimerHandle(TimerHandle):

    def __init__(self, when: float, seq: int, callback: Callable[[], None]):
        self.when = when
        self.seq = seq
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualClock(Clock):
    """Clock that only moves when a test calls advance()."""

    def __init__(self, start: float = 0.0):
        self._now = start
        self._seq = 0
        self.timers: List[ManualTimerHandle] = []

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        self._seq += 1
        handle = ManualTimerHandle(self._now + delay, self._seq, callback)
        self.timers.append(handle)
        return handle

    def pending(self) -> List[ManualTimerHandle]:
        return [t for t in self.timers if not t.cancelled]

    def advance(self, seconds: float) -> None:
        """Move time forward, running due callbacks in order."""
        target = self._now + seconds
        while True:
            due = [t for t in self.pending() if t.when <= target + 1e-9]
            if not due:
                break
            timer = min(due, key=lambda t: (t.when, t.seq))
            self.timers.remove(timer)
            self._now = max(self._now, timer.when)
            timer.callback()
        self._now = target


class FakeRecognitionCapability(RecognitionCapability):
    """Recognition capability driven entirely by the test."""

    def __init__(self, available: bool = True, auto_start: bool = True):
        super().__init__()
        self.available = available
        self.auto_start = auto_start
        self.start_calls = 0
        self.stop_calls = 0
        self.fail_next_starts = 0
        self.running = False

    def is_available(self) -> bool:
        return self.available

    def start(self) -> None:
        self.start_calls += 1
        if self.fail_next_starts > 0:
            self.fail_next_starts -= 1
            raise RuntimeError("capability failed to start")
        self.running = True
        if self.auto_start:
            self.emit_start()

    def stop(self) -> None:
        self.stop_calls += 1
        self.running = False

    def emit_start(self) -> None:
        self.listener.on_start()

    def emit_end(self) -> None:
        self.running = False
        self.listener.on_end()

    def emit_result(self, text: str, is_final: bool = True, confidence: float = 0.9) -> None:
        self.listener.on_result([RecognitionResult(transcript=text, confidence=confidence, is_final=is_final)])

    def emit_error(self, code: str, message: Optional[str] = None) -> None:
        self.listener.on_error(code, message)


class CallbackRecorder:
    """Collects everything the adapter reports to its caller."""

    def __init__(self):
        self.transcripts = []
        self.errors = []
        self.statuses = []
        self.silences = []

    def callbacks(self):
        return RecognitionCallbacks(
            on_transcript=self.transcripts.append,
            on_error=self.errors.append,
            on_status_change=self.statuses.append,
            on_silence=self.silences.append,
        )


@pytest.fixture
def manual_clock():
    return ManualClock()


@pytest.fixture
def fake_capability():
    return FakeRecognitionCapability()


@pytest.fixture
def recorder():
    return CallbackRecorder()


@pytest.fixture
def question_classifier():
    """Async classifier that confirms every sentence and records its input."""
    calls = []

    async def classify(sentence: str) -> ClassificationResult:
        calls.append(sentence)
        return ClassificationResult(is_question=True, confidence=90, question_type="general")

    classify.calls = calls
    return classify


@pytest.fixture
def suggestion_generator():
    """Async generator that returns a canned suggestion and records its input."""
    calls = []

    async def generate(question_text, question_type, profile_context=None) -> str:
        calls.append((question_text, question_type, profile_context))
        return f"Suggested answer for: {question_text}"

    generate.calls = calls
    return generate


@pytest.fixture
def temp_data_dir():
    """Create temporary directory for test data."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield temp_dir


@pytest.fixture
def sample_audio_chunk():
    """Generate a sample audio chunk for testing."""
    # Generate 1024 samples of 16-bit audio (sine wave)
    sample_rate = 16000
    duration = 1024 / sample_rate  # ~0.064 seconds
    freq = 440  # A4 note

    t = np.linspace(0, duration, 1024, False)
    wave_data = np.sin(2 * np.pi * freq * t)

    # Convert to 16-bit integers
    audio_data = (wave_data * 32767).astype(np.int16)
    return audio_data.tobytes()


@pytest.fixture
def mock_pyaudio():
    """Mock PyAudio for testing without actual audio hardware."""
    with patch('pyaudio.PyAudio') as mock_pyaudio_class:
        mock_pyaudio_instance = Mock()
        mock_stream = Mock()

        # Configure mock stream
        mock_stream.read.return_value = b'\x00' * 2048  # Silent audio
        mock_stream.stop_stream.return_value = None
        mock_stream.close.return_value = None

        # Configure mock PyAudio instance
        mock_pyaudio_instance.open.return_value = mock_stream
        mock_pyaudio_instance.terminate.return_value = None

        # Configure mock PyAudio class
        mock_pyaudio_class.return_value = mock_pyaudio_instance

        yield {
            'class': mock_pyaudio_class,
            'instance': mock_pyaudio_instance,
            'stream': mock_stream
        }
