"""Continuous audio recording for later playback.

Only one recording context may be active across the whole application;
starting a second one is rejected rather than pre-empting the first.
"""

import logging
import threading
import time
from datetime import datetime
from threading import Thread, Event
from typing import Callable, Optional

import numpy as np
import pyaudio

from ..models.audio import AudioEvent, AudioStats

logger = logging.getLogger(__name__)


class RecordingBusyError(RuntimeError):
    """Another recording context is already active."""


class AudioCapture:
    """Continuous audio capture that publishes AudioEvents from a background thread."""

    _active: Optional["AudioCapture"] = None
    _active_lock = threading.Lock()

    def __init__(
        self,
        callback: Callable[[AudioEvent], None],
        sample_rate: int = 16000,
        chunk_size: int = 1024,
        channels: int = 1,
        format: int = pyaudio.paInt16,
    ):
        """Initialize audio capture with specified parameters.

        Args:
            callback: Receives every captured AudioEvent
            sample_rate: Audio sample rate in Hz
            chunk_size: Size of each audio chunk in samples
            channels: Number of audio channels (1 for mono)
            format: Audio format (16-bit signed int)
        """
        self.audio_event_callback = callback
        self.sample_rate = sample_rate
        self.chunk_size = chunk_size
        self.channels = channels
        self.format = format

        self.recording_thread: Optional[Thread] = None
        self.stop_event = Event()
        self.is_recording = False

        self.start_time: Optional[datetime] = None
        self.total_chunks = 0
        self.input_level = 0.0

        self.pyaudio_instance: Optional[pyaudio.PyAudio] = None

    @classmethod
    def active_capture(cls) -> Optional["AudioCapture"]:
        """The capture currently holding the recording context, if any."""
        with cls._active_lock:
            return cls._active

    def start_recording(self) -> None:
        """Acquire the recording context and start recording in a background thread.

        Raises:
            RecordingBusyError: If any capture (including this one) is already recording
        """
        with AudioCapture._active_lock:
            if AudioCapture._active is not None:
                raise RecordingBusyError("Another recording is already in progress")
            AudioCapture._active = self

        logger.info("Starting audio recording")
        self.stop_event.clear()
        self.start_time = datetime.now()
        self.total_chunks = 0

        self.recording_thread = Thread(target=self._record_continuously, daemon=True)
        self.recording_thread.name = "AudioCaptureThread"
        self.recording_thread.start()
        self.is_recording = True

    def stop_recording(self) -> None:
        """Stop recording and release the recording context."""
        if not self.is_recording:
            logger.warning("No recording in progress")
            return

        logger.info("Stopping audio recording")
        self.stop_event.set()

        if self.recording_thread and self.recording_thread.is_alive():
            self.recording_thread.join(timeout=2.0)
            if self.recording_thread.is_alive():
                logger.warning("Recording thread did not stop cleanly")

        self.is_recording = False
        self._release()
        logger.info(f"Recording stopped. Total chunks: {self.total_chunks}")

    def _release(self) -> None:
        with AudioCapture._active_lock:
            if AudioCapture._active is self:
                AudioCapture._active = None

    def __open_audio_stream(self) -> pyaudio.Stream:
        self.pyaudio_instance = pyaudio.PyAudio()
        stream = self.pyaudio_instance.open(
            format=self.format,
            channels=self.channels,
            rate=self.sample_rate,
            input=True,
            frames_per_buffer=self.chunk_size,
            stream_callback=None
        )
        logger.info(f"Audio stream opened: {self.sample_rate}Hz, "
                    f"{self.chunk_size} samples/chunk")
        return stream

    def __read_audio_chunk(self, stream: pyaudio.Stream) -> bytes:
        audio_chunk = stream.read(self.chunk_size, exception_on_overflow=False)
        self.total_chunks += 1
        self.input_level = compute_level(audio_chunk)
        return audio_chunk

    def __publish_audio_event(self, audio_chunk: bytes) -> None:
        audio_event = AudioEvent(
            chunk_id=f"chunk_{self.total_chunks}",
            audio_data=audio_chunk,
            timestamp=time.time(),
            sequence_number=self.total_chunks,
            sample_rate=self.sample_rate,
            channels=self.channels,
            final=self.stop_event.is_set()
        )
        self.audio_event_callback(audio_event)

    def _record_continuously(self) -> None:
        """Internal method: continuous recording loop in background thread."""
        stream = None
        try:
            stream = self.__open_audio_stream()
            while not self.stop_event.is_set():
                audio_chunk = self.__read_audio_chunk(stream)
                self.__publish_audio_event(audio_chunk)
            # Final event so consumers know we are done
            audio_chunk = self.__read_audio_chunk(stream)
            self.__publish_audio_event(audio_chunk)
        except OSError as e:
            logger.error(f"Audio capture failed: {e}")
            self._release()
        finally:
            if stream:
                stream.stop_stream()
                stream.close()
            if self.pyaudio_instance:
                self.pyaudio_instance.terminate()
                self.pyaudio_instance = None

    def get_recording_stats(self) -> AudioStats:
        """Get current recording statistics."""
        duration = 0.0
        if self.start_time:
            duration = (datetime.now() - self.start_time).total_seconds()

        return AudioStats(
            is_recording=self.is_recording,
            duration_seconds=duration,
            sample_rate=self.sample_rate,
            chunk_size=self.chunk_size,
            total_chunks=self.total_chunks,
            input_level=self.input_level,
        )

    def __del__(self):
        """Ensure resources are cleaned up on deletion."""
        if self.is_recording:
            self.stop_recording()


def compute_level(audio_chunk: bytes) -> float:
    """RMS level of a 16-bit PCM chunk, normalized to 0..1."""
    if not audio_chunk:
        return 0.0
    samples = np.frombuffer(audio_chunk, dtype=np.int16).astype(np.float32) / 32768.0
    if samples.size == 0:
        return 0.0
    return float(np.sqrt(np.mean(samples ** 2)))
