"""Writes recorded audio events to a WAV file for later playback."""

import logging
import threading
import wave
from pathlib import Path
from typing import Optional

from pubsub import pub

from ..models.audio import AudioEvent

logger = logging.getLogger(__name__)


class WavAudioSaver:
    """Subscribes to an audio topic and appends every event to a WAV file."""

    def __init__(self, filepath: str, topic: str, sample_rate: int = 16000, channels: int = 1):
        """Initialize WAV saver.

        Args:
            filepath: Destination WAV file
            topic: Pub/sub topic carrying AudioEvents
            sample_rate: Sample rate written to the WAV header
            channels: Channel count written to the WAV header
        """
        self.filepath = Path(filepath)
        self.topic = topic
        self.sample_rate = sample_rate
        self.channels = channels
        self.frames_written = 0
        self.lock = threading.Lock()
        self._wav: Optional[wave.Wave_write] = None

    def open(self) -> None:
        self.filepath.parent.mkdir(parents=True, exist_ok=True)
        self._wav = wave.open(str(self.filepath), 'wb')
        self._wav.setnchannels(self.channels)
        self._wav.setsampwidth(2)  # 16-bit
        self._wav.setframerate(self.sample_rate)
        pub.subscribe(self.on_audio_event, self.topic)
        logger.info(f"Saving audio to {self.filepath}")

    def on_audio_event(self, event: AudioEvent) -> None:
        with self.lock:
            if self._wav is None:
                return
            self._wav.writeframes(event.audio_data)
            self.frames_written += len(event.audio_data) // (2 * self.channels)

    def close(self) -> str:
        """Unsubscribe and finalize the file. Returns the file path."""
        try:
            pub.unsubscribe(self.on_audio_event, self.topic)
        except Exception as e:
            logger.warning(f"Error during unsubscribe: {e}")

        with self.lock:
            if self._wav is not None:
                self._wav.close()
                self._wav = None

        logger.info(f"Audio saved to {self.filepath} ({self.frames_written} frames)")
        return str(self.filepath)
