"""Audio-related data models."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class AudioStats:
    """Audio recording statistics."""
    is_recording: bool
    duration_seconds: float
    sample_rate: int
    chunk_size: int
    total_chunks: int
    input_level: float = 0.0


@dataclass
class AudioEvent:
    """Audio chunk event with metadata."""
    chunk_id: str
    audio_data: bytes
    timestamp: float  # Unix timestamp when chunk was captured
    sequence_number: int
    sample_rate: int = 16000
    channels: int = 1
    chunk_duration_ms: Optional[int] = None
    final: bool = False  # True if this is the last chunk of the recording

    def __post_init__(self):
        """Calculate chunk duration if not provided."""
        if self.chunk_duration_ms is None and self.audio_data:
            # 16-bit audio, 2 bytes per sample
            bytes_per_second = self.sample_rate * self.channels * 2
            self.chunk_duration_ms = int(len(self.audio_data) / bytes_per_second * 1000)
