"""Audio recording for the interview copilot."""

from .capture import AudioCapture, RecordingBusyError
from .audio_saver import WavAudioSaver

__all__ = [
    'AudioCapture',
    'RecordingBusyError',
    'WavAudioSaver',
]
