"""Speech recognition engine adapter and capabilities."""

from .base import RecognitionCapability, RecognitionListener, RecognitionResult
from .adapter import RecognitionEngineAdapter, RecognitionConfig, RecognitionCallbacks
from .errors import ErrorKind, classify_error
from .silence import SilenceMonitor
from .timers import Clock, LoopClock, Ticker

__all__ = [
    "RecognitionCapability",
    "RecognitionListener",
    "RecognitionResult",
    "RecognitionEngineAdapter",
    "RecognitionConfig",
    "RecognitionCallbacks",
    "ErrorKind",
    "classify_error",
    "SilenceMonitor",
    "Clock",
    "LoopClock",
    "Ticker",
]
