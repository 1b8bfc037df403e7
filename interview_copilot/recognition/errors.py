"""Classification of speech recognition errors."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """How the adapter reacts to a recognition error."""
    IGNORABLE = "ignorable"
    RETRYABLE = "retryable"
    FATAL = "fatal"
    UNKNOWN = "unknown"


NOT_SUPPORTED_MESSAGE = "Speech recognition is not supported on this system."
START_FAILED_MESSAGE = "Failed to start speech recognition."
STOPPED_UNEXPECTEDLY_MESSAGE = "Speech recognition stopped unexpectedly. Please restart."


@dataclass(frozen=True)
class ClassifiedError:
    """A recognition error code together with its handling policy."""
    code: str
    kind: ErrorKind
    message: Optional[str]  # None means nothing is surfaced to the caller


_KNOWN_ERRORS = {
    "no-speech": (ErrorKind.IGNORABLE, None),
    "network": (ErrorKind.RETRYABLE, "Network error. Please check your connection."),
    "not-allowed": (ErrorKind.FATAL, "Microphone access denied. Please allow microphone access."),
    "audio-capture": (ErrorKind.FATAL, "No microphone found. Please connect a microphone."),
}


def classify_error(code: str, manual_stop: bool = False) -> ClassifiedError:
    """Map a capability error code to its handling policy.

    Args:
        code: Error code reported by the capability (e.g. 'network')
        manual_stop: Whether the adapter is in the middle of an intentional stop

    Returns:
        ClassifiedError describing whether to ignore, retry or fail
    """
    if code == "aborted":
        if manual_stop:
            return ClassifiedError(code, ErrorKind.IGNORABLE, None)
        # Not surfaced; the end event that follows goes through the restart policy.
        return ClassifiedError(code, ErrorKind.RETRYABLE, None)

    if code in _KNOWN_ERRORS:
        kind, message = _KNOWN_ERRORS[code]
        return ClassifiedError(code, kind, message)

    return ClassifiedError(code, ErrorKind.UNKNOWN, f"Speech recognition error: {code}")
