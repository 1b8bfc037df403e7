"""Abstract interfaces for continuous speech recognition capabilities."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecognitionResult:
    """A single hypothesis reported by a recognition capability."""
    transcript: str
    confidence: float
    is_final: bool


class RecognitionListener(ABC):
    """Receives lifecycle and result events from a recognition capability.

    Implementations are called on the thread that owns the event loop; a
    capability that produces results on a worker thread must marshal its
    calls back before invoking the listener.
    """

    @abstractmethod
    def on_start(self) -> None:
        """The capability started capturing and recognizing audio."""

    @abstractmethod
    def on_result(self, results: Sequence[RecognitionResult]) -> None:
        """New interim or final hypotheses are available."""

    @abstractmethod
    def on_error(self, code: str, message: Optional[str] = None) -> None:
        """The capability reported an error identified by ``code``."""

    @abstractmethod
    def on_end(self) -> None:
        """The capability stopped, intentionally or not."""


class RecognitionCapability(ABC):
    """Abstract continuous speech-to-text capability."""

    def __init__(self, language: str = "en-US", continuous: bool = True, interim_results: bool = True):
        """Initialize capability with recognition preferences."""
        self.language = language
        self.continuous = continuous
        self.interim_results = interim_results
        self.listener: Optional[RecognitionListener] = None

    def bind(self, listener: RecognitionListener) -> None:
        """Attach the listener that receives this capability's events."""
        self.listener = listener

    def configure(self, language: str, continuous: bool, interim_results: bool) -> None:
        """Apply recognition options; takes effect on the next start()."""
        self.language = language
        self.continuous = continuous
        self.interim_results = interim_results

    def is_available(self) -> bool:
        """Whether the platform can provide this capability at all."""
        return True

    @abstractmethod
    def start(self) -> None:
        """Begin recognition.

        Must not block. Raises if the capability cannot be started; once
        running, on_start() is reported to the listener.
        """

    @abstractmethod
    def stop(self) -> None:
        """Stop recognition. on_end() is reported once the capability has stopped."""
