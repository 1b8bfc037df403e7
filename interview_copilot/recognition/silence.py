"""Silence monitor that reports sustained periods without speech."""

import logging
from typing import Callable, Optional

from .timers import Clock, Ticker

logger = logging.getLogger(__name__)


class SilenceMonitor:
    """Polls the time since the last speech activity.

    The signal is level-triggered: once past the threshold, ``on_silence`` is
    invoked on every poll until speech is recorded again.
    """

    def __init__(self,
                 clock: Clock,
                 threshold_ms: float,
                 on_silence: Callable[[float], None],
                 poll_interval_ms: float = 500):
        self.clock = clock
        self.threshold_ms = threshold_ms
        self.on_silence = on_silence
        self.last_speech_time: float = clock.now()
        self._ticker = Ticker(clock, poll_interval_ms / 1000.0, self.check)

    @property
    def is_running(self) -> bool:
        return self._ticker.is_running

    def record_speech(self) -> None:
        """Mark now as the most recent speech activity."""
        self.last_speech_time = self.clock.now()

    def start(self) -> None:
        self.record_speech()
        self._ticker.start()
        logger.debug(f"Silence monitor started (threshold={self.threshold_ms}ms)")

    def stop(self) -> None:
        if self._ticker.is_running:
            logger.debug("Silence monitor stopped")
        self._ticker.stop()

    def silence_duration_ms(self) -> float:
        return (self.clock.now() - self.last_speech_time) * 1000.0

    def check(self) -> Optional[float]:
        """Run one poll; returns the silence duration if the signal fired."""
        duration_ms = self.silence_duration_ms()
        if duration_ms >= self.threshold_ms:
            self.on_silence(duration_ms)
            return duration_ms
        return None
