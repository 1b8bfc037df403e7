"""Recognition engine adapter with lifecycle management and auto-restart."""

import logging
from dataclasses import dataclass, replace
from typing import Callable, Dict, Optional, Sequence, Set

from ..models.transcription import EngineStatus, TranscriptChunk
from .base import RecognitionCapability, RecognitionListener, RecognitionResult
from .errors import (
    ErrorKind,
    NOT_SUPPORTED_MESSAGE,
    START_FAILED_MESSAGE,
    STOPPED_UNEXPECTEDLY_MESSAGE,
    classify_error,
)
from .silence import SilenceMonitor
from .timers import Clock, LoopClock, TimerHandle

logger = logging.getLogger(__name__)


@dataclass
class RecognitionConfig:
    """Options recognized by the adapter."""
    language: str = "en-US"
    continuous: bool = True
    interim_results: bool = True
    silence_threshold_ms: int = 2000
    poll_interval_ms: int = 500
    max_restart_attempts: int = 5
    restart_delay_ms: int = 100


@dataclass
class RecognitionCallbacks:
    """Callbacks the adapter invokes on its caller."""
    on_transcript: Callable[[TranscriptChunk], None]
    on_error: Callable[[str], None]
    on_status_change: Callable[[EngineStatus], None]
    on_silence: Optional[Callable[[float], None]] = None


# Allowed status transitions. Staying in the same status is always a no-op.
TRANSITIONS: Dict[EngineStatus, Set[EngineStatus]] = {
    EngineStatus.IDLE: {EngineStatus.STARTING, EngineStatus.ERROR, EngineStatus.NOT_SUPPORTED},
    EngineStatus.STARTING: {EngineStatus.LISTENING, EngineStatus.PAUSED, EngineStatus.IDLE, EngineStatus.ERROR},
    EngineStatus.LISTENING: {EngineStatus.PAUSED, EngineStatus.IDLE, EngineStatus.ERROR},
    EngineStatus.PAUSED: {EngineStatus.STARTING, EngineStatus.IDLE, EngineStatus.ERROR},
    EngineStatus.ERROR: {EngineStatus.STARTING, EngineStatus.IDLE},
    EngineStatus.NOT_SUPPORTED: set(),
}


class _RunListener(RecognitionListener):
    """Listener bound to one capability run.

    Events are forwarded to the adapter only while this run is the current
    one, so a late end from a stopped run cannot touch the run that
    replaced it.
    """

    def __init__(self, adapter: "RecognitionEngineAdapter", run_id: int):
        self.adapter = adapter
        self.run_id = run_id

    def _is_current(self, event: str) -> bool:
        if self.run_id != self.adapter.run_id:
            logger.debug(f"Ignoring {event} event from superseded recognition run {self.run_id}")
            return False
        return True

    def on_start(self) -> None:
        if self._is_current("start"):
            self.adapter.on_start()

    def on_result(self, results: Sequence[RecognitionResult]) -> None:
        if self._is_current("result"):
            self.adapter.on_result(results)

    def on_error(self, code: str, message: Optional[str] = None) -> None:
        if self._is_current("error"):
            self.adapter.on_error(code, message)

    def on_end(self) -> None:
        if self._is_current("end"):
            self.adapter.on_end()


class RecognitionEngineAdapter(RecognitionListener):
    """Stable start/stop/pause/resume contract over a recognition capability.

    One adapter drives one capability for one session. Unexpected ends while
    listening are retried up to ``max_restart_attempts`` times; fatal errors
    (permission denied, no capture device) go straight to ERROR.
    """

    def __init__(self,
                 capability: Optional[RecognitionCapability],
                 config: Optional[RecognitionConfig] = None,
                 clock: Optional[Clock] = None):
        """Initialize adapter.

        Args:
            capability: Platform recognition capability, or None if absent
            config: Recognition options
            clock: Time source for restart delays and silence polling
        """
        self.capability = capability
        self.config = config or RecognitionConfig()
        self.clock = clock or LoopClock()
        self.callbacks: Optional[RecognitionCallbacks] = None

        self.status = EngineStatus.IDLE
        self.restart_attempts = 0
        self.run_id = 0
        self._manual_stop = False
        self._restart_handle: Optional[TimerHandle] = None

        self.silence_monitor = SilenceMonitor(
            clock=self.clock,
            threshold_ms=self.config.silence_threshold_ms,
            on_silence=self._on_silence,
            poll_interval_ms=self.config.poll_interval_ms,
        )

        if not self.is_supported():
            self.status = EngineStatus.NOT_SUPPORTED
            logger.warning("Speech recognition capability not available")
            return

        self.capability.configure(self.config.language, self.config.continuous, self.config.interim_results)
        self.capability.bind(_RunListener(self, self.run_id))

    def is_supported(self) -> bool:
        """Check if a usable recognition capability is present."""
        return self.capability is not None and self.capability.is_available()

    def get_status(self) -> EngineStatus:
        return self.status

    # ------------------------------------------------------------------
    # Public contract
    # ------------------------------------------------------------------

    def start(self, callbacks: RecognitionCallbacks) -> bool:
        """Start listening.

        Returns:
            True if the capability was started, False otherwise
        """
        if not self.is_supported():
            self._safe_call(callbacks.on_error, NOT_SUPPORTED_MESSAGE)
            return False

        if self.status in (EngineStatus.STARTING, EngineStatus.LISTENING):
            logger.warning(f"Recognition already active (status={self.status.value})")
            return False

        self.callbacks = callbacks
        self._manual_stop = False
        self.restart_attempts = 0
        return self._start_capability("start")

    def pause(self) -> None:
        """Stop the capability without resetting session data."""
        if self.status not in (EngineStatus.STARTING, EngineStatus.LISTENING):
            logger.warning(f"Cannot pause recognition in status {self.status.value}")
            return

        logger.info("Pausing speech recognition")
        self._halt_capability()
        self._set_status(EngineStatus.PAUSED)

    def resume(self) -> bool:
        """Restart the capability after pause()."""
        if not self.is_supported() or self.callbacks is None:
            return False

        if self.status != EngineStatus.PAUSED:
            logger.warning(f"Cannot resume recognition in status {self.status.value}")
            return False

        logger.info("Resuming speech recognition")
        self._manual_stop = False
        self.restart_attempts = 0
        return self._start_capability("resume")

    def stop(self) -> None:
        """Intentionally shut down recognition for this session."""
        if self.status == EngineStatus.NOT_SUPPORTED:
            return

        logger.info("Stopping speech recognition")
        self._halt_capability()
        self._set_status(EngineStatus.IDLE)

    def update_config(self, **changes) -> None:
        """Update recognition options in place."""
        self.config = replace(self.config, **changes)
        self.silence_monitor.threshold_ms = self.config.silence_threshold_ms
        if self.capability is not None:
            self.capability.configure(self.config.language, self.config.continuous, self.config.interim_results)
        logger.debug(f"Recognition config updated: {self.config}")

    def destroy(self) -> None:
        """Stop and release the capability and callbacks."""
        self.stop()
        self.callbacks = None
        self.capability = None

    # ------------------------------------------------------------------
    # RecognitionListener
    # ------------------------------------------------------------------

    def on_start(self) -> None:
        if self._manual_stop:
            logger.debug("Ignoring start event after manual stop")
            return

        logger.info("Speech recognition started")
        self._set_status(EngineStatus.LISTENING)
        self.restart_attempts = 0
        self.silence_monitor.start()

    def on_result(self, results: Sequence[RecognitionResult]) -> None:
        if self._manual_stop:
            logger.debug(f"Dropping {len(results)} results received after manual stop")
            return

        self.silence_monitor.record_speech()
        for index, result in enumerate(results):
            chunk = TranscriptChunk.create(
                text=result.transcript,
                is_final=result.is_final,
                confidence=result.confidence,
                index=index,
            )
            logger.debug(f"Transcript chunk: '{chunk.text}' (final={chunk.is_final}, confidence={chunk.confidence:.2f})")
            if self.callbacks:
                self._safe_call(self.callbacks.on_transcript, chunk)

    def on_error(self, code: str, message: Optional[str] = None) -> None:
        classified = classify_error(code, manual_stop=self._manual_stop)

        if classified.kind == ErrorKind.IGNORABLE:
            logger.debug(f"Ignoring recognition error: {code}")
            return

        if classified.kind == ErrorKind.FATAL:
            logger.error(f"Fatal recognition error: {code} {message or ''}".strip())
            self._emit_error(classified.message)
            self._halt_capability(stop_capability=False)
            self._set_status(EngineStatus.ERROR)
            return

        if classified.kind == ErrorKind.RETRYABLE:
            logger.warning(f"Retryable recognition error: {code}")
        else:
            logger.error(f"Recognition error: {code} {message or ''}".strip())

        if classified.message:
            self._emit_error(classified.message)

    def on_end(self) -> None:
        self.silence_monitor.stop()
        logger.info(f"Speech recognition ended (manual={self._manual_stop}, "
                    f"status={self.status.value}, restart_attempts={self.restart_attempts})")

        if self._manual_stop:
            return

        if self.status == EngineStatus.LISTENING:
            self._schedule_restart()
        elif self.status == EngineStatus.STARTING:
            logger.warning("Speech recognition ended before it started")
            self._set_status(EngineStatus.IDLE)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _start_capability(self, reason: str) -> bool:
        try:
            self._set_status(EngineStatus.STARTING)
            self._begin_run()
            self.capability.start()
            return True
        except Exception as e:
            logger.error(f"Failed to {reason} recognition: {e}")
            self._emit_error(START_FAILED_MESSAGE)
            self._set_status(EngineStatus.ERROR)
            return False

    def _begin_run(self) -> None:
        """Bind a fresh listener so events from earlier runs are dropped."""
        self.run_id += 1
        self.capability.bind(_RunListener(self, self.run_id))

    def _halt_capability(self, stop_capability: bool = True) -> None:
        """Mark the stop as intentional and tear down timers."""
        self._manual_stop = True
        self.silence_monitor.stop()
        self._cancel_restart()
        if stop_capability and self.capability is not None:
            try:
                self.capability.stop()
            except Exception as e:
                logger.debug(f"Ignoring error while stopping capability: {e}")

    def _schedule_restart(self) -> None:
        if self.restart_attempts >= self.config.max_restart_attempts:
            logger.error(f"Giving up after {self.restart_attempts} restart attempts")
            self._set_status(EngineStatus.ERROR)
            self._emit_error(STOPPED_UNEXPECTEDLY_MESSAGE)
            return

        self.restart_attempts += 1
        logger.info(f"Auto-restarting recognition, attempt {self.restart_attempts}")
        self._restart_handle = self.clock.call_later(self.config.restart_delay_ms / 1000.0, self._restart)

    def _restart(self) -> None:
        self._restart_handle = None
        if self._manual_stop or self.status != EngineStatus.LISTENING or self.capability is None:
            return

        try:
            self._begin_run()
            self.capability.start()
        except Exception as e:
            # The capability never came back: same as another unexpected end.
            logger.warning(f"Failed to restart recognition: {e}")
            self._schedule_restart()

    def _cancel_restart(self) -> None:
        if self._restart_handle is not None:
            self._restart_handle.cancel()
            self._restart_handle = None

    def _on_silence(self, duration_ms: float) -> None:
        if self.callbacks and self.callbacks.on_silence:
            self._safe_call(self.callbacks.on_silence, duration_ms)

    def _set_status(self, status: EngineStatus) -> bool:
        if status == self.status:
            return True
        if status not in TRANSITIONS[self.status]:
            logger.warning(f"Ignoring invalid status transition {self.status.value} -> {status.value}")
            return False

        logger.debug(f"Status: {self.status.value} -> {status.value}")
        self.status = status
        if self.callbacks:
            self._safe_call(self.callbacks.on_status_change, status)
        return True

    def _emit_error(self, message: str) -> None:
        if self.callbacks:
            self._safe_call(self.callbacks.on_error, message)

    @staticmethod
    def _safe_call(callback: Callable, *args) -> None:
        try:
            callback(*args)
        except Exception as e:
            logger.error(f"Error in recognition callback {getattr(callback, '__name__', callback)}: {e}",
                         exc_info=True)
