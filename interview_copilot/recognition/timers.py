"""Clock and timer primitives used by the recognition adapter.

Everything time-dependent in the adapter goes through a ``Clock`` so that
restart delays and silence polling can be driven deterministically in tests.
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class TimerHandle(ABC):
    """A scheduled callback that can be cancelled."""

    @abstractmethod
    def cancel(self) -> None:
        pass


class Clock(ABC):
    """Source of monotonic time and delayed callbacks."""

    @abstractmethod
    def now(self) -> float:
        """Current monotonic time in seconds."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Run ``callback`` once after ``delay`` seconds."""


class _AsyncioTimerHandle(TimerHandle):

    def __init__(self, handle: asyncio.TimerHandle):
        self._handle = handle

    def cancel(self) -> None:
        self._handle.cancel()


class LoopClock(Clock):
    """Clock backed by ``time.monotonic`` and an asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now(self) -> float:
        return time.monotonic()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        return _AsyncioTimerHandle(self.loop.call_later(delay, callback))


class Ticker:
    """Invokes a callback every ``interval`` seconds until stopped."""

    def __init__(self, clock: Clock, interval: float, callback: Callable[[], None]):
        self.clock = clock
        self.interval = interval
        self.callback = callback
        self._handle: Optional[TimerHandle] = None
        self.is_running = False

    def start(self) -> None:
        """Start ticking; restarting a running ticker resets its phase."""
        self.stop()
        self.is_running = True
        self._schedule()

    def stop(self) -> None:
        """Stop ticking. Safe to call when not running."""
        self.is_running = False
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _schedule(self) -> None:
        self._handle = self.clock.call_later(self.interval, self._tick)

    def _tick(self) -> None:
        if not self.is_running:
            return
        try:
            self.callback()
        except Exception as e:
            logger.error(f"Error in ticker callback: {e}", exc_info=True)
        # The callback may have stopped us
        if self.is_running:
            self._schedule()
