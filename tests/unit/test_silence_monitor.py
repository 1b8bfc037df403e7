"""Unit tests for SilenceMonitor and Ticker."""

import pytest

from interview_copilot.recognition.silence import SilenceMonitor
from interview_copilot.recognition.timers import Ticker


@pytest.mark.unit
class TestSilenceMonitor:

    def test_fires_on_every_poll_past_threshold(self, manual_clock):
        """The silence signal repeats every poll until speech resumes."""
        fired = []
        monitor = SilenceMonitor(manual_clock, threshold_ms=2000, on_silence=fired.append, poll_interval_ms=500)
        monitor.start()

        manual_clock.advance(1.5)
        assert fired == []

        manual_clock.advance(1.0)
        assert fired == [pytest.approx(2000), pytest.approx(2500)]

    def test_speech_resets_silence(self, manual_clock):
        fired = []
        monitor = SilenceMonitor(manual_clock, threshold_ms=2000, on_silence=fired.append, poll_interval_ms=500)
        monitor.start()

        manual_clock.advance(1.5)
        monitor.record_speech()
        manual_clock.advance(1.5)

        assert fired == []
        assert monitor.silence_duration_ms() == pytest.approx(1500)

    def test_stop_cancels_polling(self, manual_clock):
        fired = []
        monitor = SilenceMonitor(manual_clock, threshold_ms=1000, on_silence=fired.append, poll_interval_ms=500)
        monitor.start()
        monitor.stop()

        manual_clock.advance(5.0)

        assert fired == []
        assert monitor.is_running is False
        assert manual_clock.pending() == []

    def test_check_returns_duration_only_past_threshold(self, manual_clock):
        monitor = SilenceMonitor(manual_clock, threshold_ms=1000, on_silence=lambda ms: None)
        monitor.record_speech()

        assert monitor.check() is None
        manual_clock.advance(1.0)
        assert monitor.check() == pytest.approx(1000)


@pytest.mark.unit
class TestTicker:

    def test_callback_errors_do_not_stop_ticking(self, manual_clock):
        calls = []

        def flaky():
            calls.append(manual_clock.now())
            raise RuntimeError("boom")

        ticker = Ticker(manual_clock, 1.0, flaky)
        ticker.start()
        manual_clock.advance(3.0)

        assert len(calls) == 3
        assert ticker.is_running is True

    def test_callback_can_stop_ticker(self, manual_clock):
        calls = []
        ticker = Ticker(manual_clock, 1.0, lambda: (calls.append(1), ticker.stop()))
        ticker.start()
        manual_clock.advance(5.0)

        assert calls == [1]
        assert ticker.is_running is False
