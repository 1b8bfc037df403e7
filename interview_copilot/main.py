"""Main application entry point for the interview copilot."""

import sys
import asyncio
import argparse
import logging
from pathlib import Path
from typing import Optional

from interview_copilot.audio.audio_pub import AudioPublisher
from interview_copilot.audio.audio_saver import WavAudioSaver
from interview_copilot.audio.capture import AudioCapture
from interview_copilot.detection.publisher import CopilotPublisher
from interview_copilot.detection.remote import (
    ChatGPTEngine,
    ChatGPTQuestionClassifier,
    ChatGPTSuggestionGenerator,
)
from interview_copilot.recognition.adapter import RecognitionEngineAdapter
from interview_copilot.recognition.google_backend import GoogleStreamingCapability
from interview_copilot.services.copilot_service import CopilotService
from interview_copilot.storage.file_manager import FileManager
from interview_copilot.ui.console_display import ConsoleDisplay

from .config import CopilotConfig

logger = logging.getLogger(__name__)


class Server:

    def __init__(self, config_path: str, log_level: Optional[str] = None):
        # Load configuration
        self.config = CopilotConfig(config_path)
        # Set up logging (command line overrides config)
        log_level = log_level or self.config.get('logging.level', 'INFO')
        setup_logging(self.config, log_level)
        self.should_exit = False

        self.service: Optional[CopilotService] = None
        self.display: Optional[ConsoleDisplay] = None
        self.audio_capture: Optional[AudioCapture] = None
        self.audio_saver: Optional[WavAudioSaver] = None

    def init(self):
        # Initialize services
        logger.info("Initializing services...")

        recognition_config = self.config.get_recognition_config()
        sample_rate = self.config.get('audio.sample_rate', 16000)
        chunk_size = self.config.get('audio.chunk_size', 1024)

        logger.info(f"Audio settings: {sample_rate}Hz, {chunk_size} samples/chunk")

        capability = GoogleStreamingCapability(
            credentials_path=self.config.get_google_credentials_path(),
            language=recognition_config.language,
            sample_rate=sample_rate,
            chunk_size=chunk_size,
        )
        capability.initialize()
        adapter = RecognitionEngineAdapter(capability, recognition_config)

        engine = ChatGPTEngine(
            api_key=self.config.get_openai_api_key(),
            model=self.config.get('openai.model', 'gpt-4o-mini'),
            timeout_seconds=self.config.get('openai.timeout_seconds', 8),
        )

        self.file_manager = FileManager(self.config.get_data_directory())
        self.display = ConsoleDisplay()
        self.display.subscribe()

        self.service = CopilotService(
            adapter=adapter,
            classifier=ChatGPTQuestionClassifier(engine),
            generator=ChatGPTSuggestionGenerator(engine),
            settings=self.config.get_detection_settings(),
            profile_context=self.config.get('profile.context'),
            file_manager=self.file_manager,
            publisher=CopilotPublisher(),
            on_error=self.display.show_error,
        )

    def run(self, duration: Optional[int], record: bool = False):
        try:
            asyncio.run(self._run(duration, record))
        finally:
            self.cleanup()

    async def _run(self, duration: Optional[int], record: bool) -> None:
        context_used = {"profile": self.config.get('profile.context'),
                        "company": self.config.get('profile.company'),
                        "role": self.config.get('profile.role')}
        if not self.service.start(application_id=self.config.get('profile.application_id'),
                                  context_used=context_used):
            raise RuntimeError("Could not start the copilot session")

        if record:
            self._start_recording(self.service.session.session_id)

        self.display.show_status("🎙  Listening for interview questions (Ctrl-C to stop)...")
        try:
            if duration:
                await asyncio.sleep(duration)
            else:
                while not self.should_exit:
                    await asyncio.sleep(1)
        finally:
            # stop() must run on the loop that owns the session
            self._finish_session()

    def _start_recording(self, session_id: str) -> None:
        sample_rate = self.config.get('audio.sample_rate', 16000)
        channels = self.config.get('audio.channels', 1)

        publisher = AudioPublisher()
        self.audio_saver = WavAudioSaver(
            str(self.file_manager.get_recording_path(session_id)),
            publisher.topic,
            sample_rate=sample_rate,
            channels=channels,
        )
        self.audio_saver.open()
        self.audio_capture = AudioCapture(
            callback=publisher.publish_audio_event,
            sample_rate=sample_rate,
            chunk_size=self.config.get('audio.chunk_size', 1024),
            channels=channels,
        )
        self.audio_capture.start_recording()

    def _finish_session(self) -> None:
        if self.service is None or not self.service.is_active:
            return
        saved = self.service.stop()
        stats = self.service.session.stats
        self.display.show_status(
            f"Session ended: {stats.questions_detected} questions, "
            f"{stats.suggestions_generated} suggestions, "
            f"avg {stats.avg_response_time_ms:.0f}ms", style="green")
        if saved:
            self.display.show_status(f"Session saved to {saved}", style="green")

    def cleanup(self):
        if self.audio_capture is not None:
            self.audio_capture.stop_recording()
            self.audio_capture = None
        if self.audio_saver is not None:
            self.audio_saver.close()
            self.audio_saver = None
        if self.display is not None:
            self.display.unsubscribe()


def setup_logging(config, level: str = "INFO") -> None:

    """Set up logging configuration from YAML config."""
    # Get log file path from config
    log_file_path = config.get('logging.file_path', 'data/logs/interview_copilot.log')
    console_output = config.get('logging.console_output', True)

    # Create logs directory if it doesn't exist
    log_dir = Path(log_file_path).parent
    log_dir.mkdir(parents=True, exist_ok=True)

    # Set up handlers
    handlers = []

    # File handler - always write to file
    file_handler = logging.FileHandler(log_file_path)
    file_handler.setLevel(logging.DEBUG)
    file_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
    )
    file_handler.setFormatter(file_formatter)
    handlers.append(file_handler)

    # Console handler - only if enabled in config
    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.WARNING)  # Only show warnings and above on console
        console_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        console_handler.setFormatter(console_formatter)
        handlers.append(console_handler)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level.upper()))
    for handler in handlers:
        root_logger.addHandler(handler)

    # Log startup
    logger = logging.getLogger(__name__)
    logger.info("="*50)
    logger.info("Interview copilot starting up")
    logger.info(f"Log file: {log_file_path}")
    logger.info(f"Log level set to: {level}")
    logger.info("="*50)


def main() -> None:
    """Main entry point for the interview copilot."""
    parser = argparse.ArgumentParser(
        description="Interview Copilot - live question detection and answer suggestions"
    )

    parser.add_argument(
        "--config",
        type=str,
        default="interview_copilot.yaml",
        help="Path to configuration YAML file (default: interview_copilot.yaml)"
    )

    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set logging level (default: from config, else INFO)"
    )

    parser.add_argument(
        "--duration",
        type=int,
        help="Stop the session after this many seconds (default: run until Ctrl-C)"
    )

    parser.add_argument(
        "--record",
        action="store_true",
        help="Also save the session audio as a WAV file"
    )

    parser.add_argument(
        "--version",
        action="version",
        version="Interview Copilot v0.1.0"
    )

    args = parser.parse_args()

    try:
        server = Server(args.config, args.log_level)
    except (FileNotFoundError, ValueError) as e:
        print(f"❌ Configuration error: {e}")
        sys.exit(1)

    try:
        server.init()
        server.run(args.duration, record=args.record)
    except KeyboardInterrupt:
        print("\n👋 Goodbye!")
    except Exception as e:
        print(f"❌ Error: {e}")
        logging.error(f"Application error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
