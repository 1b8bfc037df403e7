"""Google Speech-to-Text streaming recognition capability."""

import asyncio
import logging
import queue
import threading
from typing import Iterator, List, Optional

import pyaudio
from google.api_core import exceptions as gax_exceptions
from google.cloud import speech
from google.oauth2 import service_account

from .base import RecognitionCapability, RecognitionListener, RecognitionResult

logger = logging.getLogger(__name__)


class _StreamRun:
    """State owned by one start()/stop() cycle of the stream.

    Each run has its own stop event, audio queue and listener, so a run that
    is still closing never reads audio or reports events for the next one.
    """

    def __init__(self, listener: Optional[RecognitionListener], loop: asyncio.AbstractEventLoop):
        self.listener = listener
        self.loop = loop
        self.stop_event = threading.Event()
        self.audio_queue: "queue.Queue[Optional[bytes]]" = queue.Queue()
        self.thread: Optional[threading.Thread] = None

    def dispatch(self, method: str, *args) -> None:
        if self.listener is None or self.loop.is_closed():
            return
        self.loop.call_soon_threadsafe(getattr(self.listener, method), *args)

    def fill_buffer(self, in_data, frame_count, time_info, status_flags):
        self.audio_queue.put(in_data)
        return None, pyaudio.paContinue

    def finish(self) -> None:
        self.stop_event.set()
        self.audio_queue.put(None)


class GoogleStreamingCapability(RecognitionCapability):
    """Continuous microphone recognition using Google streaming STT.

    Audio is read from the default input device with PyAudio and streamed
    to Google on a worker thread. Listener events are marshalled back onto
    the asyncio loop that called start().
    """

    def __init__(self,
                 credentials_path: Optional[str] = None,
                 language: str = "en-US",
                 sample_rate: int = 16000,
                 chunk_size: int = 1024,
                 enable_automatic_punctuation: bool = True):
        """Initialize Google streaming capability.

        Args:
            credentials_path: Path to Google Cloud service account JSON file
            language: Language code (e.g., 'en-US', 'es-ES')
            sample_rate: Microphone sample rate in Hz
            chunk_size: Samples per microphone read
            enable_automatic_punctuation: Needed for sentence boundaries downstream
        """
        super().__init__(language)
        self.credentials_path = credentials_path
        if not self.credentials_path:
            raise ValueError("Google credentials path is required - cannot initialize without credentials")
        self.sample_rate = sample_rate
        self.chunk_size = chunk_size
        self.enable_automatic_punctuation = enable_automatic_punctuation
        self.client: Optional[speech.SpeechClient] = None

        self._run_state: Optional[_StreamRun] = None

    def initialize(self) -> bool:
        """Create the Speech client from the service account credentials."""
        logger.info(f"Loading Google credentials from: {self.credentials_path}")
        credentials = service_account.Credentials.from_service_account_file(self.credentials_path)
        self.client = speech.SpeechClient(credentials=credentials)
        logger.info(f"Google streaming recognition ready (project: {credentials.project_id})")
        return True

    def is_available(self) -> bool:
        return self.client is not None

    def start(self) -> None:
        if self.client is None:
            raise RuntimeError("Google Speech client not initialized")

        previous = self._run_state
        if previous is not None and not previous.stop_event.is_set():
            previous.finish()

        run = _StreamRun(self.listener, asyncio.get_running_loop())
        run.thread = threading.Thread(target=self._run, args=(run,), daemon=True)
        run.thread.name = "GoogleStreamingRecognition"
        self._run_state = run
        run.thread.start()

    def stop(self) -> None:
        if self._run_state is not None:
            self._run_state.finish()

    def _streaming_config(self) -> speech.StreamingRecognitionConfig:
        config = speech.RecognitionConfig(
            encoding=speech.RecognitionConfig.AudioEncoding.LINEAR16,
            sample_rate_hertz=self.sample_rate,
            language_code=self.language,
            enable_automatic_punctuation=self.enable_automatic_punctuation,
            max_alternatives=1,
        )
        return speech.StreamingRecognitionConfig(
            config=config,
            interim_results=self.interim_results,
            single_utterance=not self.continuous,
        )

    @staticmethod
    def _requests(run: _StreamRun) -> Iterator[speech.StreamingRecognizeRequest]:
        while not run.stop_event.is_set():
            chunk = run.audio_queue.get()
            if chunk is None:
                return
            data = [chunk]
            finished = False
            # Drain whatever else is buffered into a single request
            while True:
                try:
                    chunk = run.audio_queue.get_nowait()
                except queue.Empty:
                    break
                if chunk is None:
                    finished = True
                    break
                data.append(chunk)
            yield speech.StreamingRecognizeRequest(audio_content=b"".join(data))
            if finished:
                return

    def _run(self, run: _StreamRun) -> None:
        pyaudio_instance = None
        stream = None
        try:
            try:
                pyaudio_instance = pyaudio.PyAudio()
                stream = pyaudio_instance.open(
                    format=pyaudio.paInt16,
                    channels=1,
                    rate=self.sample_rate,
                    input=True,
                    frames_per_buffer=self.chunk_size,
                    stream_callback=run.fill_buffer,
                )
            except OSError as e:
                logger.error(f"Could not open microphone: {e}")
                run.dispatch("on_error", "audio-capture", str(e))
                return

            run.dispatch("on_start")
            self._stream_responses(run)
        finally:
            if stream is not None:
                stream.stop_stream()
                stream.close()
            if pyaudio_instance is not None:
                pyaudio_instance.terminate()
            run.dispatch("on_end")

    def _stream_responses(self, run: _StreamRun) -> None:
        try:
            responses = self.client.streaming_recognize(
                config=self._streaming_config(),
                requests=self._requests(run),
            )
            for response in responses:
                if run.stop_event.is_set():
                    break
                results = self._extract_results(response)
                if results:
                    run.dispatch("on_result", results)
        except gax_exceptions.OutOfRange:
            # Streaming duration limit; ending lets the adapter restart us.
            logger.info("Google streaming duration limit reached")
        except (gax_exceptions.DeadlineExceeded, gax_exceptions.ServiceUnavailable) as e:
            logger.error(f"Google streaming recognition network error: {e}")
            run.dispatch("on_error", "network", str(e))
        except gax_exceptions.GoogleAPICallError as e:
            logger.error(f"Google streaming recognition API error: {e}")
            run.dispatch("on_error", f"service-{getattr(e.code, 'name', 'error').lower()}", str(e))

    @staticmethod
    def _extract_results(response: speech.StreamingRecognizeResponse) -> List[RecognitionResult]:
        results = []
        for result in response.results:
            if not result.alternatives:
                continue
            alternative = result.alternatives[0]
            results.append(RecognitionResult(
                transcript=alternative.transcript,
                confidence=alternative.confidence,
                is_final=result.is_final,
            ))
        return results
