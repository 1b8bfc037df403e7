"""Serialized question detection and suggestion dispatch."""

import asyncio
import logging
from datetime import datetime
from typing import Awaitable, Callable, Optional

from ..models.questions import (
    ClassificationResult,
    CopilotSuggestion,
    DetectedQuestion,
    QuestionAnalysis,
    QuestionType,
)
from ..recognition.timers import Clock, LoopClock
from ..services.session_state import SessionState, new_id
from .heuristics import analyze_for_question, classify_question_type

logger = logging.getLogger(__name__)

QuestionClassifier = Callable[[str], Awaitable[ClassificationResult]]
SuggestionGenerator = Callable[[str, QuestionType, Optional[str]], Awaitable[str]]


class DetectionDispatcher:
    """Single-consumer queue that turns candidate sentences into questions.

    Sentences are processed strictly one at a time in submission order, so
    at most one classification or generation call is in flight and
    questions are recorded in the order they were spoken.
    """

    def __init__(self,
                 session: SessionState,
                 classifier: QuestionClassifier,
                 generator: SuggestionGenerator,
                 profile_context: Optional[str] = None,
                 analyzer: Callable[[str], QuestionAnalysis] = analyze_for_question,
                 type_classifier: Callable[[str], QuestionType] = classify_question_type,
                 local_threshold: int = 60,
                 remote_threshold: int = 70,
                 max_pending: int = 32,
                 clock: Optional[Clock] = None,
                 on_question: Optional[Callable[[DetectedQuestion], None]] = None,
                 on_suggestion: Optional[Callable[[CopilotSuggestion], None]] = None):
        self.session = session
        self.classifier = classifier
        self.generator = generator
        self.profile_context = profile_context
        self.analyzer = analyzer
        self.type_classifier = type_classifier
        self.local_threshold = local_threshold
        self.remote_threshold = remote_threshold
        self.clock = clock or LoopClock()
        self.on_question = on_question
        self.on_suggestion = on_suggestion

        self.queue: "asyncio.Queue[str]" = asyncio.Queue(maxsize=max_pending)
        self.is_closed = False
        self._consumer: Optional[asyncio.Task] = None

    def start(self) -> None:
        """Start the consumer task on the running loop."""
        if self._consumer is not None and not self._consumer.done():
            return
        self.is_closed = False
        self._consumer = asyncio.get_running_loop().create_task(self._consume())
        self._consumer.set_name(f"detection-dispatcher-{self.session.session_id}")
        logger.info("Detection dispatcher started")

    def submit(self, sentence: str) -> bool:
        """Queue a candidate sentence without blocking.

        Returns:
            False if the dispatcher is closed or the queue is full
        """
        if self.is_closed:
            logger.debug(f"Dispatcher closed, dropping: '{sentence[:50]}'")
            return False
        try:
            self.queue.put_nowait(sentence)
        except asyncio.QueueFull:
            logger.warning(f"Detection queue full ({self.queue.maxsize}), dropping: '{sentence[:50]}'")
            return False
        logger.debug(f"Queued sentence ({self.queue.qsize()} pending): '{sentence[:50]}'")
        return True

    async def join(self) -> None:
        """Wait until every queued sentence has been processed."""
        await self.queue.join()

    def shutdown(self) -> None:
        """Stop consuming without waiting for the in-flight call."""
        self.is_closed = True
        if self._consumer is not None:
            self._consumer.cancel()
            self._consumer = None

        dropped = 0
        while True:
            try:
                self.queue.get_nowait()
            except asyncio.QueueEmpty:
                break
            self.queue.task_done()
            dropped += 1
        logger.info(f"Detection dispatcher shut down ({dropped} pending sentences dropped)")

    async def _consume(self) -> None:
        while True:
            sentence = await self.queue.get()
            try:
                await self.process(sentence)
            except Exception as e:
                logger.error(f"Error processing sentence '{sentence[:50]}': {e}", exc_info=True)
            finally:
                self.queue.task_done()

    async def process(self, sentence: str) -> Optional[DetectedQuestion]:
        """Run two-stage detection on one sentence and generate a suggestion."""
        local = self.analyzer(sentence)
        if not local.is_question or local.confidence < self.local_threshold:
            logger.debug(f"Not a question (local confidence {local.confidence}): '{sentence[:50]}'")
            return None

        try:
            remote = await self.classifier(sentence)
        except Exception as e:
            logger.warning(f"Remote classification failed, falling back to local judgment: {e}")
            return await self._confirm(sentence, self.type_classifier(sentence), local.confidence, sentence)

        if not remote.is_question or remote.confidence < self.remote_threshold:
            logger.debug(f"Rejected by remote classifier (confidence {remote.confidence}): '{sentence[:50]}'")
            return None

        text = (remote.refined_text or "").strip() or sentence
        question_type = QuestionType.parse(remote.question_type) or self.type_classifier(sentence)
        return await self._confirm(text, question_type, remote.confidence, sentence)

    async def _confirm(self,
                       text: str,
                       question_type: QuestionType,
                       confidence: float,
                       source: str) -> Optional[DetectedQuestion]:
        if self.is_closed or self.session.is_ended:
            logger.info(f"Session ended, discarding question: '{text[:50]}'")
            return None

        started = self.clock.now()
        question = DetectedQuestion(
            id=new_id("q"),
            text=text,
            type=question_type,
            confidence=confidence,
            detected_at=datetime.now(),
            source_transcript=source,
        )
        self.session.record_question(question)
        logger.info(f"Question detected ({question_type.value}, {confidence:.0f}): '{text[:80]}'")
        self._notify(self.on_question, question)

        try:
            content = await self.generator(text, question_type, self.profile_context)
        except Exception as e:
            logger.error(f"Suggestion generation failed for {question.id}: {e}")
            return question

        if self.is_closed or self.session.is_ended:
            logger.info(f"Session ended, discarding suggestion for {question.id}")
            return question

        suggestion = CopilotSuggestion(
            id=new_id("s"),
            question_id=question.id,
            content=content,
            generated_at=datetime.now(),
            generation_time_ms=(self.clock.now() - started) * 1000.0,
        )
        self.session.record_suggestion(suggestion)
        logger.info(f"Suggestion generated for {question.id} in {suggestion.generation_time_ms:.0f}ms")
        self._notify(self.on_suggestion, suggestion)
        return question

    @staticmethod
    def _notify(callback: Optional[Callable], payload) -> None:
        if callback is None:
            return
        try:
            callback(payload)
        except Exception as e:
            logger.error(f"Error in dispatcher callback: {e}", exc_info=True)
