"""Publishes detected questions and suggestions over pypubsub."""

import logging
from pubsub import pub

from ..models.questions import CopilotSuggestion, DetectedQuestion

logger = logging.getLogger(__name__)

QUESTION_TOPIC = "copilot.question"
SUGGESTION_TOPIC = "copilot.suggestion"


class CopilotPublisher:
    """Publishes copilot results so UI consumers can subscribe to them."""

    def __init__(self, question_topic: str = QUESTION_TOPIC, suggestion_topic: str = SUGGESTION_TOPIC):
        """Initialize copilot publisher.

        Args:
            question_topic: Pub/sub topic for DetectedQuestion events
            suggestion_topic: Pub/sub topic for CopilotSuggestion events
        """
        self.question_topic = question_topic
        self.suggestion_topic = suggestion_topic
        logger.info(f"CopilotPublisher initialized with topics: {question_topic}, {suggestion_topic}")

    def publish_question(self, question: DetectedQuestion) -> None:
        pub.sendMessage(self.question_topic, question=question)
        logger.debug(f"Published question: {question.id} ({question.type.value})")

    def publish_suggestion(self, suggestion: CopilotSuggestion) -> None:
        pub.sendMessage(self.suggestion_topic, suggestion=suggestion)
        logger.debug(f"Published suggestion: {suggestion.id} for {suggestion.question_id}")
