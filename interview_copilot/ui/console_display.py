"""Console display of detected questions and suggestions."""

import logging
from typing import Optional

from pubsub import pub
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from ..detection.publisher import QUESTION_TOPIC, SUGGESTION_TOPIC
from ..models.questions import CopilotSuggestion, DetectedQuestion

logger = logging.getLogger(__name__)


class ConsoleDisplay:
    """Prints copilot events as they are published."""

    def __init__(self,
                 console: Optional[Console] = None,
                 question_topic: str = QUESTION_TOPIC,
                 suggestion_topic: str = SUGGESTION_TOPIC):
        self.console = console or Console()
        self.question_topic = question_topic
        self.suggestion_topic = suggestion_topic
        self.questions_shown = 0
        self.suggestions_shown = 0

    def subscribe(self) -> None:
        pub.subscribe(self.on_question, self.question_topic)
        pub.subscribe(self.on_suggestion, self.suggestion_topic)
        logger.info(f"ConsoleDisplay subscribed to {self.question_topic}, {self.suggestion_topic}")

    def unsubscribe(self) -> None:
        try:
            pub.unsubscribe(self.on_question, self.question_topic)
            pub.unsubscribe(self.on_suggestion, self.suggestion_topic)
        except Exception as e:
            logger.warning(f"Error during unsubscribe: {e}")

    def on_question(self, question: DetectedQuestion) -> None:
        self.questions_shown += 1
        header = Text(f"{question.type.value} · {question.confidence:.0f}%", style="bold cyan")
        self.console.print(Panel(question.text, title=header, title_align="left", border_style="cyan"))

    def on_suggestion(self, suggestion: CopilotSuggestion) -> None:
        self.suggestions_shown += 1
        footer = f"generated in {suggestion.generation_time_ms:.0f}ms"
        self.console.print(Panel(suggestion.content, title="Suggestion", subtitle=footer,
                                 title_align="left", border_style="green"))

    def show_status(self, message: str, style: str = "blue") -> None:
        self.console.print(message, style=style)

    def show_error(self, message: str) -> None:
        self.console.print(f"❌ {message}", style="red")
