"""Audio publisher module for pub/sub event publishing."""

import logging
from pubsub import pub
from ..models.audio import AudioEvent

logger = logging.getLogger(__name__)

RECORDING_TOPIC = "audio.recording"


class AudioPublisher:
    """Publishes recorded audio events on a pypubsub topic."""

    def __init__(self, topic: str = RECORDING_TOPIC):
        """Initialize audio publisher.

        Args:
            topic: Pub/sub topic name for audio events
        """
        self.topic = topic
        logger.info(f"AudioPublisher initialized with topic: {topic}")

    def publish_audio_event(self, audio_event: AudioEvent) -> None:
        pub.sendMessage(self.topic, event=audio_event)
