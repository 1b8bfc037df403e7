"""Accumulates final transcript chunks into complete sentences."""

import logging
import re
from typing import List

from ..models.transcription import TranscriptChunk

logger = logging.getLogger(__name__)

# Sentence-ending punctuation followed by whitespace
SENTENCE_END = re.compile(r"([.!?])\s+")
TRAILING_PUNCTUATION = re.compile(r"[.!?]$")

# Sentences of this trimmed length or shorter are dropped as fragments
MAX_FRAGMENT_LENGTH = 5


class TranscriptAccumulator:
    """Buffers final chunks and extracts punctuation-terminated sentences.

    Interim chunks never reach the buffer; callers keep their own live
    preview for those.
    """

    def __init__(self):
        self.buffer = ""

    def add_chunk(self, chunk: TranscriptChunk) -> List[str]:
        """Add a chunk and return any sentences it completed."""
        if not chunk.is_final:
            return []

        self.buffer += chunk.text
        return self._extract_sentences()

    def get_buffer(self) -> str:
        """Current unconsumed text."""
        return self.buffer

    def flush(self) -> str:
        """Return the trimmed buffer and clear it."""
        content = self.buffer.strip()
        self.buffer = ""
        if content:
            logger.debug(f"Flushed accumulator: '{content[:50]}'")
        return content

    def _extract_sentences(self) -> List[str]:
        sentences = []
        last_index = 0

        for match in SENTENCE_END.finditer(self.buffer):
            sentence = self.buffer[last_index:match.start() + 1].strip()
            if len(sentence) > MAX_FRAGMENT_LENGTH:
                sentences.append(sentence)
            last_index = match.end()

        if last_index > 0:
            self.buffer = self.buffer[last_index:]

        # Speech that ended exactly on a sentence boundary
        remainder = self.buffer.strip()
        if TRAILING_PUNCTUATION.search(remainder):
            if len(remainder) > MAX_FRAGMENT_LENGTH:
                sentences.append(remainder)
            self.buffer = ""

        if sentences:
            logger.debug(f"Extracted {len(sentences)} sentence(s); buffer now '{self.buffer[:50]}'")
        return sentences
