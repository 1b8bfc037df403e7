"""Unit tests for TranscriptAccumulator."""

import pytest

from interview_copilot.models.transcription import TranscriptChunk
from interview_copilot.transcription.accumulator import TranscriptAccumulator


def final(text: str) -> TranscriptChunk:
    return TranscriptChunk.create(text=text, is_final=True, confidence=0.9)


def interim(text: str) -> TranscriptChunk:
    return TranscriptChunk.create(text=text, is_final=False, confidence=0.5)


@pytest.mark.unit
class TestTranscriptAccumulator:
    """Test cases for sentence extraction."""

    def test_interim_then_final_chunk(self):
        """Interim text is ignored; the final chunk yields exactly one sentence."""
        accumulator = TranscriptAccumulator()

        assert accumulator.add_chunk(interim("Tell me about a time")) == []
        assert accumulator.get_buffer() == ""

        sentences = accumulator.add_chunk(final("Tell me about a time you failed."))

        assert sentences == ["Tell me about a time you failed."]
        assert accumulator.get_buffer() == ""

    def test_sentence_split_across_chunks(self):
        """Text without a boundary stays buffered until punctuation arrives."""
        accumulator = TranscriptAccumulator()

        assert accumulator.add_chunk(final("How do you ")) == []
        assert accumulator.get_buffer() == "How do you "

        sentences = accumulator.add_chunk(final("scale a database? And then"))

        assert sentences == ["How do you scale a database?"]
        assert accumulator.get_buffer() == "And then"

    def test_multiple_sentences_in_one_chunk(self):
        accumulator = TranscriptAccumulator()

        sentences = accumulator.add_chunk(final("Thanks for coming in. Why do you want this role? Great"))

        assert sentences == ["Thanks for coming in.", "Why do you want this role?"]
        assert accumulator.get_buffer() == "Great"

    def test_short_fragments_suppressed(self):
        """Sentences of five characters or fewer are never emitted."""
        accumulator = TranscriptAccumulator()

        sentences = accumulator.add_chunk(final("Okay. Hm! What is a mutex? Sure."))

        assert sentences == ["What is a mutex?"]
        assert "Okay" not in accumulator.get_buffer()
        assert "Sure" not in accumulator.get_buffer()

    def test_extracted_text_never_returned_again(self):
        accumulator = TranscriptAccumulator()
        emitted = []

        for text in ["Tell me about ", "your last project. What ", "went wrong? Then ", "we can move on"]:
            emitted.extend(accumulator.add_chunk(final(text)))
            for sentence in emitted:
                assert sentence not in accumulator.get_buffer()

        assert emitted == ["Tell me about your last project.", "What went wrong?"]
        assert accumulator.get_buffer() == "Then we can move on"

    def test_flush_returns_trimmed_buffer_and_clears(self):
        accumulator = TranscriptAccumulator()
        accumulator.add_chunk(final("  what was your approach to the outage "))

        assert accumulator.flush() == "what was your approach to the outage"
        assert accumulator.get_buffer() == ""
        assert accumulator.flush() == ""

    def test_flush_does_not_filter_short_text(self):
        """Length filtering of flushed text is the caller's job."""
        accumulator = TranscriptAccumulator()
        accumulator.add_chunk(final("so anyway"))

        assert accumulator.flush() == "so anyway"
