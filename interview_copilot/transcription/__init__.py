"""Transcript accumulation for the interview copilot."""

from .accumulator import TranscriptAccumulator

__all__ = [
    "TranscriptAccumulator",
]
