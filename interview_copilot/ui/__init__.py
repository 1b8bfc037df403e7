"""Console output for the interview copilot."""

from .console_display import ConsoleDisplay

__all__ = ["ConsoleDisplay"]
