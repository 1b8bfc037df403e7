"""Interview copilot: live question detection and answer suggestions."""

__version__ = "0.1.0"
