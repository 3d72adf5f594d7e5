"""Concurrent HTTP word counter with English dictionary lookup."""

__version__ = "1.0.0"
