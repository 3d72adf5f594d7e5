"""Exception hierarchy shared across the package."""
from __future__ import annotations


class WordStatsError(Exception):
    """Base class for all wordstats errors."""


class FetchError(WordStatsError):
    """Connecting to the host or sending the request failed."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"{name}: {reason}")
        self.name = name
        self.reason = reason


class ConfigError(WordStatsError):
    pass
