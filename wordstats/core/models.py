from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class WordStats:
    name: str
    words: int = 0
    english_words: int = 0
    error: Optional[str] = None
    # Stream ended with a socket error mid-body; counts cover what was read.
    truncated: bool = False

    @property
    def success(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, name: str, reason: str) -> "WordStats":
        return cls(name=name, error=reason)

    def summary(self) -> str:
        """Render the console line for this result."""
        if self.error is not None:
            return f"{self.name}: failed ({self.error})"
        return f"{self.name}: words={self.words}, English words={self.english_words}"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
