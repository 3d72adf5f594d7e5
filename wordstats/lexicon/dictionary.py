"""English word list used to recognize tokens."""
from __future__ import annotations

import re
from pathlib import Path
from typing import FrozenSet, Iterable, Iterator, List

from wordstats.infra.logging import get_unified_logger

# C-locale isspace: Unicode spaces such as \xa0 do not separate words.
_ASCII_WS = re.compile(r"[ \t\n\r\v\f]+")


def split_words(text: str) -> List[str]:
    return [w for w in _ASCII_WS.split(text) if w]


class Dictionary:
    """Read-only set of words.

    Built once before any worker starts and shared between threads without
    locking; there is no mutation API.
    """

    __slots__ = ("_words",)

    def __init__(self, words: Iterable[str] = ()) -> None:
        object.__setattr__(self, "_words", frozenset(words))

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("Dictionary is immutable")

    @property
    def words(self) -> FrozenSet[str]:
        return self._words

    def __contains__(self, word: object) -> bool:
        return word in self._words

    def __len__(self) -> int:
        return len(self._words)

    def __iter__(self) -> Iterator[str]:
        return iter(self._words)

    def __repr__(self) -> str:
        return f"Dictionary({len(self._words)} words)"


def load_dictionary(path: str | Path) -> Dictionary:
    """Load a word list; every whitespace-separated word is an entry.

    Normally one word per line. No case folding is applied.

    A missing file yields an empty dictionary, meaning no token is ever
    recognized.
    """
    p = Path(path)
    if not p.exists():
        get_unified_logger("lexicon", "load").warning(
            "dictionary %s not found; no words will be recognized", p
        )
        return Dictionary()

    with p.open("r", encoding="utf-8", errors="replace") as f:
        d = Dictionary(w for ln in f for w in split_words(ln))
    get_unified_logger("lexicon", "load").info("loaded %d words from %s", len(d), p)
    return d


def check_word(word: str, dictionary: Dictionary) -> bool:
    """Exact, case-sensitive membership test on an already normalized token."""
    return word in dictionary
