"""Turn a raw HTTP response into word statistics."""
from __future__ import annotations

import string
from typing import BinaryIO, Iterator, List

from wordstats.core.models import WordStats
from wordstats.infra.logging import get_unified_logger
from wordstats.lexicon.dictionary import Dictionary, check_word, split_words

# ASCII punctuation becomes a separator and ASCII capitals are folded, like
# ispunct/tolower in the C locale; non-ASCII letters keep their case.
_NORMALIZE = str.maketrans(
    string.punctuation + string.ascii_uppercase,
    " " * len(string.punctuation) + string.ascii_lowercase,
)


class _Truncated(Exception):
    """Internal marker: the socket failed after the response started."""


def _readline(stream: BinaryIO) -> bytes:
    try:
        return stream.readline()
    except OSError as e:
        raise _Truncated(str(e)) from e


def skip_headers(stream: BinaryIO) -> None:
    """Consume the status line and headers up to the blank separator line."""
    while True:
        line = _readline(stream)
        if not line or line in (b"\n", b"\r\n", b"\r"):
            return


def normalize_token(raw: str) -> List[str]:
    """Replace punctuation with spaces, re-split and lowercase.

    Only ASCII whitespace splits and only ASCII letters are lowercased.

    >>> normalize_token("Hello-there.")
    ['hello', 'there']
    """
    return split_words(raw.translate(_NORMALIZE))


def iter_tokens(stream: BinaryIO) -> Iterator[str]:
    """Yield normalized body tokens until end of stream."""
    while True:
        line = _readline(stream)
        if not line:
            return
        for raw in split_words(line.decode("utf-8", errors="replace")):
            yield from normalize_token(raw)


def process_stream(stream: BinaryIO, name: str, dictionary: Dictionary) -> WordStats:
    """Count body words and dictionary words in one HTTP response."""
    words = 0
    english = 0
    truncated = False
    try:
        skip_headers(stream)
        for token in iter_tokens(stream):
            words += 1
            if check_word(token, dictionary):
                english += 1
    except _Truncated as e:
        # Partial counts are reported as final.
        truncated = True
        get_unified_logger("analyze", "processor").warning(
            "%s: stream ended early (%s); counts are partial", name, e
        )
    return WordStats(name=name, words=words, english_words=english, truncated=truncated)


def process_file(stream: BinaryIO, name: str, dictionary: Dictionary) -> str:
    return process_stream(stream, name, dictionary).summary()
