"""Split a meeting transcript into candidate sentences."""

from __future__ import annotations

import re
from collections.abc import Iterator

MIN_SENTENCE_LENGTH = 10

_SENTENCE_END_RE = re.compile(r"[.!?]+")


def segment(transcript: str) -> Iterator[str]:
    """Yield trimmed sentences longer than ``MIN_SENTENCE_LENGTH`` characters, in order."""
    for piece in _SENTENCE_END_RE.split(transcript):
        sentence = piece.strip()
        if len(sentence) > MIN_SENTENCE_LENGTH:
            yield sentence
