"""Heuristic assignee detection: the first capitalised non-stopword token."""

from __future__ import annotations

import re

from nltasks.parsing.models import UNASSIGNED

_PREPOSITIONS = frozenset({"by", "for", "with", "to", "from", "at", "on", "in"})
_TASK_VERBS = frozenset(
    {"finish", "complete", "call", "email", "send", "review", "update", "create"}
)
STOPWORDS = _PREPOSITIONS | _TASK_VERBS


def _is_candidate(token: str) -> bool:
    return len(token) > 1 and token[0].isupper() and token.lower() not in STOPWORDS


def extract_assignee(text: str) -> tuple[str, str]:
    """Pick the likely assignee out of *text*.

    Args:
        text: Task text, usually with priority and date tokens already removed.

    Returns:
        ``(assignee, remaining_text)``. Every whitespace-delimited occurrence of
        the chosen token is removed. Defaults to ``"Unassigned"`` with the text
        unchanged.
    """
    for token in text.split():
        if _is_candidate(token):
            token_re = re.compile(rf"(?<!\S){re.escape(token)}(?!\S)")
            return token, token_re.sub("", text)
    return UNASSIGNED, text
