"""Explicit priority tag detection (``P1`` .. ``P4``)."""

from __future__ import annotations

import re

from nltasks.parsing.models import DEFAULT_PRIORITY, Priority

_PRIORITY_RE: re.Pattern[str] = re.compile(r"\b(P[1-4])\b", re.IGNORECASE)


def extract_priority(text: str) -> tuple[Priority, str]:
    """Find the first priority tag in *text*.

    Args:
        text: Free-form task text.

    Returns:
        ``(priority, remaining_text)``. The first tag is removed from the text;
        later tags are left alone. Without a tag the default ``P3`` is returned
        together with the unchanged text.
    """
    match = _PRIORITY_RE.search(text)
    if match is None:
        return DEFAULT_PRIORITY, text

    priority = Priority(match.group(1).upper())
    remaining = text[: match.start()] + text[match.end() :]
    return priority, remaining
