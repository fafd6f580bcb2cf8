"""Assignment-phrase patterns: who was asked to do what in a single sentence."""

from __future__ import annotations

import re
from dataclasses import dataclass

from nltasks.parsing.models import AssignmentMatch

MIN_PHRASE_LENGTH = 3

# Names are matched case-sensitively; the connecting words are not.
_NAME = r"([A-Z][a-z]+)"
_ACTION = r"(.*?)(?:\s+(?i:by|before)\s+|$)"


@dataclass(frozen=True)
class AssignmentPattern:
    """One assignment form. Group 1 captures the name, group 2 the action."""

    name: str
    regex: re.Pattern[str]


# Tried in order; the first pattern that matches the sentence wins.
ASSIGNMENT_PATTERNS: tuple[AssignmentPattern, ...] = (
    # "Aman you take the landing page"
    AssignmentPattern("name_you", re.compile(rf"\b{_NAME}\s+(?i:you)\s+{_ACTION}")),
    # "Aman take care of client follow-up"
    AssignmentPattern(
        "name_take_care_of", re.compile(rf"\b{_NAME}\s+(?i:take\s+care\s+of)\s+{_ACTION}")
    ),
    # "Aman please review the marketing deck"
    AssignmentPattern("name_please", re.compile(rf"\b{_NAME}\s+(?i:please)\s+{_ACTION}")),
    # "Aman handle the budget review"
    AssignmentPattern("name_handle", re.compile(rf"\b{_NAME}\s+(?i:handle)\s+{_ACTION}")),
    # "Ask Aman to finish the presentation"
    AssignmentPattern("ask_name_to", re.compile(rf"\b(?i:ask)\s+{_NAME}\s+(?i:to)\s+{_ACTION}")),
    # "Aman, can you prepare the presentation"
    AssignmentPattern("name_can_you", re.compile(rf"\b{_NAME},?\s+(?i:can\s+you)\s+{_ACTION}")),
    # "Let's have Aman do the landing page"
    AssignmentPattern(
        "lets_have_name",
        re.compile(
            rf"\b(?i:let['’]?s\s+have)\s+{_NAME}\s+"
            rf"(?:(?i:do|handle|take\s+care\s+of)\s+)?{_ACTION}"
        ),
    ),
)

_LEADING_ARTICLE_RE = re.compile(r"^(?:the|a|an)\s+", re.IGNORECASE)
_DEADLINE_CLAUSE_RE = re.compile(r"\s+(?:by|before|until)\s+.*$", re.IGNORECASE)
_TRAILING_PRIORITY_RE = re.compile(r"\s+P[1-4]\s*$", re.IGNORECASE)


def clean_phrase(phrase: str) -> str:
    """Strip a leading article, a trailing deadline clause and a trailing priority tag."""
    phrase = _LEADING_ARTICLE_RE.sub("", phrase.strip())
    phrase = _DEADLINE_CLAUSE_RE.sub("", phrase)
    phrase = _TRAILING_PRIORITY_RE.sub("", phrase)
    return " ".join(phrase.split())


def match_assignment(sentence: str) -> AssignmentMatch | None:
    """Match *sentence* against the assignment patterns in declared order.

    Returns:
        The first pattern's match, or ``None`` if no pattern matches or the
        cleaned action phrase is shorter than ``MIN_PHRASE_LENGTH``.
    """
    for pattern in ASSIGNMENT_PATTERNS:
        match = pattern.regex.search(sentence)
        if match is None:
            continue
        phrase = clean_phrase(match.group(2))
        if len(phrase) < MIN_PHRASE_LENGTH:
            return None
        return AssignmentMatch(assignee=match.group(1), phrase=phrase, sentence=sentence)
    return None
