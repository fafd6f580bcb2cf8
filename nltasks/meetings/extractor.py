"""Rule-based task extraction from meeting transcripts."""

from __future__ import annotations

import logging
from datetime import datetime

from nltasks.meetings.patterns import match_assignment
from nltasks.meetings.segmenter import segment
from nltasks.parsing.datetime_resolver import resolve_datetime
from nltasks.parsing.models import ParsedTask
from nltasks.parsing.priority import extract_priority
from nltasks.parsing.task_parser import snapshot_now

logger = logging.getLogger(__name__)


def extract_tasks(transcript: str, now: datetime | None = None) -> list[ParsedTask]:
    """Extract every task assignment from a meeting transcript.

    Each candidate sentence is matched against the assignment patterns.
    Sentences that match nothing are skipped. For a match, the due moment and
    priority are read from the full original sentence, since the cleaned
    action phrase no longer contains the deadline or priority tokens.

    Args:
        transcript: Raw meeting transcript text.
        now: Reference moment for relative dates. Defaults to the wall clock,
            read once for the whole transcript.

    Returns:
        Tasks in the order their sentences appear. Empty if nothing matched.
    """
    now = snapshot_now(now)
    tasks: list[ParsedTask] = []

    for sentence in segment(transcript):
        match = match_assignment(sentence)
        if match is None:
            continue

        due, _ = resolve_datetime(match.sentence, now, transcript=True)
        priority, _ = extract_priority(match.sentence)
        tasks.append(
            ParsedTask(
                name=match.phrase,
                assignee=match.assignee,
                due=due,
                priority=priority,
                description=match.sentence,
            )
        )

    logger.info("Extracted %d tasks from transcript", len(tasks))
    return tasks
