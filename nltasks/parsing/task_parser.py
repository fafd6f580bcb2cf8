"""Single free-text task parser: priority -> date/time -> assignee -> name."""

from __future__ import annotations

import logging
import re
from datetime import datetime

from nltasks.parsing.assignee import extract_assignee
from nltasks.parsing.datetime_resolver import resolve_datetime
from nltasks.parsing.models import UNTITLED_TASK, ParsedTask
from nltasks.parsing.priority import extract_priority

logger = logging.getLogger(__name__)

_FILLER_RE = re.compile(r"(?:^|\s+)by\s*$", re.IGNORECASE)


def snapshot_now(now: datetime | None = None) -> datetime:
    """Return the single clock reading used for one top-level parse call."""
    return now if now is not None else datetime.now().replace(microsecond=0)


def clean_task_name(text: str) -> str:
    """Collapse whitespace and drop a dangling ``by`` left behind by removed dates."""
    name = " ".join(text.split())
    while True:
        stripped = _FILLER_RE.sub("", name).strip()
        if stripped == name:
            return name or UNTITLED_TASK
        name = stripped


def parse_task(text: str, now: datetime | None = None) -> ParsedTask:
    """Parse one free-text task description into a ParsedTask.

    Extraction runs in a fixed order (priority, date/time, assignee), each step
    consuming its match from the text so later steps never see it. Whatever
    remains becomes the task name.

    Args:
        text: Free-form task description, e.g. ``"Call client tomorrow 9am P1"``.
        now: Reference moment for relative dates. Defaults to the wall clock,
            read once for the whole call.

    Returns:
        A fresh ParsedTask. Never raises; missing parts fall back to defaults.
    """
    now = snapshot_now(now)

    priority, remaining = extract_priority(text)
    due, remaining = resolve_datetime(remaining, now)
    assignee, remaining = extract_assignee(remaining)

    task = ParsedTask(
        name=clean_task_name(remaining),
        assignee=assignee,
        due=due,
        priority=priority,
    )
    logger.debug("Parsed %r into %s", text, task)
    return task
