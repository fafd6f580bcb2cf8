"""Backend selection: try the AI parser when enabled, fall back to the rules engine."""

from __future__ import annotations

import logging
from datetime import datetime

from nltasks.ai.claude_parser import extract_tasks_with_ai, is_configured, parse_task_with_ai
from nltasks.config import settings
from nltasks.meetings.extractor import extract_tasks
from nltasks.parsing.models import ParsedTask
from nltasks.parsing.task_parser import parse_task, snapshot_now

logger = logging.getLogger(__name__)

AI_BACKEND = "ai"
RULES_BACKEND = "rules"


def ai_enabled(use_ai: bool | None = None) -> bool:
    """Whether the AI backend should be tried (explicit flag, else settings)."""
    wanted = settings.ai_parser_enabled if use_ai is None else use_ai
    return wanted and is_configured()


def parse_task_with_fallback(
    text: str, now: datetime | None = None, use_ai: bool | None = None
) -> tuple[ParsedTask, str]:
    """Parse one task, preferring the AI backend and falling back on any failure.

    Returns:
        ``(task, backend)`` where *backend* is ``"ai"`` or ``"rules"``.
    """
    now = snapshot_now(now)
    if ai_enabled(use_ai):
        try:
            return parse_task_with_ai(text, now), AI_BACKEND
        except Exception:
            logger.exception("AI task parsing failed, using rule-based parser")
    return parse_task(text, now), RULES_BACKEND


def extract_tasks_with_fallback(
    transcript: str, now: datetime | None = None, use_ai: bool | None = None
) -> tuple[list[ParsedTask], str]:
    """Extract meeting tasks, preferring the AI backend and falling back on any failure.

    Returns:
        ``(tasks, backend)`` where *backend* is ``"ai"`` or ``"rules"``.
    """
    now = snapshot_now(now)
    if ai_enabled(use_ai):
        try:
            return extract_tasks_with_ai(transcript, now), AI_BACKEND
        except Exception:
            logger.exception("AI transcript extraction failed, using rule-based extractor")
    return extract_tasks(transcript, now), RULES_BACKEND
