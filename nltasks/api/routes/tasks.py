"""Single-task endpoints: parse free text and suggest follow-up tasks."""

from __future__ import annotations

from fastapi import APIRouter

from nltasks.ai.claude_parser import suggest_subtasks
from nltasks.ai.fallback import parse_task_with_fallback
from nltasks.api.models import (
    ParsedTaskResponse,
    ParseTaskRequest,
    ParseTaskResponse,
    SuggestionsRequest,
    SuggestionsResponse,
)

router = APIRouter()


@router.post("/api/tasks/parse", response_model=ParseTaskResponse)
async def parse_task_text(request: ParseTaskRequest) -> ParseTaskResponse:
    """Parse one natural-language task description.

    Uses the AI backend when requested (or enabled in settings) and configured;
    any AI failure falls back to the rule-based parser, so this never errors on
    well-formed requests.
    """
    task, backend = parse_task_with_fallback(request.text, request.now, request.use_ai)
    return ParseTaskResponse(task=ParsedTaskResponse.from_task(task), backend=backend)


@router.post("/api/tasks/suggestions", response_model=SuggestionsResponse)
async def task_suggestions(request: SuggestionsRequest) -> SuggestionsResponse:
    """Suggest related subtasks. Empty when the AI backend is unavailable."""
    return SuggestionsResponse(suggestions=suggest_subtasks(request.text))
