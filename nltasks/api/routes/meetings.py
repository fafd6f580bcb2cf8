"""Meeting endpoint: extract assigned tasks from a transcript."""

from __future__ import annotations

from fastapi import APIRouter

from nltasks.ai.fallback import extract_tasks_with_fallback
from nltasks.api.models import ExtractTasksRequest, ExtractTasksResponse, ParsedTaskResponse

router = APIRouter()


@router.post("/api/meetings/tasks", response_model=ExtractTasksResponse)
async def extract_meeting_tasks(request: ExtractTasksRequest) -> ExtractTasksResponse:
    """Extract every assigned task from a meeting transcript, in transcript order."""
    tasks, backend = extract_tasks_with_fallback(request.transcript, request.now, request.use_ai)
    return ExtractTasksResponse(
        count=len(tasks),
        tasks=[ParsedTaskResponse.from_task(t) for t in tasks],
        backend=backend,
    )
