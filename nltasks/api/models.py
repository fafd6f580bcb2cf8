"""Pydantic request/response schemas for the task parsing API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from nltasks.parsing.models import ParsedTask, Priority


class ParseTaskRequest(BaseModel):
    """Request body for the /api/tasks/parse endpoint."""

    text: str
    now: datetime | None = None
    use_ai: bool | None = None


class ExtractTasksRequest(BaseModel):
    """Request body for the /api/meetings/tasks endpoint."""

    transcript: str
    now: datetime | None = None
    use_ai: bool | None = None


class ParsedTaskResponse(BaseModel):
    """A single parsed task in API responses."""

    name: str
    assignee: str
    due: datetime | None = None
    priority: Priority = Priority.P3
    description: str | None = None

    @classmethod
    def from_task(cls, task: ParsedTask) -> ParsedTaskResponse:
        return cls(
            name=task.name,
            assignee=task.assignee,
            due=task.due,
            priority=task.priority,
            description=task.description,
        )


class ParseTaskResponse(BaseModel):
    """Response body for the /api/tasks/parse endpoint."""

    task: ParsedTaskResponse
    backend: str


class ExtractTasksResponse(BaseModel):
    """Response body for the /api/meetings/tasks endpoint."""

    count: int
    tasks: list[ParsedTaskResponse] = []
    backend: str


class SuggestionsRequest(BaseModel):
    """Request body for the /api/tasks/suggestions endpoint."""

    text: str


class SuggestionsResponse(BaseModel):
    """Response body for the /api/tasks/suggestions endpoint."""

    suggestions: list[str] = []
