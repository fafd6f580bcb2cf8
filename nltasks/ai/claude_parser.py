"""Claude-powered task parsing, a drop-in alternative to the rule-based engine.

Results go through the same validation as the rule-based path: priorities are
clamped to P1..P4, empty fields get the usual defaults and due moments are
pushed forward until they are no earlier than ``now``.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any

from anthropic import Anthropic, APIError

from nltasks.config import settings
from nltasks.parsing.datetime_resolver import ensure_not_past
from nltasks.parsing.models import DEFAULT_PRIORITY, UNASSIGNED, ParsedTask, Priority


class AIParserError(RuntimeError):
    """The AI backend could not produce a usable result."""


_TASK_ITEM_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "name": {
            "type": "string",
            "description": "Short imperative description of the task.",
        },
        "assignee": {
            "type": "string",
            "description": "Person responsible, or 'Unassigned' if nobody is named.",
        },
        "priority": {
            "type": "string",
            "enum": ["P1", "P2", "P3", "P4"],
            "description": "P1 urgent+important, P2 important, P3 normal (default), P4 low.",
        },
        "due": {
            "type": "string",
            "description": "Due moment as ISO-8601 (YYYY-MM-DDTHH:MM:SS), omitted if none.",
        },
        "description": {
            "type": "string",
            "description": "Additional details, if any.",
        },
    },
    "required": ["name", "assignee", "priority"],
}

# Tool definition for Claude structured output
TASKS_TOOL: dict[str, Any] = {
    "name": "store_parsed_tasks",
    "description": (
        "Store the structured tasks parsed from the user's text. "
        "Call this once with every task found."
    ),
    "input_schema": {
        "type": "object",
        "properties": {
            "tasks": {
                "type": "array",
                "description": "Parsed tasks, in the order they appear in the text.",
                "items": _TASK_ITEM_SCHEMA,
            },
        },
        "required": ["tasks"],
    },
}

SUGGESTIONS_TOOL: dict[str, Any] = {
    "name": "store_task_suggestions",
    "description": "Store 3-5 related subtasks or follow-up tasks.",
    "input_schema": {
        "type": "object",
        "properties": {
            "suggestions": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Practical, actionable task descriptions.",
            },
        },
        "required": ["suggestions"],
    },
}

_SYSTEM_PROMPT_TEMPLATE = (
    "You are an assistant that turns natural-language task descriptions into "
    "structured task records.\n\n"
    "Date rules:\n"
    "- The current moment is {now}.\n"
    "- NEVER return a due moment earlier than the current moment.\n"
    "- If no year is given, use {year}, or {next_year} if the date would be in the past.\n"
    "- Relative dates such as 'tomorrow' or 'next week' are counted from the current moment.\n"
    "- A bare weekday means its next occurrence after today.\n\n"
    "Defaults: assignee 'Unassigned', priority 'P3'.\n\n"
    "Use the store_parsed_tasks tool to return your results."
)


def is_configured() -> bool:
    """Return True if an Anthropic API key is available."""
    return bool(settings.anthropic_api_key)


def _system_prompt(now: datetime) -> str:
    return _SYSTEM_PROMPT_TEMPLATE.format(
        now=now.isoformat(timespec="seconds"), year=now.year, next_year=now.year + 1
    )


def _call_tool(system: str, user_content: str, tool: dict[str, Any]) -> dict[str, Any]:
    """Force a single tool call and return its input payload."""
    client = Anthropic(api_key=settings.anthropic_api_key)

    try:
        response = client.messages.create(
            model=settings.llm_model,
            max_tokens=settings.ai_max_tokens,
            system=system,
            tools=[tool],
            tool_choice={"type": "tool", "name": tool["name"]},
            messages=[{"role": "user", "content": user_content}],
        )
    except APIError as exc:
        raise AIParserError(f"Claude request failed: {exc}") from exc

    return _tool_input(response, tool["name"])


def _tool_input(response: Any, tool_name: str) -> dict[str, Any]:
    """Pull the named tool_use block's input out of a Claude response."""
    for block in response.content:
        if block.type != "tool_use" or block.name != tool_name:
            continue

        data = block.input
        if isinstance(data, str):
            try:
                data = json.loads(data)
            except json.JSONDecodeError as exc:
                raise AIParserError(f"Tool input is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise AIParserError(f"Unexpected tool input type: {type(data).__name__}")
        return data

    raise AIParserError(f"Claude response contained no {tool_name} call")


def _parse_due(raw: Any, now: datetime) -> datetime | None:
    if not raw:
        return None
    try:
        due = datetime.fromisoformat(str(raw))
    except ValueError as exc:
        raise AIParserError(f"Invalid due moment {raw!r}") from exc

    # Align naive/aware with the snapshot so the comparison below is valid
    if due.tzinfo is None and now.tzinfo is not None:
        due = due.replace(tzinfo=now.tzinfo)
    elif due.tzinfo is not None and now.tzinfo is None:
        due = due.astimezone().replace(tzinfo=None)
    elif due.tzinfo is not None:
        due = due.astimezone(now.tzinfo)

    return ensure_not_past(due.replace(microsecond=0), now)


def _task_from_payload(item: Any, fallback_name: str, now: datetime) -> ParsedTask:
    """Validate one tool payload item into a ParsedTask."""
    if not isinstance(item, dict):
        raise AIParserError(f"Unexpected task item: {item!r}")

    raw_priority = str(item.get("priority") or "").upper()
    priority = Priority(raw_priority) if raw_priority in Priority.__members__ else DEFAULT_PRIORITY

    return ParsedTask(
        name=str(item.get("name") or "").strip() or fallback_name,
        assignee=str(item.get("assignee") or "").strip() or UNASSIGNED,
        due=_parse_due(item.get("due"), now),
        priority=priority,
        description=item.get("description") or None,
    )


def parse_task_with_ai(text: str, now: datetime) -> ParsedTask:
    """Parse a single task description with Claude.

    Args:
        text: Free-form task description.
        now: Reference moment, sent to the model and used for validation.

    Returns:
        A validated ParsedTask.

    Raises:
        AIParserError: On API failure or an unusable response.
    """
    data = _call_tool(
        _system_prompt(now),
        f"Parse this task description into exactly one task:\n\n{text}",
        TASKS_TOOL,
    )
    items = data.get("tasks") or []
    if not items:
        raise AIParserError("Claude returned no task")
    return _task_from_payload(items[0], text, now)


def extract_tasks_with_ai(transcript: str, now: datetime) -> list[ParsedTask]:
    """Extract assigned tasks from a meeting transcript with Claude.

    Raises:
        AIParserError: On API failure or an unusable response.
    """
    data = _call_tool(
        _system_prompt(now),
        (
            "Extract every task that is assigned to a person in this meeting "
            f"transcript. Ignore sentences that assign nothing:\n\n{transcript}"
        ),
        TASKS_TOOL,
    )
    items = data.get("tasks")
    if not isinstance(items, list):
        raise AIParserError("Claude returned no task list")

    tasks: list[ParsedTask] = []
    for item in items:
        task = _task_from_payload(item, "", now)
        if task.name:
            tasks.append(task)
    return tasks


def suggest_subtasks(text: str) -> list[str]:
    """Suggest 3-5 related subtasks for *text*.

    Suggestions are a convenience: any failure, including a missing API key,
    yields an empty list.
    """
    if not is_configured():
        return []
    try:
        data = _call_tool(
            "You help break tasks down into practical, actionable next steps.",
            f"Suggest 3-5 related subtasks or follow-up tasks for:\n\n{text}",
            SUGGESTIONS_TOOL,
        )
    except AIParserError:
        return []

    suggestions = data.get("suggestions")
    if not isinstance(suggestions, list):
        return []
    return [str(s).strip() for s in suggestions if str(s).strip()]
