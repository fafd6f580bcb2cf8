"""Data models shared by the single-task parser and the meeting extractor."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any

UNASSIGNED = "Unassigned"
UNTITLED_TASK = "Untitled Task"


class Priority(StrEnum):
    """Explicit task priority tags, P1 being the most urgent."""

    P1 = "P1"
    P2 = "P2"
    P3 = "P3"
    P4 = "P4"

    @property
    def rank(self) -> int:
        return int(self.value[1])


DEFAULT_PRIORITY = Priority.P3


@dataclass
class ParsedTask:
    """A structured task record produced by one parse call."""

    name: str
    assignee: str = UNASSIGNED
    due: datetime | None = None
    priority: Priority = DEFAULT_PRIORITY
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "assignee": self.assignee,
            "due": self.due.isoformat(timespec="seconds") if self.due else None,
            "priority": self.priority.value,
            "description": self.description,
        }


@dataclass(frozen=True)
class AssignmentMatch:
    """A person/action pair found in one transcript sentence."""

    assignee: str
    phrase: str
    sentence: str
