"""Domain models representing tasks, lists and the persisted store root."""

from __future__ import annotations

import datetime
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from ..schemas.settings import ChecklistSettings

DEFAULT_LIST_ID = "default"
DEFAULT_LIST_NAME = "My Tasks"

MAX_TASK_TEXT_LENGTH = 10000
MAX_TASK_NOTES_LENGTH = 50000
MAX_SUBTASK_TEXT_LENGTH = 1000
MAX_LIST_NAME_LENGTH = 100
MAX_UNDO_STACK_SIZE = 50


class Priority(str, Enum):
    """Task priority; ``rank`` orders high before none."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    NONE = "none"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]

    @property
    def calendar_prefix(self) -> str:
        return _PRIORITY_PREFIX[self]

    @classmethod
    def coerce(cls, value: Any) -> "Priority":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.NONE


_PRIORITY_RANK = {
    Priority.HIGH: 1,
    Priority.MEDIUM: 2,
    Priority.LOW: 3,
    Priority.NONE: 4,
}

_PRIORITY_PREFIX = {
    Priority.HIGH: "🔴 ",
    Priority.MEDIUM: "🟡 ",
    Priority.LOW: "🟢 ",
    Priority.NONE: "",
}

# Order used when cycling priority from the checklist.
PRIORITY_CYCLE = (Priority.NONE, Priority.LOW, Priority.MEDIUM, Priority.HIGH)


class Recurrence(str, Enum):
    """Supported repeat schedules."""

    DAILY = "daily"
    WEEKLY = "weekly"

    @classmethod
    def coerce(cls, value: Any) -> Optional["Recurrence"]:
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


class SortBy(str, Enum):
    MANUAL = "manual"
    PRIORITY = "priority"
    DUE_DATE = "dueDate"
    CREATED = "created"


class Partition(str, Enum):
    """Which side of a list a task currently lives in."""

    TODOS = "todos"
    ARCHIVED = "archived"


def generate_id() -> str:
    """Return a new opaque identifier for tasks, subtasks and lists."""

    return uuid.uuid4().hex


def now_ms() -> int:
    return int(datetime.datetime.now().timestamp() * 1000)


def _iso(value: Optional[datetime.datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat()


@dataclass(slots=True)
class Subtask:
    """Checklist item owned by a single parent task."""

    id: str
    text: str
    completed: bool = False
    created_at: int = field(default_factory=now_ms)

    def clone(self) -> "Subtask":
        return Subtask(
            id=self.id,
            text=self.text,
            completed=self.completed,
            created_at=self.created_at,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "completed": self.completed,
            "createdAt": self.created_at,
        }


@dataclass(slots=True)
class Task:
    """A single checklist entry.

    ``due_date`` is a naive local datetime. A due time of exactly midnight is
    the all-day sentinel, so a task genuinely due at 00:00 cannot be told
    apart from an all-day task.
    """

    id: str
    text: str
    priority: Priority = Priority.NONE
    due_date: Optional[datetime.datetime] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    all_day: bool = True
    recurrence: Optional[Recurrence] = None
    recurrence_end_date: Optional[datetime.datetime] = None
    tags: list[str] = field(default_factory=list)
    subtasks: list[Subtask] = field(default_factory=list)
    notes: str = ""
    linked_note: Optional[str] = None
    calendar_event_path: Optional[str] = None
    created_at: int = field(default_factory=now_ms)
    completed_at: Optional[int] = None
    notified: bool = False
    notified15: bool = False

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None

    @property
    def is_all_day(self) -> bool:
        """Whether the calendar projection should be an all-day event."""

        return self.all_day and not self.start_time

    def clone(self) -> "Task":
        """Return a deep, independently owned copy of this task."""

        return Task(
            id=self.id,
            text=self.text,
            priority=self.priority,
            due_date=self.due_date,
            start_time=self.start_time,
            end_time=self.end_time,
            all_day=self.all_day,
            recurrence=self.recurrence,
            recurrence_end_date=self.recurrence_end_date,
            tags=list(self.tags),
            subtasks=[subtask.clone() for subtask in self.subtasks],
            notes=self.notes,
            linked_note=self.linked_note,
            calendar_event_path=self.calendar_event_path,
            created_at=self.created_at,
            completed_at=self.completed_at,
            notified=self.notified,
            notified15=self.notified15,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase mapping stored in the persisted document."""

        payload: dict[str, Any] = {
            "id": self.id,
            "text": self.text,
            "priority": self.priority.value,
            "dueDate": _iso(self.due_date),
            "startTime": self.start_time,
            "endTime": self.end_time,
            "allDay": self.all_day,
            "recurrence": self.recurrence.value if self.recurrence else None,
            "recurrenceEndDate": _iso(self.recurrence_end_date),
            "tags": list(self.tags),
            "subtasks": [subtask.to_dict() for subtask in self.subtasks],
            "notes": self.notes,
            "linkedNote": self.linked_note,
            "calendarEventPath": self.calendar_event_path,
            "createdAt": self.created_at,
            "notified": self.notified,
            "notified15": self.notified15,
        }
        if self.completed_at is not None:
            payload["completedAt"] = self.completed_at
        return payload


@dataclass(slots=True)
class TaskList:
    """A project: an ordered set of open tasks plus its archived partition."""

    name: str
    color: Optional[str] = None
    todos: list[Task] = field(default_factory=list)
    archived: list[Task] = field(default_factory=list)

    def partition(self, which: Partition) -> list[Task]:
        return self.todos if which is Partition.TODOS else self.archived

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "color": self.color,
            "todos": [task.to_dict() for task in self.todos],
            "archived": [task.to_dict() for task in self.archived],
        }


@dataclass(slots=True)
class StoreState:
    """Root of the persisted document."""

    lists: dict[str, TaskList]
    current_list: str
    settings: ChecklistSettings = field(default_factory=ChecklistSettings)

    @classmethod
    def empty(cls) -> "StoreState":
        return cls(
            lists={DEFAULT_LIST_ID: TaskList(name=DEFAULT_LIST_NAME)},
            current_list=DEFAULT_LIST_ID,
        )

    def to_document(self) -> dict[str, Any]:
        return {
            "lists": {list_id: lst.to_dict() for list_id, lst in self.lists.items()},
            "currentList": self.current_list,
            "settings": self.settings.model_dump(mode="json", by_alias=True),
        }


__all__ = [
    "DEFAULT_LIST_ID",
    "DEFAULT_LIST_NAME",
    "MAX_TASK_TEXT_LENGTH",
    "MAX_TASK_NOTES_LENGTH",
    "MAX_SUBTASK_TEXT_LENGTH",
    "MAX_LIST_NAME_LENGTH",
    "MAX_UNDO_STACK_SIZE",
    "PRIORITY_CYCLE",
    "Partition",
    "Priority",
    "Recurrence",
    "SortBy",
    "StoreState",
    "Subtask",
    "Task",
    "TaskList",
    "generate_id",
    "now_ms",
]
