"""Request payloads accepted by the checklist HTTP API."""

from __future__ import annotations

import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

PriorityValue = Literal["high", "medium", "low", "none"]
RecurrenceValue = Literal["daily", "weekly"]
SmartListValue = Literal["all", "today", "overdue", "week", "highPriority"]
_TIME_PATTERN = r"^([01]?\d|2[0-3]):[0-5]\d$"


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


def _to_local_naive(value: Optional[datetime.datetime]) -> Optional[datetime.datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


class SubtaskPayload(_CamelModel):
    text: str = Field(..., min_length=1)
    completed: bool = False


class TaskCreatePayload(_CamelModel):
    """Fields accepted when creating a task."""

    text: str = Field(..., min_length=1, description="Task text; #tags are extracted")
    list_id: Optional[str] = Field(default=None, description="Target list, current list if omitted")
    priority: PriorityValue = "none"
    due_date: Optional[datetime.datetime] = None
    start_time: Optional[str] = Field(default=None, pattern=_TIME_PATTERN)
    end_time: Optional[str] = Field(default=None, pattern=_TIME_PATTERN)
    all_day: Optional[bool] = None
    recurrence: Optional[RecurrenceValue] = None
    recurrence_end_date: Optional[datetime.datetime] = None
    tags: Optional[list[str]] = None
    notes: str = ""
    linked_note: Optional[str] = None
    subtasks: list[SubtaskPayload] = Field(default_factory=list)

    @field_validator("due_date", "recurrence_end_date")
    @classmethod
    def _normalize_dates(
        cls, value: Optional[datetime.datetime]
    ) -> Optional[datetime.datetime]:
        return _to_local_naive(value)

    def to_store_kwargs(self) -> dict[str, Any]:
        data = self.model_dump(exclude={"text", "subtasks"})
        data["subtasks"] = [subtask.model_dump() for subtask in self.subtasks]
        return data


class TaskUpdatePayload(_CamelModel):
    """Partial task edit; only fields present in the request are applied."""

    text: Optional[str] = None
    priority: Optional[PriorityValue] = None
    due_date: Optional[datetime.datetime] = None
    start_time: Optional[str] = Field(default=None, pattern=_TIME_PATTERN)
    end_time: Optional[str] = Field(default=None, pattern=_TIME_PATTERN)
    all_day: Optional[bool] = None
    recurrence: Optional[RecurrenceValue] = None
    recurrence_end_date: Optional[datetime.datetime] = None
    tags: Optional[list[str]] = None
    subtasks: Optional[list[SubtaskPayload]] = None
    notes: Optional[str] = None
    linked_note: Optional[str] = None

    @field_validator("due_date", "recurrence_end_date")
    @classmethod
    def _normalize_dates(
        cls, value: Optional[datetime.datetime]
    ) -> Optional[datetime.datetime]:
        return _to_local_naive(value)

    def to_changes(self) -> dict[str, Any]:
        return self.model_dump(include=self.model_fields_set)


class QuickAddPayload(_CamelModel):
    text: str = Field(..., min_length=1)
    list_id: Optional[str] = None


class MoveTaskPayload(_CamelModel):
    target_list_id: str


class ReorderTaskPayload(_CamelModel):
    target_id: str


class SubtaskCreatePayload(_CamelModel):
    text: str = Field(..., min_length=1)


class ListCreatePayload(_CamelModel):
    name: str = Field(..., min_length=1)
    color: Optional[str] = None


class ListUpdatePayload(_CamelModel):
    name: str = Field(..., min_length=1)
    color: Optional[str] = None


class ViewStatePayload(_CamelModel):
    """Filters applied to task views; omitted fields keep their value."""

    smart_list: Optional[SmartListValue] = None
    search_query: Optional[str] = None
    tag_filter: Optional[str] = None


class NoteRenamedPayload(_CamelModel):
    old_path: str
    new_path: str


class NoteDeletedPayload(_CamelModel):
    path: str


__all__ = [
    "ListCreatePayload",
    "ListUpdatePayload",
    "MoveTaskPayload",
    "NoteDeletedPayload",
    "NoteRenamedPayload",
    "PriorityValue",
    "QuickAddPayload",
    "RecurrenceValue",
    "ReorderTaskPayload",
    "SmartListValue",
    "SubtaskCreatePayload",
    "SubtaskPayload",
    "TaskCreatePayload",
    "TaskUpdatePayload",
    "ViewStatePayload",
]
