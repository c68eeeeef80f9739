"""Normalization of untrusted task, list and document records."""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import ValidationError

from ..schemas.settings import ChecklistSettings
from ..utils.datetime_utils import parse_stored_datetime, to_epoch_ms
from .models import (
    DEFAULT_LIST_ID,
    DEFAULT_LIST_NAME,
    MAX_LIST_NAME_LENGTH,
    MAX_SUBTASK_TEXT_LENGTH,
    MAX_TASK_NOTES_LENGTH,
    MAX_TASK_TEXT_LENGTH,
    Priority,
    Recurrence,
    StoreState,
    Subtask,
    Task,
    TaskList,
    generate_id,
    now_ms,
)

logger = logging.getLogger(__name__)

# ``\w`` matches Unicode letters, digits and underscore.
_TAG_PATTERN = re.compile(r"#[\w-]+")
_TIME_OF_DAY = re.compile(r"^(\d{1,2}):(\d{2})$")


def extract_tags(text: Optional[str]) -> list[str]:
    """Return the lowercased ``#tag`` tokens found in ``text``."""

    if not text:
        return []
    return [match.lower() for match in _TAG_PATTERN.findall(text)]


@dataclass(frozen=True, slots=True)
class ValidationLimits:
    """Length caps applied while normalizing records."""

    max_text_length: int = MAX_TASK_TEXT_LENGTH
    max_notes_length: int = MAX_TASK_NOTES_LENGTH
    max_subtask_length: int = MAX_SUBTASK_TEXT_LENGTH
    max_list_name_length: int = MAX_LIST_NAME_LENGTH


def _coerce_timestamp_ms(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    parsed = parse_stored_datetime(value)
    if parsed is None:
        return None
    return to_epoch_ms(parsed)


def _coerce_time_of_day(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    match = _TIME_OF_DAY.match(value.strip())
    if match is None or int(match.group(1)) > 23 or int(match.group(2)) > 59:
        return None
    return match.group(0)


def _optional_string(value: Any) -> Optional[str]:
    if isinstance(value, str) and value:
        return value
    return None


class TaskValidator:
    """Turn arbitrary records into well-formed domain objects.

    Nothing read from disk or received from a caller is trusted: every field
    is coerced to its expected type or replaced by a safe default, and records
    without usable text are dropped.
    """

    def __init__(self, limits: Optional[ValidationLimits] = None) -> None:
        self._limits = limits or ValidationLimits()

    @property
    def limits(self) -> ValidationLimits:
        return self._limits

    def validate_subtask(self, raw: Any) -> Optional[Subtask]:
        if not isinstance(raw, Mapping):
            return None
        text = raw.get("text")
        if not isinstance(text, str):
            return None
        subtask_id = raw.get("id")
        return Subtask(
            id=subtask_id if isinstance(subtask_id, str) and subtask_id else generate_id(),
            text=text[: self._limits.max_subtask_length],
            completed=bool(raw.get("completed")),
            created_at=_coerce_timestamp_ms(raw.get("createdAt")) or now_ms(),
        )

    def validate_task(self, raw: Any) -> Optional[Task]:
        """Return a normalized ``Task`` or ``None`` when ``raw`` has no usable text."""

        if not isinstance(raw, Mapping):
            return None

        text = raw.get("text")
        if not isinstance(text, str) or not text.strip():
            return None

        task_id = raw.get("id")
        raw_tags = raw.get("tags")
        if isinstance(raw_tags, (list, tuple)):
            tags = [tag for tag in raw_tags if isinstance(tag, str)]
        else:
            tags = extract_tags(text)

        raw_subtasks = raw.get("subtasks")
        subtasks: list[Subtask] = []
        if isinstance(raw_subtasks, (list, tuple)):
            for item in raw_subtasks:
                if isinstance(item, Subtask):
                    subtasks.append(item.clone())
                    continue
                subtask = self.validate_subtask(item)
                if subtask is not None:
                    subtasks.append(subtask)

        notes = raw.get("notes")
        priority = raw.get("priority")
        recurrence = raw.get("recurrence")

        return Task(
            id=task_id if isinstance(task_id, str) and task_id else generate_id(),
            text=text[: self._limits.max_text_length],
            priority=Priority.coerce(priority),
            due_date=parse_stored_datetime(raw.get("dueDate")),
            start_time=_coerce_time_of_day(raw.get("startTime")),
            end_time=_coerce_time_of_day(raw.get("endTime")),
            all_day=raw.get("allDay") is not False,
            recurrence=Recurrence.coerce(recurrence) if recurrence else None,
            recurrence_end_date=parse_stored_datetime(raw.get("recurrenceEndDate")),
            tags=tags,
            subtasks=subtasks,
            notes=notes[: self._limits.max_notes_length] if isinstance(notes, str) else "",
            linked_note=_optional_string(raw.get("linkedNote")),
            calendar_event_path=_optional_string(raw.get("calendarEventPath")),
            created_at=_coerce_timestamp_ms(raw.get("createdAt")) or now_ms(),
            completed_at=_coerce_timestamp_ms(raw.get("completedAt")),
            notified=bool(raw.get("notified")),
            notified15=bool(raw.get("notified15")),
        )

    def _validate_tasks(self, raw: Any, list_id: str, partition: str) -> list[Task]:
        if not isinstance(raw, (list, tuple)):
            return []
        tasks: list[Task] = []
        dropped = 0
        for item in raw:
            task = self.validate_task(item)
            if task is None:
                dropped += 1
                continue
            tasks.append(task)
        if dropped:
            logger.warning(
                "Dropped %d malformed task(s) from %s of list %s", dropped, partition, list_id
            )
        return tasks

    def validate_list(self, raw: Any, list_id: Optional[str] = None) -> TaskList:
        fallback_name = list_id or "Untitled"
        if not isinstance(raw, Mapping):
            return TaskList(name=fallback_name)

        name = raw.get("name")
        color = raw.get("color")
        return TaskList(
            name=name[: self._limits.max_list_name_length] if isinstance(name, str) else fallback_name,
            color=color if isinstance(color, str) else None,
            todos=self._validate_tasks(raw.get("todos"), fallback_name, "todos"),
            archived=self._validate_tasks(raw.get("archived"), fallback_name, "archived"),
        )

    def validate_settings(self, raw: Any) -> ChecklistSettings:
        if not isinstance(raw, Mapping):
            return ChecklistSettings()
        try:
            return ChecklistSettings.model_validate(dict(raw))
        except ValidationError:
            logger.warning("Discarding unreadable settings block", exc_info=True)
            return ChecklistSettings()

    def validate_document(self, raw: Any) -> StoreState:
        """Repair a persisted document into a consistent ``StoreState``.

        At least one list always exists and ``current_list`` always names one
        of them. Task ids are made unique across the whole store.
        """

        if not isinstance(raw, Mapping):
            if raw is not None:
                logger.warning("Persisted document is not an object; starting empty")
            return StoreState.empty()

        lists: dict[str, TaskList] = {}
        raw_lists = raw.get("lists")
        if isinstance(raw_lists, Mapping):
            for list_id, raw_list in raw_lists.items():
                if not isinstance(list_id, str) or not list_id:
                    continue
                lists[list_id] = self.validate_list(raw_list, list_id)

        if not lists:
            lists[DEFAULT_LIST_ID] = TaskList(name=DEFAULT_LIST_NAME)

        seen: set[str] = set()
        for task_list in lists.values():
            for task in (*task_list.todos, *task_list.archived):
                if task.id in seen:
                    task.id = generate_id()
                seen.add(task.id)

        current_list = raw.get("currentList")
        if not isinstance(current_list, str) or current_list not in lists:
            current_list = next(iter(lists))

        return StoreState(
            lists=lists,
            current_list=current_list,
            settings=self.validate_settings(raw.get("settings")),
        )


__all__ = ["TaskValidator", "ValidationLimits", "extract_tags"]
