"""Cross-list virtual views defined by predicates."""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from ..utils.datetime_utils import is_overdue, is_this_week, is_today
from .models import Priority, Task

TaskPredicate = Callable[[Task, datetime.datetime], bool]


class SmartList(str, Enum):
    ALL = "all"
    TODAY = "today"
    OVERDUE = "overdue"
    WEEK = "week"
    HIGH_PRIORITY = "highPriority"


@dataclass(frozen=True, slots=True)
class SmartListDefinition:
    key: SmartList
    label: str
    predicate: TaskPredicate
    empty_title: str
    empty_message: str


SMART_LISTS: dict[SmartList, SmartListDefinition] = {
    SmartList.ALL: SmartListDefinition(
        SmartList.ALL,
        "All Tasks",
        lambda task, now: True,
        "No tasks yet",
        "Add your first task to get started!",
    ),
    SmartList.TODAY: SmartListDefinition(
        SmartList.TODAY,
        "Due Today",
        lambda task, now: is_today(task.due_date, now),
        "Nothing due today",
        "Enjoy your free time!",
    ),
    SmartList.OVERDUE: SmartListDefinition(
        SmartList.OVERDUE,
        "Overdue",
        lambda task, now: is_overdue(task.due_date, now),
        "All caught up!",
        "No overdue tasks.",
    ),
    SmartList.WEEK: SmartListDefinition(
        SmartList.WEEK,
        "This Week",
        lambda task, now: is_this_week(task.due_date, now),
        "Week looks clear",
        "No tasks due this week",
    ),
    SmartList.HIGH_PRIORITY: SmartListDefinition(
        SmartList.HIGH_PRIORITY,
        "High Priority",
        lambda task, now: task.priority is Priority.HIGH,
        "No urgent tasks",
        "Nothing marked high priority right now",
    ),
}


def resolve_smart_list(value: SmartList | str | None) -> Optional[SmartList]:
    """Return the smart list named by ``value`` or ``None`` when unknown."""

    if value is None or isinstance(value, SmartList):
        return value
    try:
        return SmartList(value)
    except ValueError:
        return None


__all__ = [
    "SMART_LISTS",
    "SmartList",
    "SmartListDefinition",
    "TaskPredicate",
    "resolve_smart_list",
]
