"""Bounded undo history holding independent task snapshots."""

from __future__ import annotations

import time
from collections import deque
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from .models import MAX_UNDO_STACK_SIZE, Task


class UndoAction(str, Enum):
    ADD = "add"
    DELETE = "delete"
    COMPLETE = "complete"
    EDIT = "edit"
    MOVE = "move"
    DELETE_ARCHIVED = "delete-archived"
    CLEAR_ARCHIVED_BATCH = "clear-archived-batch"


@dataclass(slots=True)
class UndoEntry:
    """One reversible action.

    ``data`` carries ``task`` and ``list_id`` for single-task actions,
    ``from_list``/``to_list`` for moves and ``tasks`` (a list of
    ``{"task", "list_id"}`` mappings) for batched clears.
    """

    action: UndoAction
    data: dict[str, Any]
    timestamp: float = field(default_factory=time.time)

    @property
    def task(self) -> Optional[Task]:
        return self.data.get("task")

    @property
    def list_id(self) -> Optional[str]:
        return self.data.get("list_id")


def _snapshot(data: Mapping[str, Any]) -> dict[str, Any]:
    copied = dict(data)
    task = copied.get("task")
    if isinstance(task, Task):
        copied["task"] = task.clone()
    batch = copied.get("tasks")
    if isinstance(batch, (list, tuple)):
        copied["tasks"] = [
            {**item, "task": item["task"].clone()} if isinstance(item.get("task"), Task) else dict(item)
            for item in batch
        ]
    return copied


class UndoLog:
    """LIFO stack of undo entries; the oldest entry is discarded past ``capacity``."""

    def __init__(self, capacity: int = MAX_UNDO_STACK_SIZE) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._entries: deque[UndoEntry] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._entries.maxlen or 0

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def push(self, action: UndoAction | str, data: Mapping[str, Any]) -> UndoEntry:
        """Record ``action`` with a deep copy of every task in ``data``."""

        entry = UndoEntry(action=UndoAction(action), data=_snapshot(data))
        self._entries.append(entry)
        return entry

    def pop(self) -> Optional[UndoEntry]:
        """Return the most recent entry, or ``None`` when there is nothing to undo."""

        if not self._entries:
            return None
        return self._entries.pop()

    def clear(self) -> None:
        self._entries.clear()


__all__ = ["UndoAction", "UndoEntry", "UndoLog"]
