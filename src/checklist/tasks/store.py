"""In-memory task state machine.

``TaskStore`` owns the lists, tasks and undo history and performs every
mutation synchronously without touching the file system. Calendar side
effects are the caller's job: operations return the tasks they touched so the
service layer can project them afterwards.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Optional

from ..schemas.settings import ChecklistSettings
from ..utils.datetime_utils import (
    default_end_time,
    format_time_for_calendar,
    has_time_of_day,
    is_today,
)
from .errors import TaskValidationError
from .models import (
    PRIORITY_CYCLE,
    Partition,
    Priority,
    SortBy,
    StoreState,
    Subtask,
    Task,
    TaskList,
    generate_id,
    now_ms,
)
from .quick_add import parse_quick_add
from .recurrence import next_occurrence
from .smart_lists import SMART_LISTS, SmartList, resolve_smart_list
from .undo import UndoAction, UndoEntry, UndoLog
from .validator import TaskValidator, extract_tags

logger = logging.getLogger(__name__)

_UNSET: Any = object()

_EDITABLE_FIELDS = {
    "text": "text",
    "priority": "priority",
    "due_date": "dueDate",
    "start_time": "startTime",
    "end_time": "endTime",
    "all_day": "allDay",
    "recurrence": "recurrence",
    "recurrence_end_date": "recurrenceEndDate",
    "tags": "tags",
    "subtasks": "subtasks",
    "notes": "notes",
    "linked_note": "linkedNote",
}

DUE_SOON_WINDOW = datetime.timedelta(minutes=15)
DUE_TODAY_HOUR = 9


@dataclass(slots=True)
class TaskLocation:
    task: Task
    list_id: str
    partition: Partition
    index: int


@dataclass(slots=True)
class DueNotice:
    task: Task
    kind: str
    message: str


@dataclass(slots=True)
class UndoReplay:
    """Outcome of replaying one undo entry.

    ``sync`` lists tasks whose projection must be (re)written,
    ``remove`` those whose projection must be deleted, and ``completion``
    the completion markers to patch, applied in that order.
    """

    entry: UndoEntry
    applied: bool = False
    message: Optional[str] = None
    sync: list[Task] = field(default_factory=list)
    remove: list[Task] = field(default_factory=list)
    completion: list[tuple[Task, bool]] = field(default_factory=list)


def _index_of(tasks: Sequence[Task], task_id: str) -> int:
    for index, task in enumerate(tasks):
        if task.id == task_id:
            return index
    return -1


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'' if count == 1 else 's'}"


class TaskStore:
    """Single-actor owner of the checklist state."""

    def __init__(
        self,
        state: Optional[StoreState] = None,
        *,
        validator: Optional[TaskValidator] = None,
        undo_log: Optional[UndoLog] = None,
    ) -> None:
        self._validator = validator if validator is not None else TaskValidator()
        self._state = state or StoreState.empty()
        self._undo = undo_log if undo_log is not None else UndoLog()

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------
    @property
    def state(self) -> StoreState:
        return self._state

    @property
    def settings(self) -> ChecklistSettings:
        return self._state.settings

    @settings.setter
    def settings(self, value: ChecklistSettings) -> None:
        self._state.settings = value

    @property
    def undo_log(self) -> UndoLog:
        return self._undo

    @property
    def validator(self) -> TaskValidator:
        return self._validator

    @property
    def lists(self) -> dict[str, TaskList]:
        return self._state.lists

    @property
    def current_list_id(self) -> str:
        return self._state.current_list

    @property
    def current_list(self) -> TaskList:
        return self._state.lists[self._state.current_list]

    def load(self, raw: Any) -> StoreState:
        """Replace the state with a validated copy of ``raw`` and reset undo history."""

        self._state = self._validator.validate_document(raw)
        self._undo.clear()
        return self._state

    def to_document(self) -> dict[str, Any]:
        return self._state.to_document()

    def get_list(self, list_id: str) -> Optional[TaskList]:
        return self._state.lists.get(list_id)

    def set_current_list(self, list_id: str) -> bool:
        if list_id not in self._state.lists:
            return False
        self._state.current_list = list_id
        return True

    def iter_tasks(self, *, include_archived: bool = True) -> Iterator[tuple[str, Task]]:
        for list_id, task_list in self._state.lists.items():
            yield from ((list_id, task) for task in task_list.todos)
            if include_archived:
                yield from ((list_id, task) for task in task_list.archived)

    def locate_task(self, task_id: str) -> Optional[TaskLocation]:
        for list_id, task_list in self._state.lists.items():
            for partition in (Partition.TODOS, Partition.ARCHIVED):
                tasks = task_list.partition(partition)
                index = _index_of(tasks, task_id)
                if index != -1:
                    return TaskLocation(tasks[index], list_id, partition, index)
        return None

    def find_task(self, task_id: str) -> Optional[Task]:
        location = self.locate_task(task_id)
        return location.task if location else None

    def _locate_open(self, task_id: str) -> Optional[TaskLocation]:
        location = self.locate_task(task_id)
        if location is None or location.partition is not Partition.TODOS:
            return None
        return location

    # ------------------------------------------------------------------
    # Task mutations
    # ------------------------------------------------------------------
    def add_task(
        self,
        text: str,
        *,
        list_id: Optional[str] = None,
        priority: Priority | str = Priority.NONE,
        due_date: Optional[datetime.datetime] = None,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
        all_day: Optional[bool] = None,
        recurrence: Optional[str] = None,
        recurrence_end_date: Optional[datetime.datetime] = None,
        tags: Optional[Iterable[str]] = None,
        notes: str = "",
        linked_note: Optional[str] = None,
        subtasks: Optional[Iterable[Any]] = None,
    ) -> Optional[Task]:
        """Create a task at the top of ``list_id`` (the current list by default).

        Returns ``None`` when the list does not exist. Raises
        ``TaskValidationError`` when ``text`` is empty.
        """

        target_id = list_id or self._state.current_list
        task_list = self._state.lists.get(target_id)
        if task_list is None:
            return None

        if not isinstance(text, str) or not text.strip():
            raise TaskValidationError("Task text cannot be empty")
        text = text.strip()

        if due_date is not None and has_time_of_day(due_date) and not start_time:
            start_time = format_time_for_calendar(due_date.hour, due_date.minute)
        if start_time and not end_time:
            end_time = default_end_time(start_time)
        if all_day is None:
            all_day = not start_time

        task = self._validator.validate_task(
            {
                "text": text,
                "priority": priority,
                "dueDate": due_date,
                "startTime": start_time,
                "endTime": end_time,
                "allDay": all_day,
                "recurrence": recurrence,
                "recurrenceEndDate": recurrence_end_date,
                "tags": list(tags) if tags is not None else None,
                "subtasks": list(subtasks or []),
                "notes": notes,
                "linkedNote": linked_note,
            }
        )
        if task is None:
            raise TaskValidationError("Task text cannot be empty")

        task_list.todos.insert(0, task)
        self._undo.push(UndoAction.ADD, {"task": task, "list_id": target_id})
        return task

    def quick_add(
        self,
        text: str,
        *,
        list_id: Optional[str] = None,
        now: Optional[datetime.datetime] = None,
    ) -> Optional[Task]:
        """Add a task, taking its due date from a trailing phrase such as ``"tomorrow at 3pm"``."""

        parsed = parse_quick_add(text or "", now=now)
        return self.add_task(
            parsed.text,
            list_id=list_id,
            due_date=parsed.due_date,
            start_time=parsed.start_time,
            end_time=parsed.end_time,
            all_day=parsed.all_day,
            tags=extract_tags(text),
        )

    def edit_task(self, task_id: str, changes: Mapping[str, Any]) -> Optional[Task]:
        """Apply ``changes`` (snake_case field names) to an open task.

        Returns the updated task, or ``None`` when no open task has ``task_id``.
        """

        location = self._locate_open(task_id)
        if location is None:
            return None

        unknown = set(changes) - set(_EDITABLE_FIELDS)
        if unknown:
            raise TaskValidationError(f"Unknown task field(s): {', '.join(sorted(unknown))}")

        current = location.task
        payload = current.to_dict()
        payload["subtasks"] = current.subtasks
        for name, value in changes.items():
            payload[_EDITABLE_FIELDS[name]] = value
        if "text" in changes and "tags" not in changes:
            payload["tags"] = None

        updated = self._validator.validate_task(payload)
        if updated is None:
            raise TaskValidationError("Task text cannot be empty")

        self._undo.push(UndoAction.EDIT, {"task": current, "list_id": location.list_id})
        self._state.lists[location.list_id].todos[location.index] = updated
        return updated

    def complete_task(
        self, task_id: str, *, now: Optional[datetime.datetime] = None
    ) -> Optional[Task]:
        """Archive an open task and return the next occurrence it spawned, if any.

        A spawned occurrence takes over the projection identity of a
        recurring series; when the series has ended the completed task keeps it.
        """

        location = self._locate_open(task_id)
        if location is None:
            return None

        task_list = self._state.lists[location.list_id]
        task = task_list.todos.pop(location.index)
        task.completed_at = now_ms()
        task_list.archived.insert(0, task)
        self._undo.push(UndoAction.COMPLETE, {"task": task, "list_id": location.list_id})

        if task.recurrence is None:
            return None

        next_due = next_occurrence(
            task.due_date, task.recurrence, task.recurrence_end_date, now=now
        )
        if next_due is None:
            logger.info("Recurring series for task %s has ended", task.id)
            return None

        spawned = task.clone()
        spawned.id = generate_id()
        spawned.due_date = next_due
        spawned.completed_at = None
        spawned.notified = False
        spawned.notified15 = False
        for subtask in spawned.subtasks:
            subtask.completed = False
        spawned.calendar_event_path = task.calendar_event_path
        task.calendar_event_path = None

        task_list.todos.insert(0, spawned)
        return spawned

    def uncomplete_task(self, task_id: str) -> Optional[Task]:
        location = self.locate_task(task_id)
        if location is None or location.partition is not Partition.ARCHIVED:
            return None
        task_list = self._state.lists[location.list_id]
        task = task_list.archived.pop(location.index)
        task.completed_at = None
        task_list.todos.insert(0, task)
        return task

    def delete_task(self, task_id: str) -> Optional[Task]:
        """Remove an open task permanently; the caller drops its projection."""

        location = self._locate_open(task_id)
        if location is None:
            return None
        task = self._state.lists[location.list_id].todos.pop(location.index)
        self._undo.push(UndoAction.DELETE, {"task": task, "list_id": location.list_id})
        return task

    def delete_archived_task(self, task_id: str) -> Optional[Task]:
        location = self.locate_task(task_id)
        if location is None or location.partition is not Partition.ARCHIVED:
            return None
        task = self._state.lists[location.list_id].archived.pop(location.index)
        self._undo.push(
            UndoAction.DELETE_ARCHIVED, {"task": task, "list_id": location.list_id}
        )
        return task

    def move_task_to_list(self, task_id: str, target_list_id: str) -> bool:
        location = self.locate_task(task_id)
        if location is None or location.list_id == target_list_id:
            return False
        target = self._state.lists.get(target_list_id)
        if target is None or location.partition is not Partition.TODOS:
            return False

        task = self._state.lists[location.list_id].todos.pop(location.index)
        target.todos.insert(0, task)
        self._undo.push(
            UndoAction.MOVE,
            {"task": task, "from_list": location.list_id, "to_list": target_list_id},
        )
        return True

    def cycle_priority(self, task_id: str) -> Optional[Priority]:
        task = self.find_task(task_id)
        if task is None:
            return None
        position = PRIORITY_CYCLE.index(task.priority)
        task.priority = PRIORITY_CYCLE[(position + 1) % len(PRIORITY_CYCLE)]
        return task.priority

    def reorder_task(self, dragged_id: str, target_id: str) -> bool:
        """Move ``dragged_id`` to the position of ``target_id`` within one list.

        Reordering across lists is ignored and returns False.
        """

        if dragged_id == target_id:
            return False
        dragged = self.locate_task(dragged_id)
        target = self.locate_task(target_id)
        if dragged is None or target is None or dragged.list_id != target.list_id:
            return False

        todos = self._state.lists[dragged.list_id].todos
        dragged_index = _index_of(todos, dragged_id)
        target_index = _index_of(todos, target_id)
        if dragged_index == -1 or target_index == -1:
            return False

        task = todos.pop(dragged_index)
        todos.insert(target_index, task)
        return True

    # ------------------------------------------------------------------
    # Subtasks
    # ------------------------------------------------------------------
    def add_subtask(self, task_id: str, text: str) -> Optional[Subtask]:
        location = self._locate_open(task_id)
        if location is None:
            return None
        if not isinstance(text, str) or not text.strip():
            raise TaskValidationError("Subtask text cannot be empty")
        subtask = Subtask(
            id=generate_id(),
            text=text.strip()[: self._validator.limits.max_subtask_length],
        )
        location.task.subtasks.append(subtask)
        return subtask

    def toggle_subtask(self, task_id: str, subtask_id: str) -> Optional[bool]:
        location = self._locate_open(task_id)
        if location is None:
            return None
        for subtask in location.task.subtasks:
            if subtask.id == subtask_id:
                subtask.completed = not subtask.completed
                return subtask.completed
        return None

    def delete_subtask(self, task_id: str, subtask_id: str) -> bool:
        location = self._locate_open(task_id)
        if location is None:
            return False
        subtasks = location.task.subtasks
        for index, subtask in enumerate(subtasks):
            if subtask.id == subtask_id:
                del subtasks[index]
                return True
        return False

    # ------------------------------------------------------------------
    # Archived partition
    # ------------------------------------------------------------------
    def clear_archived(self, *, all_lists: bool = False) -> list[Task]:
        """Empty the archived partition of the current list, or of every list.

        Projection files are left in place as history. The cleared tasks are
        recorded as one undo entry.
        """

        list_ids = list(self._state.lists) if all_lists else [self._state.current_list]
        batch: list[dict[str, Any]] = []
        cleared: list[Task] = []
        for list_id in list_ids:
            task_list = self._state.lists[list_id]
            for task in task_list.archived:
                batch.append({"task": task, "list_id": list_id})
                cleared.append(task)
            task_list.archived = []

        if batch:
            self._undo.push(UndoAction.CLEAR_ARCHIVED_BATCH, {"tasks": batch})
        return cleared

    # ------------------------------------------------------------------
    # Lists
    # ------------------------------------------------------------------
    def _clean_list_name(self, name: Any) -> str:
        if not isinstance(name, str) or not name.strip():
            raise TaskValidationError("List name cannot be empty")
        return name.strip()[: self._validator.limits.max_list_name_length]

    def create_list(self, name: str, color: Optional[str] = None) -> str:
        """Create a list, make it current and return its id."""

        list_id = generate_id()
        self._state.lists[list_id] = TaskList(name=self._clean_list_name(name), color=color)
        self._state.current_list = list_id
        return list_id

    def rename_list(self, list_id: str, name: str, *, color: Optional[str] = _UNSET) -> bool:
        task_list = self._state.lists.get(list_id)
        if task_list is None:
            return False
        task_list.name = self._clean_list_name(name)
        if color is not _UNSET:
            task_list.color = color
        return True

    def delete_list(self, list_id: str) -> Optional[list[Task]]:
        """Delete a list and return its tasks so their projections can be removed.

        The last remaining list cannot be deleted.
        """

        if list_id not in self._state.lists or len(self._state.lists) <= 1:
            return None
        task_list = self._state.lists.pop(list_id)
        if self._state.current_list == list_id:
            self._state.current_list = next(iter(self._state.lists))
        return [*task_list.todos, *task_list.archived]

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @staticmethod
    def sort_tasks(tasks: Iterable[Task], sort_by: SortBy | str) -> list[Task]:
        """Return a sorted copy of ``tasks``; ``manual`` keeps stored order."""

        ordered = list(tasks)
        try:
            mode = SortBy(sort_by)
        except ValueError:
            mode = SortBy.MANUAL

        if mode is SortBy.PRIORITY:
            ordered.sort(key=lambda task: task.priority.rank)
        elif mode is SortBy.DUE_DATE:
            ordered.sort(
                key=lambda task: (task.due_date is None, task.due_date or datetime.datetime.min)
            )
        elif mode is SortBy.CREATED:
            ordered.sort(key=lambda task: task.created_at or 0, reverse=True)
        return ordered

    def _scoped(
        self, smart_list: Optional[SmartList], partition: Partition, now: datetime.datetime
    ) -> list[Task]:
        if smart_list is None:
            return list(self.current_list.partition(partition))
        if partition is Partition.ARCHIVED:
            return [task for task_list in self._state.lists.values() for task in task_list.archived]
        predicate = SMART_LISTS[smart_list].predicate
        return [
            task
            for task_list in self._state.lists.values()
            for task in task_list.todos
            if predicate(task, now)
        ]

    @staticmethod
    def _narrow(
        tasks: list[Task], search_query: Optional[str], tag_filter: Optional[str]
    ) -> list[Task]:
        if tag_filter:
            tasks = [task for task in tasks if tag_filter in task.tags]
        if search_query:
            query = search_query.lower()
            tasks = [
                task
                for task in tasks
                if query in task.text.lower()
                or query in (task.notes or "").lower()
                or any(query in tag.lower() for tag in task.tags)
            ]
        return tasks

    def _resolve_filter(self, smart_list: SmartList | str | None) -> Optional[SmartList]:
        resolved = resolve_smart_list(smart_list)
        if smart_list is not None and resolved is None:
            logger.warning("Ignoring unknown smart list %r", smart_list)
        return resolved

    def filtered_tasks(
        self,
        smart_list: SmartList | str | None = None,
        sort_by: SortBy | str | None = None,
        search_query: Optional[str] = None,
        tag_filter: Optional[str] = None,
        *,
        now: Optional[datetime.datetime] = None,
    ) -> list[Task]:
        """Return the open tasks visible under the given view.

        Without a smart list the current list is shown; a smart list spans
        every list. Tag and search filters narrow the result conjunctively.
        """

        current = now or datetime.datetime.now()
        tasks = self._scoped(self._resolve_filter(smart_list), Partition.TODOS, current)
        tasks = self._narrow(tasks, search_query, tag_filter)
        return self.sort_tasks(tasks, sort_by or self.settings.sort_by)

    def filtered_archived(
        self,
        smart_list: SmartList | str | None = None,
        search_query: Optional[str] = None,
        tag_filter: Optional[str] = None,
    ) -> list[Task]:
        tasks = self._scoped(
            self._resolve_filter(smart_list), Partition.ARCHIVED, datetime.datetime.now()
        )
        return self._narrow(tasks, search_query, tag_filter)

    def all_tags(self) -> list[str]:
        return sorted({tag for _, task in self.iter_tasks() for tag in task.tags})

    def due_tasks(self) -> list[Task]:
        """Return every open task with a due date, across all lists."""

        return [task for _, task in self.iter_tasks(include_archived=False) if task.due_date]

    # ------------------------------------------------------------------
    # Linked notes
    # ------------------------------------------------------------------
    def relink_note(self, old_path: str, new_path: str) -> list[Task]:
        changed = [task for _, task in self.iter_tasks() if task.linked_note == old_path]
        for task in changed:
            task.linked_note = new_path
        return changed

    def unlink_note(self, path: str) -> list[Task]:
        changed = [task for _, task in self.iter_tasks() if task.linked_note == path]
        for task in changed:
            task.linked_note = None
        return changed

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------
    def collect_due_notifications(
        self, now: Optional[datetime.datetime] = None
    ) -> list[DueNotice]:
        """Flag tasks that are due and return the notices to raise.

        Only ``notified`` and ``notified15`` are modified.
        """

        current = now or datetime.datetime.now()
        notices: list[DueNotice] = []
        for _, task in self.iter_tasks(include_archived=False):
            due = task.due_date
            if due is None or task.notified:
                continue

            if is_today(due, current) and current.hour == DUE_TODAY_HOUR:
                task.notified = True
                notices.append(DueNotice(task, "due_today", f"Task due today: {task.text}"))

            if has_time_of_day(due) and not task.notified15:
                remaining = due - current
                if datetime.timedelta(0) < remaining <= DUE_SOON_WINDOW:
                    task.notified15 = True
                    notices.append(
                        DueNotice(task, "due_soon", f"Task in 15 minutes: {task.text}")
                    )
        return notices

    # ------------------------------------------------------------------
    # Undo
    # ------------------------------------------------------------------
    def apply_undo(self) -> Optional[UndoReplay]:
        """Pop the latest undo entry and restore the state it recorded.

        Returns ``None`` when there is nothing to undo.
        """

        entry = self._undo.pop()
        if entry is None:
            return None

        replay = UndoReplay(entry=entry)
        handler = _UNDO_HANDLERS[entry.action]
        handler(self, entry, replay)
        if not replay.applied:
            logger.info("Undo of %s had nothing to restore", entry.action.value)
        return replay

    def _undo_delete(self, entry: UndoEntry, replay: UndoReplay) -> None:
        task_list = self._state.lists.get(entry.list_id or "")
        task = entry.task
        if task_list is None or task is None:
            return
        task_list.todos.insert(0, task)
        if task.due_date:
            replay.sync.append(task)
        replay.applied = True
        replay.message = "Task restored"

    def _undo_complete(self, entry: UndoEntry, replay: UndoReplay) -> None:
        task_list = self._state.lists.get(entry.list_id or "")
        if task_list is None or entry.task is None:
            return
        index = _index_of(task_list.archived, entry.task.id)
        if index == -1:
            return
        restored = task_list.archived.pop(index)
        restored.completed_at = None
        task_list.todos.insert(0, restored)
        if restored.calendar_event_path:
            replay.completion.append((restored, False))
        replay.applied = True
        replay.message = "Task uncompleted"

    def _undo_move(self, entry: UndoEntry, replay: UndoReplay) -> None:
        origin = self._state.lists.get(entry.data.get("from_list", ""))
        moved_to = self._state.lists.get(entry.data.get("to_list", ""))
        if origin is None or moved_to is None or entry.task is None:
            return
        index = _index_of(moved_to.todos, entry.task.id)
        if index == -1:
            return
        origin.todos.insert(0, moved_to.todos.pop(index))
        replay.applied = True
        replay.message = "Move undone"

    def _undo_delete_archived(self, entry: UndoEntry, replay: UndoReplay) -> None:
        task_list = self._state.lists.get(entry.list_id or "")
        task = entry.task
        if task_list is None or task is None:
            return
        task_list.archived.insert(0, task)
        if task.due_date:
            replay.sync.append(task)
            replay.completion.append((task, True))
        replay.applied = True
        replay.message = "Completed task restored"

    def _undo_clear_archived(self, entry: UndoEntry, replay: UndoReplay) -> None:
        restored = 0
        for item in entry.data.get("tasks", []):
            task_list = self._state.lists.get(item.get("list_id", ""))
            if task_list is None:
                continue
            task_list.archived.append(item["task"])
            restored += 1
        if restored:
            replay.applied = True
            replay.message = f"Restored {_plural(restored, 'completed task')}"

    def _undo_edit(self, entry: UndoEntry, replay: UndoReplay) -> None:
        task_list = self._state.lists.get(entry.list_id or "")
        snapshot = entry.task
        if task_list is None or snapshot is None:
            return
        index = _index_of(task_list.todos, snapshot.id)
        if index == -1:
            return
        # The live task may own a projection written after the edit.
        snapshot.calendar_event_path = task_list.todos[index].calendar_event_path
        task_list.todos[index] = snapshot
        if snapshot.due_date:
            replay.sync.append(snapshot)
        elif snapshot.calendar_event_path:
            replay.remove.append(snapshot)
        replay.applied = True
        replay.message = "Edit undone"

    def _undo_add(self, entry: UndoEntry, replay: UndoReplay) -> None:
        task_list = self._state.lists.get(entry.list_id or "")
        if task_list is None or entry.task is None:
            return
        index = _index_of(task_list.todos, entry.task.id)
        if index == -1:
            return
        removed = task_list.todos.pop(index)
        if removed.calendar_event_path:
            replay.remove.append(removed)
        replay.applied = True
        replay.message = "Task creation undone"


_UNDO_HANDLERS = {
    UndoAction.DELETE: TaskStore._undo_delete,
    UndoAction.COMPLETE: TaskStore._undo_complete,
    UndoAction.MOVE: TaskStore._undo_move,
    UndoAction.DELETE_ARCHIVED: TaskStore._undo_delete_archived,
    UndoAction.CLEAR_ARCHIVED_BATCH: TaskStore._undo_clear_archived,
    UndoAction.EDIT: TaskStore._undo_edit,
    UndoAction.ADD: TaskStore._undo_add,
}


__all__ = [
    "DueNotice",
    "TaskLocation",
    "TaskStore",
    "UndoReplay",
]
