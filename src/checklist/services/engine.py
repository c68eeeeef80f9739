"""Async facade coordinating the task store, calendar projection and persistence."""

from __future__ import annotations

import asyncio
import datetime
import inspect
import logging
from collections.abc import Mapping
from contextlib import suppress
from dataclasses import dataclass
from typing import Any, Callable, Optional

from pydantic import ValidationError

from ..calendar.projector import CalendarSyncProjector
from ..calendar.vault import Vault
from ..schemas.settings import ChecklistSettings, ChecklistSettingsUpdate
from ..tasks.commands import COMMAND_HANDLERS, Command, resolve_command
from ..tasks.errors import OperationInFlightError, TaskValidationError
from ..tasks.models import Partition, Priority, Subtask, Task
from ..tasks.smart_lists import SmartList, resolve_smart_list
from ..tasks.store import DueNotice, TaskStore, UndoReplay
from ..tasks.undo import UndoLog
from ..tasks.validator import TaskValidator, ValidationLimits
from .notices import NoticeBoard
from .persistence import DocumentRepository

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime.datetime]


@dataclass(slots=True)
class CompletionResult:
    task: Task
    spawned: Optional[Task] = None


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'' if count == 1 else 's'}"


class ChecklistService:
    """Own the checklist state and every timer that acts on it.

    All mutations run on the event loop, one at a time. Calendar I/O may
    suspend an operation; completion requests for a task that is already
    being completed are ignored until the first one finishes.
    """

    def __init__(
        self,
        repository: DocumentRepository,
        vault: Vault,
        *,
        save_debounce_ms: int = 150,
        animation_duration_ms: int = 300,
        notification_interval_seconds: float = 60.0,
        max_undo: int = 50,
        limits: Optional[ValidationLimits] = None,
        notice_history: int = 100,
        clock: Optional[Clock] = None,
    ) -> None:
        self._repository = repository
        self._store = TaskStore(
            validator=TaskValidator(limits),
            undo_log=UndoLog(max_undo),
        )
        self._notices = NoticeBoard(notice_history)
        self._projector = CalendarSyncProjector(
            vault,
            lambda: self._store.settings,
            notice_sink=self._notices.post,
        )
        self._save_delay = max(0, save_debounce_ms) / 1000
        self._animation_delay = max(0, animation_duration_ms) / 1000
        self._notification_interval = notification_interval_seconds
        self._clock: Clock = clock or datetime.datetime.now

        self._save_task: asyncio.Task[None] | None = None
        self._poll_task: asyncio.Task[None] | None = None
        self._animation_tasks: dict[str, asyncio.Task[None]] = {}
        self._completing: set[str] = set()
        self._started = False
        self._closed = False

        # View state; not persisted.
        self.smart_list: Optional[SmartList] = None
        self.search_query: str = ""
        self.tag_filter: Optional[str] = None

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def store(self) -> TaskStore:
        return self._store

    @property
    def projector(self) -> CalendarSyncProjector:
        return self._projector

    @property
    def notices(self) -> NoticeBoard:
        return self._notices

    @property
    def settings(self) -> ChecklistSettings:
        return self._store.settings

    @property
    def in_flight(self) -> frozenset[str]:
        return frozenset(self._completing)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def _sync_enabled(self) -> bool:
        return self._store.settings.full_calendar_sync

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    async def load(self) -> None:
        raw = await self._repository.load()
        self._store.load(raw)
        logger.info(
            "Loaded checklist with %s",
            _plural(len(self._store.lists), "list"),
        )

    async def start(self) -> None:
        """Load the persisted document and start the notification poller."""

        if self._started:
            return
        await self.load()
        self._started = True
        self._poll_task = asyncio.create_task(self._notification_loop())

    async def close(self) -> None:
        """Cancel every pending timer and write the latest state."""

        if self._closed:
            return
        self._closed = True

        pending = [
            task
            for task in (self._poll_task, self._save_task, *self._animation_tasks.values())
            if task is not None and not task.done()
        ]
        for task in pending:
            task.cancel()
        for task in pending:
            with suppress(asyncio.CancelledError):
                await task
        self._poll_task = None
        self._save_task = None
        self._animation_tasks.clear()

        await self._write()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def schedule_save(self) -> None:
        """Request a save; bursts of requests coalesce into one write."""

        if self._closed:
            return
        if self._save_task is not None and not self._save_task.done():
            self._save_task.cancel()
        self._save_task = asyncio.create_task(self._debounced_save())

    async def _debounced_save(self) -> None:
        try:
            await asyncio.sleep(self._save_delay)
        except asyncio.CancelledError:
            logger.debug("Debounced save superseded")
            raise
        self._save_task = None
        await self._write()

    async def flush(self) -> None:
        """Write immediately, dropping any pending debounced save."""

        if self._save_task is not None and not self._save_task.done():
            self._save_task.cancel()
            with suppress(asyncio.CancelledError):
                await self._save_task
        self._save_task = None
        await self._write()

    async def _write(self) -> None:
        try:
            await self._repository.save(self._store.to_document())
        except OSError as exc:
            logger.exception("Failed to save checklist data")
            self._notices.error(f"Failed to save checklist data: {exc}")

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------
    async def _notification_loop(self) -> None:
        while True:
            try:
                await asyncio.sleep(self._notification_interval)
            except asyncio.CancelledError:
                logger.debug("Notification poller cancelled")
                raise
            self.check_due_tasks()

    def check_due_tasks(self, now: Optional[datetime.datetime] = None) -> list[DueNotice]:
        """Raise due-today and due-soon notices for open tasks."""

        if not self._store.settings.notifications:
            return []
        notices = self._store.collect_due_notifications(now or self._clock())
        for notice in notices:
            self._notices.info(notice.message)
        if notices:
            self.schedule_save()
        return notices

    # ------------------------------------------------------------------
    # Calendar helpers
    # ------------------------------------------------------------------
    async def _resync(self, task: Optional[Task]) -> None:
        if task is None or not self._sync_enabled:
            return
        if task.due_date is not None:
            await self._projector.sync(task)
        elif task.calendar_event_path:
            await self._projector.remove_projection(task)

    async def _drop_projection(self, task: Task) -> None:
        if task.calendar_event_path:
            await self._projector.remove_projection(task)

    async def sync_all(self) -> int:
        if not self._sync_enabled:
            return 0
        count = await self._projector.sync_all(self._store.due_tasks())
        self.schedule_save()
        self._notices.info(f"Synced {_plural(count, 'task')} to Full Calendar")
        return count

    # ------------------------------------------------------------------
    # Task operations
    # ------------------------------------------------------------------
    async def add_task(self, text: str, **fields: Any) -> Optional[Task]:
        task = self._store.add_task(text, **fields)
        if task is None:
            return None
        if task.due_date is not None:
            await self._resync(task)
        self.schedule_save()
        self._notices.info("Task added")
        return task

    async def quick_add(self, text: str, list_id: Optional[str] = None) -> Optional[Task]:
        if not self._store.settings.enable_quick_capture:
            self._notices.warning("Quick capture is disabled")
            return None
        task = self._store.quick_add(text, list_id=list_id, now=self._clock())
        if task is None:
            return None
        if task.due_date is not None:
            await self._resync(task)
        self.schedule_save()
        self._notices.info("Task added")
        return task

    async def edit_task(self, task_id: str, changes: Mapping[str, Any]) -> Optional[Task]:
        updated = self._store.edit_task(task_id, changes)
        if updated is None:
            return None
        await self._resync(updated)
        self.schedule_save()
        self._notices.info("Task updated")
        return updated

    async def complete_task(self, task_id: str) -> Optional[CompletionResult]:
        """Complete an open task, waiting for the completion animation first.

        A second request for a task that is already being completed is
        ignored and returns ``None``.
        """

        if task_id in self._completing:
            logger.debug("Completion of %s already in progress", task_id)
            return None
        location = self._store.locate_task(task_id)
        if location is None or location.partition is not Partition.TODOS:
            return None

        self._completing.add(task_id)
        try:
            if self._store.settings.enable_animations and self._animation_delay > 0:
                if not await self._wait_for_animation(task_id):
                    return None

            location = self._store.locate_task(task_id)
            if location is None or location.partition is not Partition.TODOS:
                return None

            task = location.task
            had_projection = bool(task.calendar_event_path)
            recurring = task.recurrence is not None
            spawned = self._store.complete_task(task_id, now=self._clock())

            if self._sync_enabled and had_projection:
                if recurring:
                    await self._projector.record_completed_occurrence(task)
                else:
                    await self._projector.mark_completion(task, True)

            if spawned is not None:
                await self._resync(spawned)
                due = spawned.due_date.strftime("%Y-%m-%d") if spawned.due_date else ""
                self._notices.info(f"Recurring task created for {due}")
            elif recurring:
                if self._sync_enabled and task.calendar_event_path:
                    await self._projector.remove_projection(task)
                self._notices.info("Recurring task series completed!")

            self.schedule_save()
            self._notices.info("Task completed!")
            return CompletionResult(task=task, spawned=spawned)
        finally:
            self._completing.discard(task_id)

    async def _wait_for_animation(self, task_id: str) -> bool:
        sleeper = asyncio.create_task(asyncio.sleep(self._animation_delay))
        self._animation_tasks[task_id] = sleeper
        try:
            await sleeper
        except asyncio.CancelledError:
            if self._closed:
                return False
            raise
        finally:
            self._animation_tasks.pop(task_id, None)
        return not self._closed

    async def uncomplete_task(self, task_id: str) -> Optional[Task]:
        task = self._store.uncomplete_task(task_id)
        if task is None:
            return None
        if self._sync_enabled and task.calendar_event_path:
            await self._projector.mark_completion(task, False)
        self.schedule_save()
        self._notices.info("Task restored")
        return task

    async def delete_task(self, task_id: str) -> Optional[Task]:
        task = self._store.delete_task(task_id)
        if task is None:
            return None
        await self._drop_projection(task)
        self.schedule_save()
        self._notices.info("Task deleted")
        return task

    async def delete_archived_task(self, task_id: str) -> Optional[Task]:
        task = self._store.delete_archived_task(task_id)
        if task is None:
            return None
        await self._drop_projection(task)
        self.schedule_save()
        self._notices.info("Completed task deleted")
        return task

    async def move_task_to_list(self, task_id: str, target_list_id: str) -> bool:
        moved = self._store.move_task_to_list(task_id, target_list_id)
        if moved:
            self.schedule_save()
            target = self._store.lists[target_list_id]
            self._notices.info(f'Moved to "{target.name}"')
        return moved

    async def cycle_priority(self, task_id: str) -> Optional[Priority]:
        priority = self._store.cycle_priority(task_id)
        if priority is None:
            return None
        task = self._store.find_task(task_id)
        if task is not None and not task.is_completed and task.due_date is not None:
            await self._resync(task)
        self.schedule_save()
        return priority

    async def reorder_task(self, dragged_id: str, target_id: str) -> bool:
        reordered = self._store.reorder_task(dragged_id, target_id)
        if reordered:
            self.schedule_save()
        return reordered

    async def _after_subtask_change(self, task_id: str) -> None:
        task = self._store.find_task(task_id)
        if task is not None and task.due_date is not None:
            await self._resync(task)
        self.schedule_save()

    async def add_subtask(self, task_id: str, text: str) -> Optional[Subtask]:
        subtask = self._store.add_subtask(task_id, text)
        if subtask is not None:
            await self._after_subtask_change(task_id)
        return subtask

    async def toggle_subtask(self, task_id: str, subtask_id: str) -> Optional[bool]:
        completed = self._store.toggle_subtask(task_id, subtask_id)
        if completed is not None:
            await self._after_subtask_change(task_id)
        return completed

    async def delete_subtask(self, task_id: str, subtask_id: str) -> bool:
        deleted = self._store.delete_subtask(task_id, subtask_id)
        if deleted:
            await self._after_subtask_change(task_id)
        return deleted

    async def clear_archived(self) -> list[Task]:
        """Clear completed tasks of the current list, or of every list in a smart view."""

        cleared = self._store.clear_archived(all_lists=self.smart_list is not None)
        self.schedule_save()
        self._notices.info(f"Cleared {_plural(len(cleared), 'completed task')}")
        return cleared

    # ------------------------------------------------------------------
    # Lists and view state
    # ------------------------------------------------------------------
    async def create_list(self, name: str, color: Optional[str] = None) -> str:
        list_id = self._store.create_list(name, color)
        self.smart_list = None
        self.schedule_save()
        self._notices.info(f"Created project: {self._store.lists[list_id].name}")
        return list_id

    async def rename_list(self, list_id: str, name: str, **kwargs: Any) -> bool:
        renamed = self._store.rename_list(list_id, name, **kwargs)
        if renamed:
            self.schedule_save()
        return renamed

    async def delete_list(self, list_id: str) -> bool:
        removed = self._store.delete_list(list_id)
        if removed is None:
            if list_id in self._store.lists:
                self._notices.warning("Cannot delete the only list")
            return False
        for task in removed:
            await self._drop_projection(task)
        self.schedule_save()
        self._notices.info("List deleted")
        return True

    async def set_current_list(self, list_id: str) -> bool:
        switched = self._store.set_current_list(list_id)
        if switched:
            self.smart_list = None
            self.schedule_save()
        return switched

    def select_smart_list(self, smart_list: SmartList | str | None) -> Optional[SmartList]:
        resolved = resolve_smart_list(smart_list)
        if smart_list is not None and resolved is None:
            raise TaskValidationError(f"Unknown smart list: {smart_list}")
        self.smart_list = resolved
        return resolved

    def set_search_query(self, query: Optional[str]) -> str:
        self.search_query = (query or "").strip()
        return self.search_query

    def set_tag_filter(self, tag: Optional[str]) -> Optional[str]:
        self.tag_filter = tag or None
        return self.tag_filter

    def filtered_tasks(self) -> list[Task]:
        return self._store.filtered_tasks(
            self.smart_list,
            self._store.settings.sort_by,
            self.search_query,
            self.tag_filter,
            now=self._clock(),
        )

    def filtered_archived(self) -> list[Task]:
        return self._store.filtered_archived(self.smart_list, self.search_query, self.tag_filter)

    # ------------------------------------------------------------------
    # Undo
    # ------------------------------------------------------------------
    async def undo(self) -> Optional[UndoReplay]:
        """Revert the most recent undoable action.

        Raises ``OperationInFlightError`` while a completion is pending and
        returns ``None`` when there is nothing to undo.
        """

        if self._completing:
            message = "Please wait for animation to complete"
            self._notices.warning(message)
            raise OperationInFlightError(message)

        replay = self._store.apply_undo()
        if replay is None:
            self._notices.info("Nothing to undo")
            return None

        if self._sync_enabled:
            for task in replay.sync:
                await self._projector.sync(task)
        for task in replay.remove:
            await self._drop_projection(task)
        if self._sync_enabled:
            for task, completed in replay.completion:
                await self._projector.mark_completion(task, completed)

        if replay.applied:
            self.schedule_save()
            if replay.message:
                self._notices.info(replay.message)
        return replay

    # ------------------------------------------------------------------
    # Settings and host hooks
    # ------------------------------------------------------------------
    async def update_settings(
        self,
        changes: ChecklistSettingsUpdate | Mapping[str, Any],
        *,
        force_resync: bool = False,
    ) -> ChecklistSettings:
        """Apply a partial settings update, resyncing the calendar when needed."""

        if not isinstance(changes, ChecklistSettingsUpdate):
            try:
                changes = ChecklistSettingsUpdate.model_validate(dict(changes))
            except ValidationError as exc:
                raise TaskValidationError(str(exc)) from exc

        was_syncing = self._store.settings.full_calendar_sync
        merged = {
            **self._store.settings.model_dump(),
            **changes.model_dump(exclude_none=True),
        }
        self._store.settings = ChecklistSettings.model_validate(merged)
        self.schedule_save()

        if self._sync_enabled and (force_resync or not was_syncing):
            await self.sync_all()
        return self._store.settings

    async def handle_note_renamed(self, old_path: str, new_path: str) -> int:
        changed = self._store.relink_note(old_path, new_path)
        return await self._after_note_change(changed)

    async def handle_note_deleted(self, path: str) -> int:
        changed = self._store.unlink_note(path)
        return await self._after_note_change(changed)

    async def _after_note_change(self, changed: list[Task]) -> int:
        if not changed:
            return 0
        for task in changed:
            if not task.is_completed and task.due_date is not None:
                await self._resync(task)
        self.schedule_save()
        return len(changed)

    # ------------------------------------------------------------------
    # Command dispatch
    # ------------------------------------------------------------------
    async def dispatch(self, command: Command | str, **params: Any) -> Any:
        """Run the handler registered for ``command`` with ``params``."""

        resolved = resolve_command(command)
        handler = getattr(self, COMMAND_HANDLERS[resolved])
        result = handler(**params)
        if inspect.isawaitable(result):
            result = await result
        return result


__all__ = ["ChecklistService", "CompletionResult"]
