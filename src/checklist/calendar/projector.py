"""One-way projection of due-dated tasks into calendar event files.

Each task with a due date is mirrored as a Markdown file with a YAML-style
header understood by Full Calendar style plugins. Recurring tasks map to one
stable ``recurring-*`` file that is rewritten as the series advances; other
tasks map to a file named after their due date. The task's
``calendar_event_path`` records the file this engine owns and is only updated
after a write succeeded.
"""

from __future__ import annotations

import datetime
import logging
import posixpath
from collections.abc import Iterable
from typing import Any, Callable, Optional

from dateutil.relativedelta import relativedelta

from ..schemas.settings import ChecklistSettings
from ..tasks.errors import CalendarSyncError, UnsafePathError
from ..tasks.models import Task
from ..tasks.recurrence import weekday_codes
from ..utils.datetime_utils import default_end_time, format_date_for_calendar
from ..utils.filenames import sanitize_title, short_id, validate_vault_path
from .frontmatter import Quoted, build_event_file, patch_completed_field
from .vault import Vault

logger = logging.getLogger(__name__)

SettingsProvider = Callable[[], ChecklistSettings]
NoticeSink = Callable[[str, str], None]

DEFAULT_FOLDER = "calendar/tasks"
RECURRING_PREFIX = "recurring-"


def _is_recurring(task: Task) -> bool:
    return task.recurrence is not None


def _time_fields(task: Task) -> dict[str, Any]:
    if task.is_all_day or not task.start_time:
        return {}
    return {
        "startTime": task.start_time,
        "endTime": task.end_time or default_end_time(task.start_time),
    }


class CalendarSyncProjector:
    """Keep calendar event files in step with task state."""

    def __init__(
        self,
        vault: Vault,
        settings_provider: SettingsProvider,
        *,
        notice_sink: Optional[NoticeSink] = None,
    ) -> None:
        self._vault = vault
        self._settings_provider = settings_provider
        self._notice_sink = notice_sink

    @property
    def enabled(self) -> bool:
        return bool(self._settings_provider().full_calendar_sync)

    @property
    def folder(self) -> str:
        return self._settings_provider().full_calendar_folder or DEFAULT_FOLDER

    def _report(self, message: str) -> None:
        logger.error(message)
        if self._notice_sink is not None:
            self._notice_sink("error", message)

    # ------------------------------------------------------------------
    # Pure helpers
    # ------------------------------------------------------------------
    @staticmethod
    def projection_path(task: Task, folder: str) -> str:
        """Return the vault path that should hold ``task``'s projection."""

        if task.due_date is None:
            raise ValueError("Only tasks with a due date have a projection")

        title = sanitize_title(task.text)
        suffix = short_id(task.id)
        if _is_recurring(task):
            stored = task.calendar_event_path
            if stored and posixpath.basename(stored).startswith(RECURRING_PREFIX):
                return stored
            return f"{folder}/{RECURRING_PREFIX}{title}-{suffix}.md"
        return f"{folder}/{format_date_for_calendar(task.due_date)} {title}-{suffix}.md"

    @staticmethod
    def build_frontmatter(task: Task) -> dict[str, Any]:
        """Return the ordered header fields describing ``task``."""

        if task.due_date is None:
            raise ValueError("Only tasks with a due date have a projection")

        title = f"{task.priority.calendar_prefix}{task.text}"
        date = format_date_for_calendar(task.due_date)

        if _is_recurring(task):
            if task.recurrence_end_date is not None:
                end_recur = format_date_for_calendar(task.recurrence_end_date)
            else:
                end_recur = format_date_for_calendar(task.due_date + relativedelta(years=1))
            fields: dict[str, Any] = {
                "title": title,
                "type": "recurring",
                "daysOfWeek": weekday_codes(task.due_date, task.recurrence),
                "startRecur": date,
                "endRecur": end_recur,
            }
            fields.update(_time_fields(task))
            fields["allDay"] = task.is_all_day
            return fields

        fields = {
            "title": title,
            "allDay": task.is_all_day,
            "completed": None,
            "type": "single",
            "date": date,
        }
        fields.update(_time_fields(task))
        return fields

    # ------------------------------------------------------------------
    # File operations
    # ------------------------------------------------------------------
    async def _ensure_folder(self, folder: str) -> None:
        current = ""
        for part in folder.split("/"):
            current = f"{current}/{part}" if current else part
            if not await self._vault.exists(current):
                await self._vault.create_folder(current)
            elif not await self._vault.is_folder(current):
                raise CalendarSyncError(
                    f'Cannot create calendar folder: "{current}" exists as a file'
                )

    async def _prepare_folder(self) -> Optional[str]:
        try:
            folder = validate_vault_path(self.folder)
        except UnsafePathError:
            self._report("Calendar folder path is invalid. Please check settings.")
            return None
        try:
            await self._ensure_folder(folder)
        except CalendarSyncError as exc:
            self._report(str(exc))
            return None
        return folder

    async def sync(self, task: Task) -> bool:
        """Write or update ``task``'s projection.

        The new file is written before a stale one is removed. On failure
        the recorded projection path is left as it was.
        """

        if not self.enabled or task.due_date is None:
            return False

        folder = await self._prepare_folder()
        if folder is None:
            return False

        path = self.projection_path(task, folder)
        content = build_event_file(self.build_frontmatter(task), task)
        try:
            await self._vault.write(path, content)
        except CalendarSyncError as exc:
            self._report(f"Failed to sync task to calendar: {exc}")
            return False

        previous = task.calendar_event_path
        task.calendar_event_path = path
        logger.debug("Projected task %s to %s", task.id, path)

        if previous and previous != path:
            try:
                if await self._vault.exists(previous):
                    await self._vault.delete(previous)
            except CalendarSyncError as exc:
                logger.warning("Failed to delete old calendar file %s: %s", previous, exc)
        return True

    async def remove_projection(self, task: Task) -> bool:
        """Delete the file ``task`` owns and forget it."""

        path = task.calendar_event_path
        if not path:
            return False
        try:
            if await self._vault.exists(path):
                await self._vault.delete(path)
        except CalendarSyncError as exc:
            logger.error("Failed to remove calendar event %s: %s", path, exc)
            return False
        task.calendar_event_path = None
        return True

    async def mark_completion(
        self,
        task: Task,
        completed: bool,
        *,
        today: Optional[datetime.date] = None,
    ) -> bool:
        """Patch only the ``completed`` field of an existing projection."""

        path = task.calendar_event_path
        if not path:
            return False
        completed_on = (today or datetime.date.today()) if completed else None
        try:
            if not await self._vault.exists(path):
                return False
            content = await self._vault.read(path)
            await self._vault.write(path, patch_completed_field(content, completed_on))
        except CalendarSyncError as exc:
            logger.error("Failed to update calendar event %s: %s", path, exc)
            return False
        return True

    async def record_completed_occurrence(
        self,
        task: Task,
        *,
        today: Optional[datetime.date] = None,
    ) -> Optional[str]:
        """Write a completed single event for one occurrence of a recurring task.

        The series file keeps tracking future occurrences; this record keeps
        the history. Returns the path written, or ``None``.
        """

        if not self.enabled or task.due_date is None:
            return None

        date = format_date_for_calendar(task.due_date)
        fields: dict[str, Any] = {
            "title": f"{task.priority.calendar_prefix}{task.text}",
            "allDay": task.is_all_day,
            "type": "single",
            "date": date,
            "completed": Quoted(format_date_for_calendar(today or datetime.date.today())),
        }
        fields.update(_time_fields(task))

        folder = await self._prepare_folder()
        if folder is None:
            return None

        path = f"{folder}/{date} {sanitize_title(task.text)}-{short_id(task.id)} (done).md"
        try:
            await self._vault.write(path, build_event_file(fields, task))
        except CalendarSyncError as exc:
            logger.error("Failed to create completed calendar event: %s", exc)
            return None
        return path

    async def sync_all(self, tasks: Iterable[Task]) -> int:
        """Sync every due-dated task in ``tasks`` and return how many were written."""

        if not self.enabled:
            return 0
        count = 0
        for task in tasks:
            if task.due_date is not None and await self.sync(task):
                count += 1
        return count


__all__ = ["CalendarSyncProjector", "DEFAULT_FOLDER", "NoticeSink", "SettingsProvider"]
