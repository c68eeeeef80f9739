"""Task domain package consolidating task state, undo and validation logic."""

from .commands import COMMAND_HANDLERS, Command, resolve_command
from .errors import (
    CalendarSyncError,
    ChecklistError,
    OperationInFlightError,
    TaskValidationError,
    UnsafePathError,
)
from .models import Partition, Priority, Recurrence, SortBy, StoreState, Subtask, Task, TaskList
from .smart_lists import SmartList
from .store import DueNotice, TaskLocation, TaskStore, UndoReplay
from .undo import UndoAction, UndoEntry, UndoLog
from .validator import TaskValidator, ValidationLimits

__all__ = [
    "COMMAND_HANDLERS",
    "CalendarSyncError",
    "ChecklistError",
    "Command",
    "DueNotice",
    "OperationInFlightError",
    "Partition",
    "Priority",
    "Recurrence",
    "SmartList",
    "SortBy",
    "StoreState",
    "Subtask",
    "Task",
    "TaskList",
    "TaskLocation",
    "TaskStore",
    "TaskValidationError",
    "TaskValidator",
    "UndoAction",
    "UndoEntry",
    "UndoLog",
    "UndoReplay",
    "UnsafePathError",
    "ValidationLimits",
    "resolve_command",
]
