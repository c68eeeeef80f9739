"""Exception hierarchy for the task-state engine."""

from __future__ import annotations


class ChecklistError(RuntimeError):
    """Base class for errors raised by the checklist engine."""


class TaskValidationError(ChecklistError, ValueError):
    """Raised when caller-supplied task data cannot produce a valid task."""


class CalendarSyncError(ChecklistError):
    """Raised when a calendar projection file cannot be written or removed."""


class UnsafePathError(CalendarSyncError):
    """Raised when a projection path would escape the vault."""


class OperationInFlightError(ChecklistError):
    """Raised when an operation conflicts with one that is still running."""


__all__ = [
    "ChecklistError",
    "TaskValidationError",
    "CalendarSyncError",
    "UnsafePathError",
    "OperationInFlightError",
]
