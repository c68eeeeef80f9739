"""Next-occurrence computation for repeating tasks."""

from __future__ import annotations

import datetime
from typing import Any, Optional

from ..utils.datetime_utils import (
    end_of_day,
    parse_stored_datetime,
    start_of_day,
    sunday_first_weekday,
)
from .models import Recurrence

# Calendar day codes indexed Sunday-first.
DAY_CODES = ("U", "M", "T", "W", "R", "F", "S")

_STEP = {
    Recurrence.DAILY: datetime.timedelta(days=1),
    Recurrence.WEEKLY: datetime.timedelta(days=7),
}


def next_occurrence(
    due: Any,
    recurrence: Any,
    end_date: Any = None,
    *,
    now: Optional[datetime.datetime] = None,
) -> Optional[datetime.datetime]:
    """Return the due datetime of the occurrence following ``due``.

    The step is taken from the later of ``due`` and today, so an overdue
    series resumes from today rather than spawning past occurrences. The
    time of day of ``due`` is preserved. Returns ``None`` when the inputs
    are missing or invalid, or when the next occurrence falls after the end
    of ``end_date``.
    """

    schedule = Recurrence.coerce(recurrence) if recurrence else None
    if schedule is None:
        return None

    original = parse_stored_datetime(due)
    if original is None:
        return None

    today = start_of_day(now or datetime.datetime.now())
    if start_of_day(original) < today:
        basis = today.replace(hour=original.hour, minute=original.minute)
    else:
        basis = original

    candidate = basis + _STEP[schedule]

    if end_date:
        limit = parse_stored_datetime(end_date)
        if limit is not None and candidate > end_of_day(limit):
            return None

    return candidate


def weekday_codes(due: Optional[datetime.datetime], recurrence: Optional[Recurrence]) -> list[str]:
    """Return the calendar day codes on which a recurring task repeats."""

    if recurrence is Recurrence.DAILY:
        return list(DAY_CODES)
    if recurrence is Recurrence.WEEKLY and due is not None:
        return [DAY_CODES[sunday_first_weekday(due)]]
    return []


__all__ = ["DAY_CODES", "next_occurrence", "weekday_codes"]
