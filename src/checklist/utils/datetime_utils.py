"""Natural-language date parsing and local wall-clock helpers.

All datetimes handled by the engine are naive and expressed in local time.
Midnight is the sentinel for "no specific time of day" (an all-day task).
"""

from __future__ import annotations

import datetime
import re
from typing import Any, Optional

from dateutil import parser as dateutil_parser

# Weekday names indexed Sunday-first, matching calendar day codes.
WEEKDAY_NAMES = (
    "sunday",
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
)

_TIME_PATTERNS = (
    re.compile(r"(?:at\s+)?(\d{1,2})(?::(\d{2}))?\s*(am|pm)", re.IGNORECASE),
    re.compile(r"(?:at\s+)?(\d{1,2}):(\d{2})(?::(\d{2}))?"),
)
_TRAILING_AT = re.compile(r"\s+at\s*$")
_IN_DAYS = re.compile(r"^in (\d+) days?$")
_SHORT_DATE = re.compile(r"^(\d{1,2})[/\-](\d{1,2})$")
_NEXT_PREFIX = "next "


def start_of_day(value: datetime.datetime) -> datetime.datetime:
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(value: datetime.datetime) -> datetime.datetime:
    return value.replace(hour=23, minute=59, second=59, microsecond=999000)


def has_time_of_day(value: datetime.datetime) -> bool:
    """Return True when ``value`` carries a specific (non-midnight) time."""

    return value.hour != 0 or value.minute != 0


def sunday_first_weekday(value: datetime.date) -> int:
    """Return the weekday index with Sunday as 0."""

    return (value.weekday() + 1) % 7


def format_date_for_calendar(value: datetime.date) -> str:
    """Render ``value`` as ``YYYY-MM-DD``."""

    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def format_time_for_calendar(hours: int, minutes: int) -> str:
    """Render a time of day as ``HH:MM``."""

    return f"{hours:02d}:{minutes:02d}"


def default_end_time(start_time: Optional[str]) -> Optional[str]:
    """Return the end time one hour after ``start_time`` (wrapping at midnight)."""

    if not start_time or not isinstance(start_time, str):
        return None
    parts = start_time.split(":")
    if len(parts) < 2:
        return None
    try:
        hours = int(parts[0])
        minutes = int(parts[1])
    except ValueError:
        return None
    return format_time_for_calendar((hours + 1) % 24, minutes)


def to_epoch_ms(value: datetime.datetime) -> int:
    return int(value.timestamp() * 1000)


def from_epoch_ms(value: float) -> datetime.datetime:
    return datetime.datetime.fromtimestamp(value / 1000)


def _to_local_naive(value: datetime.datetime) -> datetime.datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def parse_stored_datetime(value: Any) -> Optional[datetime.datetime]:
    """Best-effort conversion of a persisted timestamp to a naive local datetime.

    Accepts datetimes, dates, ISO 8601 strings (``Z`` and offsets are
    converted to local time) and epoch milliseconds. Anything else yields
    ``None``.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime.datetime):
        return _to_local_naive(value)
    if isinstance(value, datetime.date):
        return datetime.datetime(value.year, value.month, value.day)
    if isinstance(value, (int, float)):
        try:
            return from_epoch_ms(value)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            parsed = dateutil_parser.isoparse(text)
        except (ValueError, OverflowError):
            try:
                parsed = dateutil_parser.parse(text)
            except (ValueError, OverflowError):
                return None
        return _to_local_naive(parsed)
    return None


def _extract_time(lowered: str) -> tuple[Optional[tuple[int, int]], str, bool]:
    """Strip the first time clause from ``lowered``.

    Returns ``(time, remainder, valid)``; ``valid`` is False when a clause was
    found but does not describe a real time of day.
    """

    for pattern in _TIME_PATTERNS:
        match = pattern.search(lowered)
        if match is None:
            continue

        hours = int(match.group(1))
        minutes = int(match.group(2) or 0)
        meridiem = match.group(3) if pattern is _TIME_PATTERNS[0] else None

        if meridiem:
            meridiem = meridiem.lower()
            if meridiem == "pm" and hours != 12:
                hours += 12
            if meridiem == "am" and hours == 12:
                hours = 0

        remainder = pattern.sub("", lowered, count=1)
        remainder = _TRAILING_AT.sub("", remainder).strip()
        valid = 0 <= hours <= 23 and 0 <= minutes <= 59
        return (hours, minutes), remainder, valid

    return None, lowered, True


def _weekday_date(date_str: str, today: datetime.datetime) -> Optional[datetime.datetime]:
    force_next = date_str.startswith(_NEXT_PREFIX)
    name = date_str[len(_NEXT_PREFIX):].strip() if force_next else date_str

    day_index = next(
        (
            index
            for index, day in enumerate(WEEKDAY_NAMES)
            if name.startswith(day) or name == day[:3]
        ),
        -1,
    )
    if day_index == -1:
        return None

    days_to_add = day_index - sunday_first_weekday(today)
    if days_to_add <= 0:
        days_to_add += 7
    if force_next:
        days_to_add += 7
    return today + datetime.timedelta(days=days_to_add)


def _native_date(
    candidates: tuple[str, ...], today: datetime.datetime
) -> Optional[datetime.datetime]:
    for candidate in candidates:
        if not candidate:
            continue
        try:
            parsed = dateutil_parser.parse(candidate, default=today)
        except (ValueError, OverflowError):
            continue
        return _to_local_naive(parsed)
    return None


def _short_date(date_str: str, today: datetime.datetime) -> Optional[datetime.datetime]:
    match = _SHORT_DATE.match(date_str)
    if match is None:
        return None
    try:
        result = datetime.datetime(today.year, int(match.group(1)), int(match.group(2)))
    except ValueError:
        return None
    if result < today:
        try:
            result = result.replace(year=result.year + 1)
        except ValueError:
            # 29 February rolled into a non-leap year
            return None
    return result


def parse_natural_datetime(
    text: Optional[str], *, now: Optional[datetime.datetime] = None
) -> Optional[datetime.datetime]:
    """Convert free-form text such as ``"tomorrow at 3pm"`` into a datetime.

    Supported forms, tried in order after removing a time clause
    (``[at] H[:MM] am|pm`` or ``H:MM[:SS]``):

    - ``today``, ``tomorrow``/``tmr``/``tom``, ``yesterday``, ``next week``
    - ``in N days``
    - a weekday name or abbreviation, optionally prefixed with ``next``
      (``next`` skips a further week)
    - any calendar date understood by ``dateutil``
    - ``MM/DD`` or ``MM-DD`` in the current year, rolled to next year when
      already past

    Without a time clause the result is at midnight. Returns ``None`` when
    nothing matches; callers treat that as "no date found".
    """

    if not text:
        return None

    current = now or datetime.datetime.now()
    today = start_of_day(current)
    lowered = text.lower().strip()

    time_of_day, date_str, valid_time = _extract_time(lowered)
    if not valid_time:
        return None

    result: Optional[datetime.datetime] = None

    if date_str in ("today", ""):
        result = today
    elif date_str in ("tomorrow", "tmr", "tom"):
        result = today + datetime.timedelta(days=1)
    elif date_str == "yesterday":
        result = today - datetime.timedelta(days=1)
    elif date_str == "next week":
        result = today + datetime.timedelta(days=7)
    else:
        in_days = _IN_DAYS.match(date_str)
        if in_days:
            try:
                result = today + datetime.timedelta(days=int(in_days.group(1)))
            except OverflowError:
                return None

        if result is None:
            result = _weekday_date(date_str, today)

        if result is None and not _SHORT_DATE.match(date_str):
            result = _native_date((text.strip(), date_str), today)

        if result is None:
            result = _short_date(date_str, today)

    if result is None:
        return None

    if time_of_day is not None:
        hours, minutes = time_of_day
        return result.replace(hour=hours, minute=minutes, second=0, microsecond=0)
    return start_of_day(result)


def is_today(value: Optional[datetime.datetime], now: Optional[datetime.datetime] = None) -> bool:
    if value is None:
        return False
    current = now or datetime.datetime.now()
    return value.date() == current.date()


def is_overdue(value: Optional[datetime.datetime], now: Optional[datetime.datetime] = None) -> bool:
    """Return True when ``value`` is past; all-day dates expire at end of day."""

    if value is None:
        return False
    current = now or datetime.datetime.now()
    deadline = value if has_time_of_day(value) else end_of_day(value)
    return deadline < current and not is_today(value, current)


def is_this_week(value: Optional[datetime.datetime], now: Optional[datetime.datetime] = None) -> bool:
    """Return True when ``value`` falls between today and the coming Sunday."""

    if value is None:
        return False
    current = now or datetime.datetime.now()
    week_end = end_of_day(
        current + datetime.timedelta(days=7 - sunday_first_weekday(current))
    )
    return start_of_day(current) <= value <= week_end


__all__ = [
    "WEEKDAY_NAMES",
    "default_end_time",
    "end_of_day",
    "format_date_for_calendar",
    "format_time_for_calendar",
    "from_epoch_ms",
    "has_time_of_day",
    "is_overdue",
    "is_this_week",
    "is_today",
    "parse_natural_datetime",
    "parse_stored_datetime",
    "start_of_day",
    "sunday_first_weekday",
    "to_epoch_ms",
]
