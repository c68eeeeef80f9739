"""Extract a trailing natural-language due date from quick-capture text."""

from __future__ import annotations

import datetime
import re
from dataclasses import dataclass
from typing import Optional

from ..utils.datetime_utils import (
    default_end_time,
    format_time_for_calendar,
    has_time_of_day,
    parse_natural_datetime,
)

_WEEKDAYS = "monday|tuesday|wednesday|thursday|friday|saturday|sunday"
_AT_TIME = r"(?:\s+at\s+\d{1,2}(?::\d{2})?\s*(?:am|pm)?)?"

# Tried in order; the first pattern whose match parses to a date wins.
# "next <day>" precedes the bare weekday so "next" is not left in the text.
TRAILING_DATE_PATTERNS = (
    re.compile(rf"\s+(today|tomorrow|tmr|tom){_AT_TIME}$", re.IGNORECASE),
    re.compile(rf"\s+next\s+(week|{_WEEKDAYS})$", re.IGNORECASE),
    re.compile(rf"\s+({_WEEKDAYS}){_AT_TIME}$", re.IGNORECASE),
    re.compile(r"\s+in\s+(\d+)\s+days?$", re.IGNORECASE),
    re.compile(r"\s+at\s+(\d{1,2})(?::(\d{2}))?\s*(am|pm)?$", re.IGNORECASE),
    re.compile(r"\s+(\d{1,2}[/\-]\d{1,2})$"),
)

_BARE_AT_HOUR = re.compile(r"\bat\s+(\d{1,2})$", re.IGNORECASE)


@dataclass(slots=True)
class QuickAddResult:
    text: str
    due_date: Optional[datetime.datetime] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    all_day: bool = True


def _parse_phrase(phrase: str, now: datetime.datetime) -> Optional[datetime.datetime]:
    # "at 5" carries no minutes or meridiem, which the time grammar needs.
    phrase = _BARE_AT_HOUR.sub(lambda m: f"at {m.group(1)}:00", phrase)
    return parse_natural_datetime(phrase, now=now)


def parse_quick_add(text: str, *, now: Optional[datetime.datetime] = None) -> QuickAddResult:
    """Split ``text`` into task text and an optional trailing due date.

    ``"Call mom tomorrow at 3pm"`` becomes text ``"Call mom"`` due tomorrow
    at 15:00 with a one hour slot. Text without a recognised trailing phrase
    is returned unchanged (trimmed).
    """

    current = now or datetime.datetime.now()

    for pattern in TRAILING_DATE_PATTERNS:
        match = pattern.search(text)
        if match is None:
            continue
        parsed = _parse_phrase(match.group(0).strip(), current)
        if parsed is None:
            continue

        result = QuickAddResult(text=text[: match.start()].strip(), due_date=parsed)
        if has_time_of_day(parsed):
            result.all_day = False
            result.start_time = format_time_for_calendar(parsed.hour, parsed.minute)
            result.end_time = default_end_time(result.start_time)
        return result

    return QuickAddResult(text=text.strip())


__all__ = ["QuickAddResult", "TRAILING_DATE_PATTERNS", "parse_quick_add"]
