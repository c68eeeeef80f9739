"""Tests for next-occurrence computation."""

from __future__ import annotations

import datetime

from checklist.tasks.models import Recurrence
from checklist.tasks.recurrence import DAY_CODES, next_occurrence, weekday_codes

NOW = datetime.datetime(2024, 1, 10, 10, 0)


class TestNextOccurrence:
    def test_daily_from_today(self):
        due = datetime.datetime(2024, 1, 10)
        assert next_occurrence(due, "daily", now=NOW) == datetime.datetime(2024, 1, 11)

    def test_weekly_from_future_due_date(self):
        due = datetime.datetime(2024, 1, 12, 9, 0)
        assert next_occurrence(due, Recurrence.WEEKLY, now=NOW) == datetime.datetime(
            2024, 1, 19, 9, 0
        )

    def test_overdue_series_resumes_from_today_keeping_time(self):
        due = datetime.datetime(2024, 1, 3, 8, 45)
        assert next_occurrence(due, "daily", now=NOW) == datetime.datetime(2024, 1, 11, 8, 45)

    def test_overdue_all_day_series(self):
        due = datetime.datetime(2023, 12, 1)
        assert next_occurrence(due, "weekly", now=NOW) == datetime.datetime(2024, 1, 17)

    def test_deterministic(self):
        due = datetime.datetime(2024, 1, 8, 7, 0)
        first = next_occurrence(due, "daily", now=NOW)
        second = next_occurrence(due, "daily", now=NOW)
        assert first == second

    def test_end_date_is_inclusive_of_its_whole_day(self):
        due = datetime.datetime(2024, 1, 10, 18, 0)
        assert next_occurrence(
            due, "daily", datetime.datetime(2024, 1, 11), now=NOW
        ) == datetime.datetime(2024, 1, 11, 18, 0)

    def test_series_ends_after_end_date(self):
        due = datetime.datetime(2024, 1, 10)
        assert next_occurrence(due, "weekly", datetime.datetime(2024, 1, 16), now=NOW) is None

    def test_accepts_stored_strings(self):
        assert next_occurrence("2024-01-10T09:00:00", "daily", now=NOW) == datetime.datetime(
            2024, 1, 11, 9, 0
        )

    def test_invalid_inputs(self):
        assert next_occurrence(None, "daily", now=NOW) is None
        assert next_occurrence("garbage", "daily", now=NOW) is None
        assert next_occurrence(datetime.datetime(2024, 1, 10), "monthly", now=NOW) is None
        assert next_occurrence(datetime.datetime(2024, 1, 10), None, now=NOW) is None


class TestWeekdayCodes:
    def test_daily_uses_every_day(self):
        assert weekday_codes(datetime.datetime(2024, 1, 10), Recurrence.DAILY) == list(DAY_CODES)

    def test_weekly_uses_due_weekday(self):
        assert weekday_codes(datetime.datetime(2024, 1, 10), Recurrence.WEEKLY) == ["W"]
        assert weekday_codes(datetime.datetime(2024, 1, 11), Recurrence.WEEKLY) == ["R"]
        assert weekday_codes(datetime.datetime(2024, 1, 7), Recurrence.WEEKLY) == ["U"]

    def test_non_recurring(self):
        assert weekday_codes(datetime.datetime(2024, 1, 10), None) == []
