"""Tests for quick-capture date extraction."""

from __future__ import annotations

import datetime

import pytest

from checklist.tasks.quick_add import parse_quick_add

NOW = datetime.datetime(2024, 1, 10, 10, 0)


def test_tomorrow_with_time_creates_timed_slot():
    result = parse_quick_add("Call mom tomorrow at 3pm", now=NOW)
    assert result.text == "Call mom"
    assert result.due_date == datetime.datetime(2024, 1, 11, 15, 0)
    assert result.all_day is False
    assert result.start_time == "15:00"
    assert result.end_time == "16:00"


def test_trailing_weekday_is_all_day():
    result = parse_quick_add("Team sync friday", now=NOW)
    assert result.text == "Team sync"
    assert result.due_date == datetime.datetime(2024, 1, 12)
    assert result.all_day is True
    assert result.start_time is None


def test_next_weekday():
    result = parse_quick_add("Dentist next monday", now=NOW)
    assert result.text == "Dentist"
    assert result.due_date == datetime.datetime(2024, 1, 22)


def test_in_days():
    result = parse_quick_add("Renew passport in 3 days", now=NOW)
    assert result.text == "Renew passport"
    assert result.due_date == datetime.datetime(2024, 1, 13)


def test_in_days_beyond_calendar_range_keeps_text():
    result = parse_quick_add("Plan in 99999999 days", now=NOW)
    assert result.text == "Plan in 99999999 days"
    assert result.due_date is None


def test_bare_hour():
    result = parse_quick_add("Standup at 9", now=NOW)
    assert result.text == "Standup"
    assert result.due_date == datetime.datetime(2024, 1, 10, 9, 0)
    assert result.start_time == "09:00"


def test_short_date():
    result = parse_quick_add("Gift shopping 12/20", now=NOW)
    assert result.text == "Gift shopping"
    assert result.due_date == datetime.datetime(2024, 12, 20)


@pytest.mark.parametrize(
    "text",
    ["Buy milk", "Read chapter 3", "  Water plants  "],
)
def test_text_without_date_is_unchanged(text):
    result = parse_quick_add(text, now=NOW)
    assert result.text == text.strip()
    assert result.due_date is None
    assert result.all_day is True


def test_date_in_middle_is_not_extracted():
    result = parse_quick_add("Plan tomorrow's agenda", now=NOW)
    assert result.text == "Plan tomorrow's agenda"
    assert result.due_date is None
