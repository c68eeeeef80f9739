"""Tests for calendar event file rendering."""

from __future__ import annotations

import datetime

import pytest
import yaml

from checklist.calendar.frontmatter import (
    Quoted,
    build_event_file,
    escape_yaml_string,
    patch_completed_field,
)
from checklist.tasks.models import Subtask


class TestEscapeYamlString:
    def test_plain_text_is_unquoted(self):
        assert escape_yaml_string("Buy milk") == "Buy milk"
        assert escape_yaml_string("🔴 Call") == "🔴 Call"

    def test_non_string_scalars(self):
        assert escape_yaml_string(None) == "null"
        assert escape_yaml_string(True) == "true"
        assert escape_yaml_string(False) == "false"

    @pytest.mark.parametrize("value", ["", "true", "No", "null", "42", "3.14", "0x1F", "~", "15:00"])
    def test_reserved_scalars_are_quoted(self, value):
        rendered = escape_yaml_string(value)
        assert rendered != value
        assert yaml.safe_load(f"key: {rendered}") == {"key": value}

    @pytest.mark.parametrize("value", ['Say "hi": now', "a\\b", " padded", "#tag", "[x] done"])
    def test_special_characters_survive_loading(self, value):
        assert yaml.safe_load(f"key: {escape_yaml_string(value)}") == {"key": value}

    def test_line_breaks_stay_on_one_line(self):
        assert escape_yaml_string("line\nbreak") == '"line\\nbreak"'
        assert escape_yaml_string("tab\there") == '"tab\\there"'

    def test_calendar_dates_are_plain(self):
        assert escape_yaml_string("2024-01-10") == "2024-01-10"

    def test_quoted_marker_forces_quotes(self):
        assert escape_yaml_string(Quoted("2024-01-10")) == '"2024-01-10"'


class TestBuildEventFile:
    def test_header_and_body(self, make_task):
        task = make_task(
            "Write report",
            notes="Quarterly numbers",
            linked_note="Projects/Report.md",
            subtasks=[
                Subtask(id="s1", text="Draft", completed=True),
                Subtask(id="s2", text="Review"),
            ],
        )
        content = build_event_file(
            {"title": "Write report", "allDay": True, "completed": None, "daysOfWeek": ["M", "W"]},
            task,
        )
        assert content == (
            "---\n"
            "title: Write report\n"
            "allDay: true\n"
            "completed: null\n"
            "daysOfWeek: [M, W]\n"
            "---\n"
            "\n"
            "Quarterly numbers\n"
            "\n"
            "**Linked Note:** [[Projects/Report]]\n"
            "\n"
            "## Subtasks\n"
            "- [x] Draft\n"
            "- [ ] Review"
        )

    def test_empty_body(self, make_task):
        content = build_event_file({"title": "Solo"}, make_task("Solo"))
        assert content == "---\ntitle: Solo\n---"


class TestPatchCompletedField:
    def test_sets_completion_date(self):
        content = "---\ntitle: A\ncompleted: null\ntype: single\n---\n\nBody"
        patched = patch_completed_field(content, datetime.date(2024, 1, 10))
        assert patched == '---\ntitle: A\ncompleted: "2024-01-10"\ntype: single\n---\n\nBody'

    def test_clears_completion_date(self):
        content = '---\ntitle: A\ncompleted: "2024-01-10"\n---'
        assert patch_completed_field(content, None) == "---\ntitle: A\ncompleted: null\n---"

    def test_inserts_missing_field(self):
        content = "---\ntitle: A\n---"
        patched = patch_completed_field(content, datetime.date(2024, 1, 10))
        assert patched == '---\ncompleted: "2024-01-10"\ntitle: A\n---'
