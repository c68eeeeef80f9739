"""Tests for the in-memory task store."""

from __future__ import annotations

import datetime

import pytest

from checklist.tasks.errors import TaskValidationError
from checklist.tasks.models import DEFAULT_LIST_ID, Partition, Priority, Recurrence
from checklist.tasks.smart_lists import SmartList
from checklist.tasks.store import TaskStore
from checklist.tasks.undo import UndoAction, UndoLog

NOW = datetime.datetime(2024, 1, 10, 10, 0)


@pytest.fixture
def store() -> TaskStore:
    return TaskStore()


def _ids(tasks):
    return [task.id for task in tasks]


class TestAddAndEdit:
    def test_add_inserts_at_front_with_tags(self, store):
        first = store.add_task("First")
        second = store.add_task("Second #Home")
        assert _ids(store.current_list.todos) == [second.id, first.id]
        assert second.tags == ["#home"]
        assert len(store.undo_log) == 2
        assert store.undo_log.pop().action is UndoAction.ADD

    def test_add_rejects_empty_text(self, store):
        with pytest.raises(TaskValidationError):
            store.add_task("   ")
        assert store.current_list.todos == []

    def test_add_to_unknown_list(self, store):
        assert store.add_task("Lost", list_id="nope") is None

    def test_timed_due_date_derives_slot(self, store):
        task = store.add_task("Call", due_date=datetime.datetime(2024, 1, 11, 15, 0))
        assert task.start_time == "15:00"
        assert task.end_time == "16:00"
        assert task.all_day is False

    def test_all_day_due_date(self, store):
        task = store.add_task("Pay rent", due_date=datetime.datetime(2024, 1, 11))
        assert task.start_time is None
        assert task.is_all_day

    def test_quick_add(self, store):
        task = store.quick_add("Call mom tomorrow at 3pm #family", now=NOW)
        assert task.text == "Call mom tomorrow at 3pm #family"
        assert task.tags == ["#family"]
        assert task.due_date is None

        task = store.quick_add("Call mom #family tomorrow at 3pm", now=NOW)
        assert task.text == "Call mom #family"
        assert task.tags == ["#family"]
        assert task.due_date == datetime.datetime(2024, 1, 11, 15, 0)
        assert task.start_time == "15:00"

    def test_edit_replaces_fields_and_rederives_tags(self, store):
        task = store.add_task("Old #a")
        updated = store.edit_task(task.id, {"text": "New #b", "priority": "high"})
        assert updated.id == task.id
        assert updated.text == "New #b"
        assert updated.tags == ["#b"]
        assert updated.priority is Priority.HIGH
        assert store.find_task(task.id) is updated

    def test_edit_rejects_unknown_field(self, store):
        task = store.add_task("Task")
        with pytest.raises(TaskValidationError):
            store.edit_task(task.id, {"colour": "red"})

    def test_edit_rejects_empty_text(self, store):
        task = store.add_task("Task")
        with pytest.raises(TaskValidationError):
            store.edit_task(task.id, {"text": ""})
        assert store.find_task(task.id).text == "Task"

    def test_edit_missing_task(self, store):
        assert store.edit_task("missing", {"text": "x"}) is None


class TestCompletion:
    def test_complete_moves_to_archived_front(self, store):
        older = store.add_task("Older")
        store.complete_task(older.id, now=NOW)
        task = store.add_task("Task")
        assert store.complete_task(task.id, now=NOW) is None
        assert store.current_list.todos == []
        assert _ids(store.current_list.archived) == [task.id, older.id]
        assert task.completed_at is not None

    def test_complete_unknown_or_archived_task(self, store):
        task = store.add_task("Task")
        store.complete_task(task.id, now=NOW)
        assert store.complete_task(task.id, now=NOW) is None
        assert store.complete_task("missing", now=NOW) is None

    def test_recurring_completion_spawns_next_occurrence(self, store):
        task = store.add_task(
            "Water plants",
            due_date=datetime.datetime(2024, 1, 8, 9, 0),
            recurrence="daily",
        )
        task.calendar_event_path = "calendar/tasks/recurring-Water plants-abcdef.md"
        task.notified = True
        store.add_subtask(task.id, "Fern")
        store.toggle_subtask(task.id, task.subtasks[0].id)

        spawned = store.complete_task(task.id, now=NOW)

        assert spawned is not None
        assert spawned.id != task.id
        assert spawned.due_date == datetime.datetime(2024, 1, 11, 9, 0)
        assert spawned.recurrence is Recurrence.DAILY
        assert spawned.notified is False
        assert spawned.subtasks[0].completed is False
        assert spawned.calendar_event_path == "calendar/tasks/recurring-Water plants-abcdef.md"
        assert task.calendar_event_path is None
        assert store.current_list.todos == [spawned]

    def test_ended_series_keeps_projection(self, store):
        task = store.add_task(
            "Course",
            due_date=datetime.datetime(2024, 1, 10),
            recurrence="weekly",
            recurrence_end_date=datetime.datetime(2024, 1, 12),
        )
        task.calendar_event_path = "calendar/tasks/recurring-Course-abcdef.md"
        assert store.complete_task(task.id, now=NOW) is None
        assert task.calendar_event_path == "calendar/tasks/recurring-Course-abcdef.md"

    def test_uncomplete_restores_to_front(self, store):
        task = store.add_task("Task")
        store.complete_task(task.id, now=NOW)
        other = store.add_task("Other")
        restored = store.uncomplete_task(task.id)
        assert restored.completed_at is None
        assert _ids(store.current_list.todos) == [task.id, other.id]


class TestUndo:
    def test_undo_delete_restores_at_front(self, store):
        first = store.add_task("First")
        second = store.add_task("Second")
        store.delete_task(first.id)
        replay = store.apply_undo()
        assert replay.applied
        assert replay.message == "Task restored"
        assert _ids(store.current_list.todos) == [first.id, second.id]

    def test_undo_snapshot_is_independent(self, store):
        task = store.add_task("Original")
        store.delete_task(task.id)
        task.text = "Mutated after delete"
        store.apply_undo()
        assert store.find_task(task.id).text == "Original"

    def test_undo_complete(self, store):
        task = store.add_task("Task")
        task.calendar_event_path = "calendar/tasks/2024-01-10 Task-000001.md"
        store.complete_task(task.id, now=NOW)
        replay = store.apply_undo()
        restored = store.find_task(task.id)
        assert replay.message == "Task uncompleted"
        assert restored.completed_at is None
        assert replay.completion == [(restored, False)]

    def test_undo_edit_restores_previous_version(self, store):
        task = store.add_task("Before", due_date=datetime.datetime(2024, 1, 11))
        store.edit_task(task.id, {"text": "After"})
        store.find_task(task.id).calendar_event_path = "calendar/tasks/new.md"
        replay = store.apply_undo()
        restored = store.find_task(task.id)
        assert restored.text == "Before"
        assert restored.calendar_event_path == "calendar/tasks/new.md"
        assert replay.sync == [restored]

    def test_undo_move(self, store):
        task = store.add_task("Task")
        other = store.create_list("Other")
        assert store.move_task_to_list(task.id, other)
        store.apply_undo()
        assert _ids(store.lists[DEFAULT_LIST_ID].todos) == [task.id]
        assert store.lists[other].todos == []

    def test_undo_add(self, store):
        task = store.add_task("Oops")
        task.calendar_event_path = "calendar/tasks/oops.md"
        replay = store.apply_undo()
        assert store.find_task(task.id) is None
        assert _ids(replay.remove) == [task.id]

    def test_clear_archived_is_one_undo_entry(self, store):
        for text in ("a", "b", "c"):
            task = store.add_task(text)
            store.complete_task(task.id, now=NOW)
        archived_before = _ids(store.current_list.archived)
        depth = len(store.undo_log)

        cleared = store.clear_archived()

        assert len(cleared) == 3
        assert store.current_list.archived == []
        assert len(store.undo_log) == depth + 1
        replay = store.apply_undo()
        assert replay.message == "Restored 3 completed tasks"
        assert _ids(store.current_list.archived) == archived_before

    def test_undo_delete_archived(self, store):
        task = store.add_task("Done", due_date=datetime.datetime(2024, 1, 9))
        store.complete_task(task.id, now=NOW)
        store.delete_archived_task(task.id)
        replay = store.apply_undo()
        restored = store.find_task(task.id)
        assert restored.is_completed
        assert replay.sync == [restored]
        assert replay.completion == [(restored, True)]

    def test_nothing_to_undo(self, store):
        assert store.apply_undo() is None

    def test_undo_log_is_bounded(self):
        store = TaskStore(undo_log=UndoLog(3))
        for index in range(5):
            store.add_task(f"Task {index}")
        assert len(store.undo_log) == 3


class TestOrderingAndLists:
    def test_reorder_within_list(self, store):
        a = store.add_task("a")
        b = store.add_task("b")
        c = store.add_task("c")
        assert store.reorder_task(a.id, c.id)
        assert _ids(store.current_list.todos) == [a.id, c.id, b.id]

    def test_reorder_across_lists_is_rejected(self, store):
        a = store.add_task("a")
        other = store.create_list("Other")
        b = store.add_task("b", list_id=other)
        assert store.reorder_task(a.id, b.id) is False
        assert _ids(store.lists[DEFAULT_LIST_ID].todos) == [a.id]

    def test_cycle_priority(self, store):
        task = store.add_task("Task")
        seen = [store.cycle_priority(task.id) for _ in range(4)]
        assert seen == [Priority.LOW, Priority.MEDIUM, Priority.HIGH, Priority.NONE]

    def test_move_rejects_same_list_and_archived(self, store):
        task = store.add_task("Task")
        assert store.move_task_to_list(task.id, DEFAULT_LIST_ID) is False
        other = store.create_list("Other")
        store.complete_task(task.id, now=NOW)
        assert store.move_task_to_list(task.id, other) is False

    def test_create_and_rename_list(self, store):
        list_id = store.create_list("  Errands  ", "#ff0000")
        assert store.current_list_id == list_id
        assert store.lists[list_id].name == "Errands"
        assert store.rename_list(list_id, "Chores")
        assert store.lists[list_id].color == "#ff0000"
        assert store.rename_list(list_id, "Chores", color=None)
        assert store.lists[list_id].color is None
        with pytest.raises(TaskValidationError):
            store.create_list("")

    def test_delete_list_returns_its_tasks(self, store):
        list_id = store.create_list("Temp")
        task = store.add_task("Temp task")
        removed = store.delete_list(list_id)
        assert _ids(removed) == [task.id]
        assert list_id not in store.lists
        assert store.current_list_id == DEFAULT_LIST_ID

    def test_last_list_cannot_be_deleted(self, store):
        assert store.delete_list(DEFAULT_LIST_ID) is None
        assert DEFAULT_LIST_ID in store.lists

    def test_subtasks(self, store):
        task = store.add_task("Parent")
        subtask = store.add_subtask(task.id, " Child ")
        assert subtask.text == "Child"
        assert store.toggle_subtask(task.id, subtask.id) is True
        assert store.toggle_subtask(task.id, "missing") is None
        assert store.delete_subtask(task.id, subtask.id)
        assert task.subtasks == []
        with pytest.raises(TaskValidationError):
            store.add_subtask(task.id, "")


class TestQueries:
    def test_smart_lists_span_all_lists(self, store):
        today = store.add_task("Today", due_date=datetime.datetime(2024, 1, 10))
        other = store.create_list("Other")
        overdue = store.add_task("Late", list_id=other, due_date=datetime.datetime(2024, 1, 5))
        urgent = store.add_task("Urgent", list_id=other, priority="high")

        assert _ids(store.filtered_tasks(SmartList.TODAY, now=NOW)) == [today.id]
        assert _ids(store.filtered_tasks("overdue", now=NOW)) == [overdue.id]
        assert _ids(store.filtered_tasks("highPriority", now=NOW)) == [urgent.id]
        assert len(store.filtered_tasks(SmartList.ALL, now=NOW)) == 3

    def test_unknown_smart_list_falls_back_to_current_list(self, store):
        task = store.add_task("Task")
        assert _ids(store.filtered_tasks("someday", now=NOW)) == [task.id]

    def test_search_and_tag_filters_combine(self, store):
        store.add_task("Buy milk #shop")
        bread = store.add_task("Buy bread #shop", notes="wholegrain")
        store.add_task("Read #books")
        assert _ids(store.filtered_tasks(tag_filter="#shop", search_query="BREAD", now=NOW)) == [
            bread.id
        ]
        assert _ids(store.filtered_tasks(search_query="wholegrain", now=NOW)) == [bread.id]

    def test_sort_orders(self, store):
        low = store.add_task("low", priority="low", due_date=datetime.datetime(2024, 1, 12))
        high = store.add_task("high", priority="high")
        mid = store.add_task("mid", priority="medium", due_date=datetime.datetime(2024, 1, 11))
        assert _ids(store.filtered_tasks(sort_by="priority", now=NOW)) == [high.id, mid.id, low.id]
        assert _ids(store.filtered_tasks(sort_by="dueDate", now=NOW)) == [mid.id, low.id, high.id]
        assert _ids(store.filtered_tasks(sort_by="manual", now=NOW)) == [mid.id, high.id, low.id]

    def test_all_tags_and_due_tasks(self, store):
        store.add_task("a #x #y")
        dated = store.add_task("b #x", due_date=datetime.datetime(2024, 1, 11))
        assert store.all_tags() == ["#x", "#y"]
        assert _ids(store.due_tasks()) == [dated.id]

    def test_linked_note_hooks(self, store):
        task = store.add_task("Read", linked_note="Notes/Book.md")
        assert store.relink_note("Notes/Book.md", "Archive/Book.md") == [task]
        assert task.linked_note == "Archive/Book.md"
        assert store.unlink_note("Archive/Book.md") == [task]
        assert task.linked_note is None


class TestDueNotifications:
    def test_due_today_fires_during_nine_oclock_hour_once(self, store):
        task = store.add_task("Morning", due_date=datetime.datetime(2024, 1, 10))
        at_nine = datetime.datetime(2024, 1, 10, 9, 5)
        notices = store.collect_due_notifications(at_nine)
        assert [notice.kind for notice in notices] == ["due_today"]
        assert task.notified
        assert store.collect_due_notifications(at_nine) == []

    def test_due_today_outside_nine_oclock_is_silent(self, store):
        store.add_task("Morning", due_date=datetime.datetime(2024, 1, 10))
        assert store.collect_due_notifications(NOW) == []

    def test_due_soon_fires_within_fifteen_minutes(self, store):
        task = store.add_task("Call", due_date=datetime.datetime(2024, 1, 10, 10, 10))
        notices = store.collect_due_notifications(NOW)
        assert [notice.kind for notice in notices] == ["due_soon"]
        assert notices[0].message == "Task in 15 minutes: Call"
        assert task.notified15
        assert store.collect_due_notifications(NOW) == []

    def test_completed_tasks_are_ignored(self, store):
        task = store.add_task("Call", due_date=datetime.datetime(2024, 1, 10, 10, 10))
        store.complete_task(task.id, now=NOW)
        assert store.collect_due_notifications(NOW) == []


def test_load_clears_undo_history(store):
    store.add_task("Task")
    state = store.load({"lists": {"a": {"name": "A"}}, "currentList": "a"})
    assert len(store.undo_log) == 0
    assert list(state.lists) == ["a"]
    assert store.locate_task("missing") is None


def test_locate_task_reports_partition(store):
    task = store.add_task("Task")
    assert store.locate_task(task.id).partition is Partition.TODOS
    store.complete_task(task.id, now=NOW)
    assert store.locate_task(task.id).partition is Partition.ARCHIVED
