"""Command names accepted by the engine and the handler each one maps to."""

from __future__ import annotations

from enum import Enum
from typing import Any


class Command(str, Enum):
    ADD_TASK = "add-task"
    QUICK_ADD = "quick-add"
    EDIT_TASK = "edit-task"
    COMPLETE_TASK = "complete-task"
    UNCOMPLETE_TASK = "uncomplete-task"
    DELETE_TASK = "delete-task"
    DELETE_ARCHIVED = "delete-archived"
    MOVE_TASK = "move-task"
    CYCLE_PRIORITY = "cycle-priority"
    REORDER_TASK = "reorder-task"
    ADD_SUBTASK = "add-subtask"
    TOGGLE_SUBTASK = "toggle-subtask"
    DELETE_SUBTASK = "delete-subtask"
    CLEAR_ARCHIVED = "clear-archived"
    CREATE_LIST = "create-list"
    RENAME_LIST = "rename-list"
    DELETE_LIST = "delete-list"
    SWITCH_LIST = "switch-list"
    SELECT_SMART_LIST = "select-smart-list"
    SET_SEARCH = "set-search"
    SET_TAG_FILTER = "set-tag-filter"
    UNDO = "undo"
    SYNC_ALL = "sync-all"
    UPDATE_SETTINGS = "update-settings"


# Command -> name of the ChecklistService method that handles it.
COMMAND_HANDLERS: dict[Command, str] = {
    Command.ADD_TASK: "add_task",
    Command.QUICK_ADD: "quick_add",
    Command.EDIT_TASK: "edit_task",
    Command.COMPLETE_TASK: "complete_task",
    Command.UNCOMPLETE_TASK: "uncomplete_task",
    Command.DELETE_TASK: "delete_task",
    Command.DELETE_ARCHIVED: "delete_archived_task",
    Command.MOVE_TASK: "move_task_to_list",
    Command.CYCLE_PRIORITY: "cycle_priority",
    Command.REORDER_TASK: "reorder_task",
    Command.ADD_SUBTASK: "add_subtask",
    Command.TOGGLE_SUBTASK: "toggle_subtask",
    Command.DELETE_SUBTASK: "delete_subtask",
    Command.CLEAR_ARCHIVED: "clear_archived",
    Command.CREATE_LIST: "create_list",
    Command.RENAME_LIST: "rename_list",
    Command.DELETE_LIST: "delete_list",
    Command.SWITCH_LIST: "set_current_list",
    Command.SELECT_SMART_LIST: "select_smart_list",
    Command.SET_SEARCH: "set_search_query",
    Command.SET_TAG_FILTER: "set_tag_filter",
    Command.UNDO: "undo",
    Command.SYNC_ALL: "sync_all",
    Command.UPDATE_SETTINGS: "update_settings",
}


def resolve_command(value: Any) -> Command:
    """Return the ``Command`` for ``value``; raises ``ValueError`` when unknown."""

    if isinstance(value, Command):
        return value
    return Command(value)


__all__ = ["COMMAND_HANDLERS", "Command", "resolve_command"]
