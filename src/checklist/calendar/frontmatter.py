"""Rendering of calendar event files: a YAML-style header plus a Markdown body."""

from __future__ import annotations

import datetime
import re
from collections.abc import Mapping
from typing import Any, Optional

import yaml

from ..tasks.models import Task
from ..utils.datetime_utils import format_date_for_calendar

_CONTROL_CHARACTERS = re.compile(r"[\x00-\x1f\x7f]")
_COMPLETED_FIELD = re.compile(r'completed:\s*(null|false|true|"[^"]*")')
_OPENING_FENCE = re.compile(r"^---\n")
_MARKDOWN_SUFFIX = re.compile(r"\.md$")
_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class Quoted(str):
    """A string that is always emitted double-quoted."""


class _EventDumper(yaml.SafeDumper):
    """Safe dumper that leaves calendar dates as plain scalars."""


def _represent_quoted(dumper: yaml.SafeDumper, data: Quoted) -> yaml.ScalarNode:
    return dumper.represent_scalar("tag:yaml.org,2002:str", str(data), style='"')


_EventDumper.add_representer(Quoted, _represent_quoted)
_EventDumper.yaml_implicit_resolvers = {
    first: [(tag, pattern) for tag, pattern in resolvers if tag != _TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeDumper.yaml_implicit_resolvers.items()
}


def escape_yaml_string(value: Any) -> str:
    """Render ``value`` as a single-line YAML scalar.

    PyYAML decides when quoting is needed (reserved words, numbers,
    indicator characters, surrounding spaces). Text with line breaks or
    other control characters is double-quoted so it stays on one line.
    """

    if isinstance(value, str) and not isinstance(value, Quoted):
        if _CONTROL_CHARACTERS.search(value):
            value = Quoted(value)
    rendered = yaml.dump(
        value,
        Dumper=_EventDumper,
        allow_unicode=True,
        width=float("inf"),
    )
    return rendered.removesuffix("\n").removesuffix("\n...")


def _render_value(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        # Day codes must stay unquoted for calendar plugins to read them.
        return f"[{', '.join(str(item) for item in value)}]"
    return escape_yaml_string(value)


def render_body(task: Task) -> str:
    parts: list[str] = []
    if task.notes:
        parts.append(task.notes)
    if task.linked_note:
        parts.append(f"**Linked Note:** [[{_MARKDOWN_SUFFIX.sub('', task.linked_note)}]]")
    if task.subtasks:
        lines = [f"- [{'x' if item.completed else ' '}] {item.text}" for item in task.subtasks]
        parts.append("## Subtasks\n" + "\n".join(lines))
    return "\n\n".join(parts)


def build_event_file(fields: Mapping[str, Any], task: Task) -> str:
    """Return the full file content for ``fields`` with ``task`` supplying the body."""

    header = ["---"]
    header.extend(f"{key}: {_render_value(value)}" for key, value in fields.items())
    header.append("---")
    return ("\n".join(header) + "\n\n" + render_body(task)).strip()


def patch_completed_field(content: str, completed_on: Optional[datetime.date]) -> str:
    """Set the ``completed`` header field in place, leaving the rest untouched."""

    stamp = Quoted(format_date_for_calendar(completed_on)) if completed_on else None
    replacement = f"completed: {escape_yaml_string(stamp)}"
    if _COMPLETED_FIELD.search(content):
        return _COMPLETED_FIELD.sub(lambda _: replacement, content, count=1)
    return _OPENING_FENCE.sub(lambda _: f"---\n{replacement}\n", content, count=1)


__all__ = [
    "Quoted",
    "build_event_file",
    "escape_yaml_string",
    "patch_completed_field",
    "render_body",
]
