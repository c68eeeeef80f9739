"""Filename normalization utilities for calendar projection files."""

from __future__ import annotations

import re
from typing import Optional

from ..tasks.errors import UnsafePathError

_FORBIDDEN_TITLE_CHARS = re.compile(r'[\\/:*?"<>|#^\[\]]')
_DOT_RUNS = re.compile(r"\.{2,}")
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_DRIVE_LETTER = re.compile(r"^[A-Za-z]:")

DEFAULT_TITLE = "Task"
SHORT_ID_LENGTH = 6


def sanitize_title(text: Optional[str], *, max_length: int = 40) -> str:
    """Return a filename-safe title derived from task text.

    Parameters
    ----------
    text:
        Task text (may be None or empty).
    max_length:
        Maximum length of the resulting title. Must be positive.

    Returns
    -------
    str
        Title stripped of characters that are illegal in file names or
        meaningful to wiki links. ``"Task"`` when nothing usable remains.
    """

    if not text:
        return DEFAULT_TITLE

    title = _FORBIDDEN_TITLE_CHARS.sub("", text)
    title = _CONTROL_CHARS.sub("", title)
    title = _DOT_RUNS.sub(".", title).strip()
    if max_length > 0 and len(title) > max_length:
        title = title[:max_length].strip()
    return title or DEFAULT_TITLE


def short_id(task_id: str) -> str:
    """Return the trailing characters of ``task_id`` used to disambiguate file names."""

    return task_id[-SHORT_ID_LENGTH:]


def validate_vault_path(path: str) -> str:
    """Validate a vault-relative path and return it normalised to ``/`` separators.

    Raises ``UnsafePathError`` for absolute paths, drive letters, parent
    directory segments and control characters.
    """

    if not isinstance(path, str) or not path.strip():
        raise UnsafePathError("Path must be a non-empty string")
    if _CONTROL_CHARS.search(path):
        raise UnsafePathError(f"Path contains control characters: {path!r}")
    if path.startswith(("/", "\\")) or _DRIVE_LETTER.match(path):
        raise UnsafePathError(f"Path must be relative to the vault: {path!r}")

    normalized = path.replace("\\", "/")
    segments = [segment for segment in normalized.split("/") if segment not in ("", ".")]
    if any(segment == ".." for segment in segments):
        raise UnsafePathError(f"Path must not contain '..' segments: {path!r}")
    if not segments:
        raise UnsafePathError("Path must name a file or folder")
    return "/".join(segments)


__all__ = [
    "DEFAULT_TITLE",
    "SHORT_ID_LENGTH",
    "sanitize_title",
    "short_id",
    "validate_vault_path",
]
