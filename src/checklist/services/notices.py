"""User-visible notices raised by the engine."""

from __future__ import annotations

import logging
import time
from collections import deque
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)


class NoticeLevel(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


_LOG_LEVELS = {
    NoticeLevel.INFO: logging.INFO,
    NoticeLevel.WARNING: logging.WARNING,
    NoticeLevel.ERROR: logging.ERROR,
}


@dataclass(slots=True)
class Notice:
    level: NoticeLevel
    message: str
    created_at: float = field(default_factory=time.time)

    def to_dict(self) -> dict[str, object]:
        return {
            "level": self.level.value,
            "message": self.message,
            "createdAt": self.created_at,
        }


class NoticeBoard:
    """Bounded, newest-last history of transient messages for the user."""

    def __init__(self, capacity: int = 100) -> None:
        self._notices: deque[Notice] = deque(maxlen=max(1, capacity))

    def post(self, level: NoticeLevel | str, message: str) -> Notice:
        notice = Notice(level=NoticeLevel(level), message=message)
        self._notices.append(notice)
        logger.log(_LOG_LEVELS[notice.level], "Notice: %s", message)
        return notice

    def info(self, message: str) -> Notice:
        return self.post(NoticeLevel.INFO, message)

    def warning(self, message: str) -> Notice:
        return self.post(NoticeLevel.WARNING, message)

    def error(self, message: str) -> Notice:
        return self.post(NoticeLevel.ERROR, message)

    def recent(self, limit: int | None = None) -> list[Notice]:
        items = list(self._notices)
        if limit is not None:
            items = items[-limit:] if limit > 0 else []
        return items

    def drain(self) -> list[Notice]:
        items = list(self._notices)
        self._notices.clear()
        return items

    @property
    def latest(self) -> Notice | None:
        return self._notices[-1] if self._notices else None

    def __len__(self) -> int:
        return len(self._notices)


__all__ = ["Notice", "NoticeBoard", "NoticeLevel"]
