"""JSON document storage for the checklist state."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)


class DocumentRepository:
    """Load and atomically save the persisted checklist document."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> Optional[Any]:
        if not self._path.exists():
            return None
        try:
            return json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Failed to read checklist document %s: %s", self._path, exc)
            return None

    def _write(self, payload: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        serialized = json.dumps(payload, indent=2, ensure_ascii=False)
        fd, temp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(serialized + "\n")
            os.replace(temp_name, self._path)
        except BaseException:
            Path(temp_name).unlink(missing_ok=True)
            raise

    async def load(self) -> Optional[Any]:
        """Return the stored document, or ``None`` when missing or unreadable."""

        async with self._lock:
            return await asyncio.to_thread(self._read)

    async def save(self, payload: dict[str, Any]) -> None:
        async with self._lock:
            await asyncio.to_thread(self._write, payload)
        logger.debug("Saved checklist document to %s", self._path)


__all__ = ["DocumentRepository"]
