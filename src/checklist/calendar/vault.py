"""File storage used by the calendar projector."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Protocol

from ..tasks.errors import CalendarSyncError
from ..utils.filenames import validate_vault_path


class Vault(Protocol):
    """Async, vault-relative file operations."""

    async def exists(self, path: str) -> bool: ...

    async def is_folder(self, path: str) -> bool: ...

    async def read(self, path: str) -> str: ...

    async def write(self, path: str, content: str) -> None: ...

    async def delete(self, path: str) -> None: ...

    async def create_folder(self, path: str) -> None: ...


class FileSystemVault:
    """Vault backed by a directory on the local disk.

    Every path is validated before use, so callers can never reach outside
    ``root``. Blocking file calls run in a worker thread.
    """

    def __init__(self, root: Path) -> None:
        self._root = Path(root).resolve()

    @property
    def root(self) -> Path:
        return self._root

    def _resolve(self, path: str) -> Path:
        relative = validate_vault_path(path)
        return self._root.joinpath(*relative.split("/"))

    async def exists(self, path: str) -> bool:
        return await asyncio.to_thread(self._resolve(path).exists)

    async def is_folder(self, path: str) -> bool:
        return await asyncio.to_thread(self._resolve(path).is_dir)

    async def read(self, path: str) -> str:
        target = self._resolve(path)
        try:
            return await asyncio.to_thread(target.read_text, encoding="utf-8")
        except OSError as exc:
            raise CalendarSyncError(f"Unable to read {path}: {exc}") from exc

    async def write(self, path: str, content: str) -> None:
        target = self._resolve(path)
        try:
            await asyncio.to_thread(self._write_text, target, content)
        except OSError as exc:
            raise CalendarSyncError(f"Unable to write {path}: {exc}") from exc

    async def delete(self, path: str) -> None:
        target = self._resolve(path)
        try:
            await asyncio.to_thread(target.unlink, missing_ok=True)
        except OSError as exc:
            raise CalendarSyncError(f"Unable to delete {path}: {exc}") from exc

    async def create_folder(self, path: str) -> None:
        target = self._resolve(path)
        try:
            await asyncio.to_thread(target.mkdir, parents=True, exist_ok=True)
        except OSError as exc:
            raise CalendarSyncError(f"Unable to create folder {path}: {exc}") from exc

    @staticmethod
    def _write_text(path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


__all__ = ["FileSystemVault", "Vault"]
