"""Application factory for the checklist FastAPI service."""

from __future__ import annotations

import asyncio
import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .calendar.vault import FileSystemVault
from .config import PROJECT_ROOT, Settings, get_settings
from .logging_settings import parse_logging_settings
from .routers.lists import router as lists_router
from .routers.settings import router as settings_router
from .routers.tasks import router as tasks_router
from .services.engine import ChecklistService
from .services.persistence import DocumentRepository
from .tasks.validator import ValidationLimits

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _configure_logging(settings_path: Path) -> None:
    """Configure logging from ``logging_settings.conf`` and the LOG_* variables."""
    # Load .env file first to ensure LOG_FILE is available
    load_dotenv()

    levels = parse_logging_settings(settings_path)
    env_level = os.getenv("LOG_LEVEL")
    terminal_level = levels.terminal_level
    if env_level:
        terminal_level = getattr(logging, env_level.upper(), logging.INFO)

    handlers: list[logging.Handler] = []
    formatter = logging.Formatter(_LOG_FORMAT, datefmt=_LOG_DATEFMT)

    log_file = os.getenv("LOG_FILE")
    if log_file and levels.file_level is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        file_handler.setLevel(levels.file_level)
        handlers.append(file_handler)

    if terminal_level is not None:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        console_handler.setLevel(terminal_level)
        handlers.append(console_handler)

    active = [handler.level for handler in handlers]
    root_level = min(active) if active else logging.CRITICAL + 1
    logging.basicConfig(
        level=root_level,
        handlers=handlers or [logging.NullHandler()],
        force=True,
    )

    logging.getLogger("checklist").setLevel(root_level)
    logging.getLogger("uvicorn").setLevel(root_level)
    logging.getLogger("uvicorn.access").setLevel(root_level)
    logging.getLogger("uvicorn.error").setLevel(root_level)

    # Quiet down noisy third-party libraries
    if root_level > logging.DEBUG:
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)


def _resolve_under(base: Path, p: Path) -> Path:
    # Allow absolute paths as-is (useful for tests and external mounts).
    if p.is_absolute():
        return p.resolve()
    resolved = (base / p).resolve()
    if not resolved.is_relative_to(base):
        raise ValueError(f"Configured path {resolved} escapes project root {base}")
    return resolved


def build_service(settings: Settings, project_root: Path = PROJECT_ROOT) -> ChecklistService:
    """Wire a ``ChecklistService`` from configuration."""

    repository = DocumentRepository(_resolve_under(project_root, settings.data_path))
    vault = FileSystemVault(_resolve_under(project_root, settings.vault_root))
    limits = ValidationLimits(
        max_text_length=settings.max_task_text_length,
        max_notes_length=settings.max_task_notes_length,
        max_subtask_length=settings.max_subtask_text_length,
        max_list_name_length=settings.max_list_name_length,
    )
    return ChecklistService(
        repository,
        vault,
        save_debounce_ms=settings.save_debounce_ms,
        animation_duration_ms=settings.animation_duration_ms,
        notification_interval_seconds=settings.notification_interval_seconds,
        max_undo=settings.max_undo,
        limits=limits,
        notice_history=settings.notice_history,
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    # Configure logging first thing
    _configure_logging(_resolve_under(PROJECT_ROOT, settings.logging_settings_path))

    service = build_service(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await service.start()
        try:
            yield
        finally:
            # Add timeout to prevent hanging during shutdown (especially in tests)
            try:
                await asyncio.wait_for(service.close(), timeout=10.0)
            except asyncio.TimeoutError:
                logging.warning("Checklist shutdown timed out after 10s")

    app = FastAPI(
        title="Checklist Backend",
        version="0.1.0",
        description="Task checklist engine with calendar file projection.",
        lifespan=lifespan,
    )

    app.state.checklist_service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(tasks_router)
    app.include_router(lists_router)
    app.include_router(settings_router)

    @app.get("/health", tags=["health"])
    async def healthcheck() -> dict[str, str | int | bool]:
        return {
            "status": "ok",
            "lists": len(service.store.lists),
            "calendarSync": service.settings.full_calendar_sync,
        }

    return app


__all__ = ["build_service", "create_app"]
