"""Application configuration using environment variables."""

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .tasks.models import (
    MAX_LIST_NAME_LENGTH,
    MAX_SUBTASK_TEXT_LENGTH,
    MAX_TASK_NOTES_LENGTH,
    MAX_TASK_TEXT_LENGTH,
    MAX_UNDO_STACK_SIZE,
)

# Resolve the project root once so that `.env` is discovered regardless of CWD
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    """Load configuration from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    data_path: Path = Field(
        default_factory=lambda: Path("data/checklist.json"),
        validation_alias=AliasChoices("CHECKLIST_DATA_PATH", "data_path"),
    )
    vault_root: Path = Field(
        default_factory=lambda: Path("vault"),
        validation_alias=AliasChoices("CHECKLIST_VAULT_ROOT", "vault_root"),
    )
    logging_settings_path: Path = Field(
        default_factory=lambda: Path("logging_settings.conf"),
        validation_alias=AliasChoices("CHECKLIST_LOGGING_SETTINGS", "logging_settings_path"),
    )

    # Timers
    save_debounce_ms: int = Field(
        default=150,
        validation_alias=AliasChoices("CHECKLIST_SAVE_DEBOUNCE_MS", "save_debounce_ms"),
        ge=0,
    )
    animation_duration_ms: int = Field(
        default=300,
        validation_alias=AliasChoices("CHECKLIST_ANIMATION_MS", "animation_duration_ms"),
        ge=0,
    )
    notification_interval_seconds: float = Field(
        default=60.0,
        validation_alias=AliasChoices(
            "CHECKLIST_NOTIFICATION_INTERVAL_SECONDS",
            "notification_interval_seconds",
        ),
        gt=0,
    )

    # Limits
    max_undo: int = Field(
        default=MAX_UNDO_STACK_SIZE,
        validation_alias=AliasChoices("CHECKLIST_MAX_UNDO", "max_undo"),
        ge=1,
    )
    max_task_text_length: int = Field(
        default=MAX_TASK_TEXT_LENGTH,
        validation_alias=AliasChoices("CHECKLIST_MAX_TASK_TEXT", "max_task_text_length"),
        ge=1,
    )
    max_task_notes_length: int = Field(
        default=MAX_TASK_NOTES_LENGTH,
        validation_alias=AliasChoices("CHECKLIST_MAX_TASK_NOTES", "max_task_notes_length"),
        ge=0,
    )
    max_subtask_text_length: int = Field(
        default=MAX_SUBTASK_TEXT_LENGTH,
        validation_alias=AliasChoices(
            "CHECKLIST_MAX_SUBTASK_TEXT", "max_subtask_text_length"
        ),
        ge=1,
    )
    max_list_name_length: int = Field(
        default=MAX_LIST_NAME_LENGTH,
        validation_alias=AliasChoices("CHECKLIST_MAX_LIST_NAME", "max_list_name_length"),
        ge=1,
    )
    notice_history: int = Field(
        default=100,
        validation_alias=AliasChoices("CHECKLIST_NOTICE_HISTORY", "notice_history"),
        ge=1,
    )

    # HTTP server
    host: str = Field(
        default="127.0.0.1",
        validation_alias=AliasChoices("CHECKLIST_HOST", "host"),
    )
    port: int = Field(
        default=8000,
        validation_alias=AliasChoices("CHECKLIST_PORT", "port"),
        ge=1,
        le=65535,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached `Settings` instance."""

    return Settings()  # pyright: ignore[reportCallIssue]


__all__ = ["PROJECT_ROOT", "Settings", "get_settings"]
