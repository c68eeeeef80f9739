"""Pydantic models for the per-user checklist settings block."""

from __future__ import annotations

import logging
from typing import Any, Literal, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictStr,
    ValidationError,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    field_validator,
)
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

SortByValue = Literal["manual", "priority", "dueDate", "created"]


class ChecklistSettings(BaseModel):
    """Settings persisted alongside the task lists.

    Values loaded from disk are never trusted: a field holding the wrong type
    or an unknown enum value silently falls back to its default.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        validate_assignment=True,
    )

    show_archived: StrictBool = Field(
        default=False,
        description="Show the completed partition under the open tasks",
    )
    sort_by: SortByValue = Field(
        default="manual",
        description="Ordering applied to filtered task views",
    )
    notifications: StrictBool = Field(
        default=True,
        description="Raise due-today and 15-minute reminders",
    )
    full_calendar_sync: StrictBool = Field(
        default=False,
        description="Project due-dated tasks into calendar event files",
    )
    full_calendar_folder: StrictStr = Field(
        default="calendar/tasks",
        description="Vault-relative folder receiving calendar event files",
    )
    enable_confirm_dialogs: StrictBool = True
    enable_animations: StrictBool = True
    enable_keyboard_navigation: StrictBool = True
    enable_quick_capture: StrictBool = True

    @field_validator("*", mode="wrap")
    @classmethod
    def _fallback_to_default(
        cls,
        value: Any,
        handler: ValidatorFunctionWrapHandler,
        info: ValidationInfo,
    ) -> Any:
        try:
            return handler(value)
        except ValidationError:
            field_name = info.field_name or ""
            logger.warning("Invalid value for setting %s; using default", field_name)
            return cls.model_fields[field_name].get_default(call_default_factory=True)


class ChecklistSettingsUpdate(BaseModel):
    """Partial update for checklist settings."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    show_archived: Optional[StrictBool] = None
    sort_by: Optional[SortByValue] = None
    notifications: Optional[StrictBool] = None
    full_calendar_sync: Optional[StrictBool] = None
    full_calendar_folder: Optional[StrictStr] = None
    enable_confirm_dialogs: Optional[StrictBool] = None
    enable_animations: Optional[StrictBool] = None
    enable_keyboard_navigation: Optional[StrictBool] = None
    enable_quick_capture: Optional[StrictBool] = None


__all__ = ["ChecklistSettings", "ChecklistSettingsUpdate", "SortByValue"]
