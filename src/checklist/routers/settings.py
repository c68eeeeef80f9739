"""API routes for checklist settings, calendar sync and notices."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..schemas.settings import ChecklistSettings, ChecklistSettingsUpdate
from ..services.engine import ChecklistService
from .tasks import get_checklist_service

router = APIRouter(prefix="/api", tags=["settings"])


@router.get("/settings", response_model=ChecklistSettings, response_model_by_alias=True)
async def read_settings(
    service: ChecklistService = Depends(get_checklist_service),
) -> ChecklistSettings:
    return service.settings


@router.put("/settings", response_model=ChecklistSettings, response_model_by_alias=True)
async def update_settings(
    payload: ChecklistSettingsUpdate,
    resync: bool = Query(default=False, description="Re-project every due-dated task"),
    service: ChecklistService = Depends(get_checklist_service),
) -> ChecklistSettings:
    return await service.update_settings(payload, force_resync=resync)


@router.post("/calendar/sync")
async def sync_calendar(
    service: ChecklistService = Depends(get_checklist_service),
) -> dict[str, int]:
    if not service.settings.full_calendar_sync:
        raise HTTPException(status_code=409, detail="Full Calendar sync is disabled")
    return {"synced": await service.sync_all()}


@router.get("/notices")
async def read_notices(
    limit: Optional[int] = Query(default=None, ge=0),
    service: ChecklistService = Depends(get_checklist_service),
) -> list[dict[str, Any]]:
    return [notice.to_dict() for notice in service.notices.recent(limit)]


@router.post("/notices/check")
async def check_due_tasks(
    service: ChecklistService = Depends(get_checklist_service),
) -> list[dict[str, str]]:
    """Run the due-task reminder check immediately."""

    return [
        {"taskId": notice.task.id, "kind": notice.kind, "message": notice.message}
        for notice in service.check_due_tasks()
    ]


__all__ = ["router"]
