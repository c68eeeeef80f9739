"""REST API endpoints for lists, view filters and vault note events."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status

from ..schemas.tasks import (
    ListCreatePayload,
    ListUpdatePayload,
    NoteDeletedPayload,
    NoteRenamedPayload,
    ViewStatePayload,
)
from ..services.engine import ChecklistService
from ..tasks.errors import TaskValidationError
from .tasks import get_checklist_service

router = APIRouter(prefix="/api", tags=["lists"])


def _list_summary(service: ChecklistService) -> list[dict[str, Any]]:
    current = service.store.current_list_id
    return [
        {
            "id": list_id,
            "name": task_list.name,
            "color": task_list.color,
            "openCount": len(task_list.todos),
            "completedCount": len(task_list.archived),
            "current": list_id == current and service.smart_list is None,
        }
        for list_id, task_list in service.store.lists.items()
    ]


@router.get("/lists")
async def list_lists(
    service: ChecklistService = Depends(get_checklist_service),
) -> list[dict[str, Any]]:
    return _list_summary(service)


@router.post("/lists", status_code=status.HTTP_201_CREATED)
async def create_list(
    payload: ListCreatePayload,
    service: ChecklistService = Depends(get_checklist_service),
) -> dict[str, str]:
    try:
        list_id = await service.create_list(payload.name, payload.color)
    except TaskValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return {"id": list_id}


@router.put("/lists/{list_id}")
async def rename_list(
    list_id: str,
    payload: ListUpdatePayload,
    service: ChecklistService = Depends(get_checklist_service),
) -> dict[str, bool]:
    kwargs: dict[str, Any] = {}
    if "color" in payload.model_fields_set:
        kwargs["color"] = payload.color
    try:
        renamed = await service.rename_list(list_id, payload.name, **kwargs)
    except TaskValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    if not renamed:
        raise HTTPException(status_code=404, detail="List not found")
    return {"renamed": True}


@router.delete("/lists/{list_id}")
async def delete_list(
    list_id: str,
    service: ChecklistService = Depends(get_checklist_service),
) -> dict[str, bool]:
    if list_id not in service.store.lists:
        raise HTTPException(status_code=404, detail="List not found")
    if not await service.delete_list(list_id):
        raise HTTPException(status_code=409, detail="Cannot delete the only list")
    return {"deleted": True}


@router.post("/lists/{list_id}/select")
async def select_list(
    list_id: str,
    service: ChecklistService = Depends(get_checklist_service),
) -> dict[str, str]:
    if not await service.set_current_list(list_id):
        raise HTTPException(status_code=404, detail="List not found")
    return {"currentList": list_id}


@router.put("/view")
async def update_view(
    payload: ViewStatePayload,
    service: ChecklistService = Depends(get_checklist_service),
) -> dict[str, Any]:
    """Change the smart list, search query or tag filter."""

    fields = payload.model_fields_set
    if "smart_list" in fields:
        service.select_smart_list(payload.smart_list)
    if "search_query" in fields:
        service.set_search_query(payload.search_query)
    if "tag_filter" in fields:
        service.set_tag_filter(payload.tag_filter)
    return {
        "smartList": service.smart_list.value if service.smart_list else None,
        "searchQuery": service.search_query,
        "tagFilter": service.tag_filter,
    }


@router.post("/notes/renamed")
async def note_renamed(
    payload: NoteRenamedPayload,
    service: ChecklistService = Depends(get_checklist_service),
) -> dict[str, int]:
    updated = await service.handle_note_renamed(payload.old_path, payload.new_path)
    return {"updated": updated}


@router.post("/notes/deleted")
async def note_deleted(
    payload: NoteDeletedPayload,
    service: ChecklistService = Depends(get_checklist_service),
) -> dict[str, int]:
    updated = await service.handle_note_deleted(payload.path)
    return {"updated": updated}


__all__ = ["router"]
