"""REST API endpoints for task operations."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, status

from ..schemas.tasks import (
    MoveTaskPayload,
    QuickAddPayload,
    ReorderTaskPayload,
    SubtaskCreatePayload,
    TaskCreatePayload,
    TaskUpdatePayload,
)
from ..services.engine import ChecklistService
from ..tasks.errors import OperationInFlightError, TaskValidationError

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


def get_checklist_service(request: Request) -> ChecklistService:
    service = getattr(request.app.state, "checklist_service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Checklist service not available")
    return service


def _not_found(detail: str = "Task not found") -> HTTPException:
    return HTTPException(status_code=404, detail=detail)


@router.get("")
async def list_tasks(
    service: ChecklistService = Depends(get_checklist_service),
) -> dict[str, Any]:
    """Return the open tasks of the active view plus its completed tasks."""

    return {
        "currentList": service.store.current_list_id,
        "smartList": service.smart_list.value if service.smart_list else None,
        "searchQuery": service.search_query,
        "tagFilter": service.tag_filter,
        "tasks": [task.to_dict() for task in service.filtered_tasks()],
        "archived": [task.to_dict() for task in service.filtered_archived()],
    }


@router.get("/tags")
async def list_tags(
    service: ChecklistService = Depends(get_checklist_service),
) -> list[str]:
    return service.store.all_tags()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_task(
    payload: TaskCreatePayload,
    service: ChecklistService = Depends(get_checklist_service),
) -> dict[str, Any]:
    try:
        task = await service.add_task(payload.text, **payload.to_store_kwargs())
    except TaskValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    if task is None:
        raise _not_found("List not found")
    return task.to_dict()


@router.post("/quick-add", status_code=status.HTTP_201_CREATED)
async def quick_add_task(
    payload: QuickAddPayload,
    service: ChecklistService = Depends(get_checklist_service),
) -> dict[str, Any]:
    if not service.settings.enable_quick_capture:
        raise HTTPException(status_code=403, detail="Quick capture is disabled")
    try:
        task = await service.quick_add(payload.text, payload.list_id)
    except TaskValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    if task is None:
        raise _not_found("List not found")
    return task.to_dict()


@router.post("/undo")
async def undo_last_action(
    service: ChecklistService = Depends(get_checklist_service),
) -> dict[str, Any]:
    try:
        replay = await service.undo()
    except OperationInFlightError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    if replay is None:
        return {"applied": False, "action": None, "message": "Nothing to undo"}
    return {
        "applied": replay.applied,
        "action": replay.entry.action.value,
        "message": replay.message,
    }


@router.delete("/archived")
async def clear_archived_tasks(
    service: ChecklistService = Depends(get_checklist_service),
) -> dict[str, int]:
    cleared = await service.clear_archived()
    return {"cleared": len(cleared)}


@router.patch("/{task_id}")
async def update_task(
    task_id: str,
    payload: TaskUpdatePayload,
    service: ChecklistService = Depends(get_checklist_service),
) -> dict[str, Any]:
    try:
        task = await service.edit_task(task_id, payload.to_changes())
    except TaskValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    if task is None:
        raise _not_found()
    return task.to_dict()


@router.delete("/{task_id}")
async def delete_task(
    task_id: str,
    service: ChecklistService = Depends(get_checklist_service),
) -> dict[str, Any]:
    task = await service.delete_task(task_id)
    if task is None:
        task = await service.delete_archived_task(task_id)
    if task is None:
        raise _not_found()
    return task.to_dict()


@router.post("/{task_id}/complete")
async def complete_task(
    task_id: str,
    service: ChecklistService = Depends(get_checklist_service),
) -> dict[str, Any]:
    if task_id in service.in_flight:
        raise HTTPException(status_code=409, detail="Task completion already in progress")
    result = await service.complete_task(task_id)
    if result is None:
        raise _not_found()
    return {
        "task": result.task.to_dict(),
        "spawned": result.spawned.to_dict() if result.spawned else None,
    }


@router.post("/{task_id}/uncomplete")
async def uncomplete_task(
    task_id: str,
    service: ChecklistService = Depends(get_checklist_service),
) -> dict[str, Any]:
    task = await service.uncomplete_task(task_id)
    if task is None:
        raise _not_found()
    return task.to_dict()


@router.post("/{task_id}/move")
async def move_task(
    task_id: str,
    payload: MoveTaskPayload,
    service: ChecklistService = Depends(get_checklist_service),
) -> dict[str, bool]:
    if not await service.move_task_to_list(task_id, payload.target_list_id):
        raise _not_found("Task or target list not found")
    return {"moved": True}


@router.post("/{task_id}/priority")
async def cycle_task_priority(
    task_id: str,
    service: ChecklistService = Depends(get_checklist_service),
) -> dict[str, str]:
    priority = await service.cycle_priority(task_id)
    if priority is None:
        raise _not_found()
    return {"priority": priority.value}


@router.post("/{task_id}/reorder")
async def reorder_task(
    task_id: str,
    payload: ReorderTaskPayload,
    service: ChecklistService = Depends(get_checklist_service),
) -> dict[str, bool]:
    if not await service.reorder_task(task_id, payload.target_id):
        raise HTTPException(
            status_code=400,
            detail="Tasks can only be reordered within the same list",
        )
    return {"reordered": True}


@router.post("/{task_id}/subtasks", status_code=status.HTTP_201_CREATED)
async def add_subtask(
    task_id: str,
    payload: SubtaskCreatePayload,
    service: ChecklistService = Depends(get_checklist_service),
) -> dict[str, Any]:
    try:
        subtask = await service.add_subtask(task_id, payload.text)
    except TaskValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    if subtask is None:
        raise _not_found()
    return subtask.to_dict()


@router.post("/{task_id}/subtasks/{subtask_id}/toggle")
async def toggle_subtask(
    task_id: str,
    subtask_id: str,
    service: ChecklistService = Depends(get_checklist_service),
) -> dict[str, bool]:
    completed = await service.toggle_subtask(task_id, subtask_id)
    if completed is None:
        raise _not_found("Subtask not found")
    return {"completed": completed}


@router.delete("/{task_id}/subtasks/{subtask_id}")
async def delete_subtask(
    task_id: str,
    subtask_id: str,
    service: ChecklistService = Depends(get_checklist_service),
) -> dict[str, bool]:
    if not await service.delete_subtask(task_id, subtask_id):
        raise _not_found("Subtask not found")
    return {"deleted": True}


__all__ = ["get_checklist_service", "router"]
