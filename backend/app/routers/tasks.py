"""
Task management endpoints.

CRUD operations for tasks, status changes and assignment.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.authz.identity import Identity
from app.core.database import get_db
from app.core.dependencies import get_current_identity
from app.models.task import TaskStatus
from app.schemas.common import MessageResponse
from app.schemas.task import (
    TaskAssignRequest,
    TaskCreateRequest,
    TaskListResponse,
    TaskResponse,
    TaskStatusUpdateRequest,
    TaskUpdateRequest,
)
from app.services.task_service import TaskService

router = APIRouter()


def get_task_service(db: AsyncSession = Depends(get_db)) -> TaskService:
    return TaskService(db=db)


# ---------------------------------------------------------------------------
# List / Create
# ---------------------------------------------------------------------------

@router.get(
    "/tasks",
    response_model=TaskListResponse,
    summary="List tasks in visible projects",
)
async def list_tasks(
    project_id: UUID | None = Query(default=None),
    status_filter: TaskStatus | None = Query(default=None, alias="status"),
    assignee_id: UUID | None = Query(default=None),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=25, ge=1, le=100),
    identity: Identity = Depends(get_current_identity),
    service: TaskService = Depends(get_task_service),
) -> TaskListResponse:
    return await service.list_tasks(
        identity,
        project_id=project_id,
        status_filter=status_filter,
        assignee_id=assignee_id,
        skip=skip,
        limit=limit,
    )


@router.post(
    "/tasks",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new task",
)
async def create_task(
    data: TaskCreateRequest,
    identity: Identity = Depends(get_current_identity),
    service: TaskService = Depends(get_task_service),
) -> TaskResponse:
    return await service.create_task(identity, data)


# ---------------------------------------------------------------------------
# Single task
# ---------------------------------------------------------------------------

@router.get(
    "/tasks/{task_id}",
    response_model=TaskResponse,
    summary="Get task detail",
)
async def get_task(
    task_id: UUID,
    identity: Identity = Depends(get_current_identity),
    service: TaskService = Depends(get_task_service),
) -> TaskResponse:
    return await service.get_task(identity, task_id)


@router.patch(
    "/tasks/{task_id}",
    response_model=TaskResponse,
    summary="Update task fields",
)
async def update_task(
    task_id: UUID,
    data: TaskUpdateRequest,
    identity: Identity = Depends(get_current_identity),
    service: TaskService = Depends(get_task_service),
) -> TaskResponse:
    return await service.update_task(identity, task_id, data)


@router.patch(
    "/tasks/{task_id}/status",
    response_model=TaskResponse,
    summary="Change task status",
)
async def update_task_status(
    task_id: UUID,
    data: TaskStatusUpdateRequest,
    identity: Identity = Depends(get_current_identity),
    service: TaskService = Depends(get_task_service),
) -> TaskResponse:
    return await service.update_status(identity, task_id, data)


@router.put(
    "/tasks/{task_id}/assignee",
    response_model=TaskResponse,
    summary="Assign or reassign a task",
)
async def assign_task(
    task_id: UUID,
    data: TaskAssignRequest,
    identity: Identity = Depends(get_current_identity),
    service: TaskService = Depends(get_task_service),
) -> TaskResponse:
    return await service.assign_task(identity, task_id, data)


@router.delete(
    "/tasks/{task_id}/assignee",
    response_model=TaskResponse,
    summary="Unassign a task",
)
async def unassign_task(
    task_id: UUID,
    identity: Identity = Depends(get_current_identity),
    service: TaskService = Depends(get_task_service),
) -> TaskResponse:
    return await service.unassign_task(identity, task_id)


@router.delete(
    "/tasks/{task_id}",
    response_model=MessageResponse,
    summary="Delete a task (admin)",
)
async def delete_task(
    task_id: UUID,
    identity: Identity = Depends(get_current_identity),
    service: TaskService = Depends(get_task_service),
) -> MessageResponse:
    await service.delete_task(identity, task_id)
    return MessageResponse(message="Task deleted")
