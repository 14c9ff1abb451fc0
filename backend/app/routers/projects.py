"""
Project management endpoints.

CRUD operations for projects and their membership.
"""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.authz.identity import Identity
from app.core.database import get_db
from app.core.dependencies import get_current_identity
from app.schemas.common import MessageResponse
from app.schemas.project import (
    ProjectCreateRequest,
    ProjectListResponse,
    ProjectMembersRequest,
    ProjectMembersResponse,
    ProjectResponse,
    ProjectUpdateRequest,
)
from app.services.project_service import ProjectService

router = APIRouter()


def get_project_service(db: AsyncSession = Depends(get_db)) -> ProjectService:
    return ProjectService(db=db)


@router.post(
    "/projects",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new project (admin)",
)
async def create_project(
    data: ProjectCreateRequest,
    identity: Identity = Depends(get_current_identity),
    service: ProjectService = Depends(get_project_service),
) -> ProjectResponse:
    return await service.create_project(identity, data)


@router.get(
    "/projects",
    response_model=ProjectListResponse,
    summary="List projects visible to the current user",
)
async def list_projects(
    identity: Identity = Depends(get_current_identity),
    service: ProjectService = Depends(get_project_service),
) -> ProjectListResponse:
    return await service.list_projects(identity)


@router.get(
    "/projects/{project_id}",
    response_model=ProjectResponse,
    summary="Get project detail",
)
async def get_project(
    project_id: UUID,
    identity: Identity = Depends(get_current_identity),
    service: ProjectService = Depends(get_project_service),
) -> ProjectResponse:
    return await service.get_project(identity, project_id)


@router.patch(
    "/projects/{project_id}",
    response_model=ProjectResponse,
    summary="Update project (admin)",
)
async def update_project(
    project_id: UUID,
    data: ProjectUpdateRequest,
    identity: Identity = Depends(get_current_identity),
    service: ProjectService = Depends(get_project_service),
) -> ProjectResponse:
    return await service.update_project(identity, project_id, data)


@router.delete(
    "/projects/{project_id}",
    response_model=MessageResponse,
    summary="Delete project with its tasks and comments (admin)",
)
async def delete_project(
    project_id: UUID,
    identity: Identity = Depends(get_current_identity),
    service: ProjectService = Depends(get_project_service),
) -> MessageResponse:
    await service.delete_project(identity, project_id)
    return MessageResponse(message="Project deleted")


# ---------------------------------------------------------------------------
# Members
# ---------------------------------------------------------------------------

@router.get(
    "/projects/{project_id}/members",
    response_model=ProjectMembersResponse,
    summary="List project creator and members",
)
async def list_members(
    project_id: UUID,
    identity: Identity = Depends(get_current_identity),
    service: ProjectService = Depends(get_project_service),
) -> ProjectMembersResponse:
    return await service.list_members(identity, project_id)


@router.post(
    "/projects/{project_id}/members",
    response_model=ProjectMembersResponse,
    summary="Add members to a project (admin)",
)
async def add_members(
    project_id: UUID,
    data: ProjectMembersRequest,
    identity: Identity = Depends(get_current_identity),
    service: ProjectService = Depends(get_project_service),
) -> ProjectMembersResponse:
    return await service.add_members(identity, project_id, data)


@router.delete(
    "/projects/{project_id}/members/{user_id}",
    response_model=ProjectMembersResponse,
    summary="Remove a member from a project (admin)",
)
async def remove_member(
    project_id: UUID,
    user_id: UUID,
    identity: Identity = Depends(get_current_identity),
    service: ProjectService = Depends(get_project_service),
) -> ProjectMembersResponse:
    return await service.remove_member(identity, project_id, user_id)
