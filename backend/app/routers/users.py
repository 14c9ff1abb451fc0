"""
User account endpoints.

Self-service reads and edits, plus admin-only directory, deletion and
promotion.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.authz.identity import Identity
from app.core.database import get_db
from app.core.dependencies import get_current_identity
from app.schemas.common import MessageResponse
from app.schemas.project import ProjectListResponse
from app.schemas.task import CommentListResponse, TaskListResponse
from app.schemas.user import UserListResponse, UserResponse, UserUpdateRequest
from app.services.user_service import UserService

router = APIRouter()


def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db=db)


@router.get("/users/me", response_model=UserResponse, summary="Current user")
async def get_me(
    identity: Identity = Depends(get_current_identity),
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    return await service.get_me(identity)


@router.get("/users", response_model=UserListResponse, summary="User directory (admin)")
async def list_users(
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
    identity: Identity = Depends(get_current_identity),
    service: UserService = Depends(get_user_service),
) -> UserListResponse:
    return await service.list_users(identity, skip=skip, limit=limit)


@router.get("/users/{user_id}", response_model=UserResponse, summary="Get a user")
async def get_user(
    user_id: UUID,
    identity: Identity = Depends(get_current_identity),
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    return await service.get_user(identity, user_id)


@router.patch("/users/{user_id}", response_model=UserResponse, summary="Update a user")
async def update_user(
    user_id: UUID,
    data: UserUpdateRequest,
    identity: Identity = Depends(get_current_identity),
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    return await service.update_user(identity, user_id, data)


@router.delete("/users/{user_id}", response_model=MessageResponse, summary="Delete a user (admin)")
async def delete_user(
    user_id: UUID,
    identity: Identity = Depends(get_current_identity),
    service: UserService = Depends(get_user_service),
) -> MessageResponse:
    await service.delete_user(identity, user_id)
    return MessageResponse(message="User deleted")


@router.post(
    "/users/{user_id}/promote",
    response_model=UserResponse,
    summary="Promote a user to admin (admin)",
)
async def promote_user(
    user_id: UUID,
    identity: Identity = Depends(get_current_identity),
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    return await service.promote_user(identity, user_id)


# ---------------------------------------------------------------------------
# Related resources
# ---------------------------------------------------------------------------

@router.get(
    "/users/{user_id}/projects",
    response_model=ProjectListResponse,
    summary="Projects a user created or belongs to",
)
async def list_user_projects(
    user_id: UUID,
    identity: Identity = Depends(get_current_identity),
    service: UserService = Depends(get_user_service),
) -> ProjectListResponse:
    return await service.list_user_projects(identity, user_id)


@router.get(
    "/users/{user_id}/tasks",
    response_model=TaskListResponse,
    summary="Tasks assigned to a user",
)
async def list_user_tasks(
    user_id: UUID,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=25, ge=1, le=100),
    identity: Identity = Depends(get_current_identity),
    service: UserService = Depends(get_user_service),
) -> TaskListResponse:
    return await service.list_user_tasks(identity, user_id, skip=skip, limit=limit)


@router.get(
    "/users/{user_id}/comments",
    response_model=CommentListResponse,
    summary="Comments written by a user",
)
async def list_user_comments(
    user_id: UUID,
    identity: Identity = Depends(get_current_identity),
    service: UserService = Depends(get_user_service),
) -> CommentListResponse:
    return await service.list_user_comments(identity, user_id)
