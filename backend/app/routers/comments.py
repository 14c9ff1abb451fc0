"""
Comment endpoints.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.authz.identity import Identity
from app.core.database import get_db
from app.core.dependencies import get_current_identity
from app.schemas.common import MessageResponse
from app.schemas.task import (
    CommentCreateRequest,
    CommentListResponse,
    CommentResponse,
    CommentUpdateRequest,
)
from app.services.comment_service import CommentService

router = APIRouter()


def get_comment_service(db: AsyncSession = Depends(get_db)) -> CommentService:
    return CommentService(db=db)


@router.post(
    "/tasks/{task_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a comment to a task",
)
async def create_comment(
    task_id: UUID,
    data: CommentCreateRequest,
    identity: Identity = Depends(get_current_identity),
    service: CommentService = Depends(get_comment_service),
) -> CommentResponse:
    return await service.create_comment(identity, task_id, data)


@router.get(
    "/tasks/{task_id}/comments",
    response_model=CommentListResponse,
    summary="List comments on a task",
)
async def list_comments(
    task_id: UUID,
    identity: Identity = Depends(get_current_identity),
    service: CommentService = Depends(get_comment_service),
) -> CommentListResponse:
    return await service.list_comments(identity, task_id)


@router.get(
    "/comments/{comment_id}",
    response_model=CommentResponse,
    summary="Get a comment",
)
async def get_comment(
    comment_id: UUID,
    identity: Identity = Depends(get_current_identity),
    service: CommentService = Depends(get_comment_service),
) -> CommentResponse:
    return await service.get_comment(identity, comment_id)


@router.patch(
    "/comments/{comment_id}",
    response_model=CommentResponse,
    summary="Edit a comment (author or admin)",
)
async def update_comment(
    comment_id: UUID,
    data: CommentUpdateRequest,
    identity: Identity = Depends(get_current_identity),
    service: CommentService = Depends(get_comment_service),
) -> CommentResponse:
    return await service.update_comment(identity, comment_id, data)


@router.delete(
    "/comments/{comment_id}",
    response_model=MessageResponse,
    summary="Delete a comment (author or admin)",
)
async def delete_comment(
    comment_id: UUID,
    identity: Identity = Depends(get_current_identity),
    service: CommentService = Depends(get_comment_service),
) -> MessageResponse:
    await service.delete_comment(identity, comment_id)
    return MessageResponse(message="Comment deleted")
