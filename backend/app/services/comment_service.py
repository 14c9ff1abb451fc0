"""
Comment business logic.

Reading and writing comments follows the owning project's membership;
editing and deleting one is reserved to its author (or an admin).
"""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.authz.enforcement import AccessGuard
from app.authz.identity import Action, Identity
from app.authz.loader import SnapshotLoader
from app.models.comment import Comment
from app.schemas.task import (
    CommentCreateRequest,
    CommentListResponse,
    CommentResponse,
    CommentUpdateRequest,
)

logger = logging.getLogger(__name__)


class CommentService:
    """Handles all comment operations."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self.guard = AccessGuard(SnapshotLoader(db))

    async def list_comments(self, identity: Identity, task_id: UUID) -> CommentListResponse:
        """List comments for a task, oldest first."""
        await self.guard.task_comments(identity, task_id, Action.read)
        return await self._list(
            self._comment_query().where(Comment.task_id == task_id)
        )

    async def list_by_author(self, author_id: UUID) -> CommentListResponse:
        """Comments written by ``author_id``. Callers guard the user first."""
        return await self._list(
            self._comment_query().where(Comment.author_id == author_id)
        )

    async def create_comment(
        self, identity: Identity, task_id: UUID, data: CommentCreateRequest
    ) -> CommentResponse:
        await self.guard.task_comments(identity, task_id, Action.create)

        comment = Comment(task_id=task_id, author_id=identity.id, content=data.content)
        self.db.add(comment)
        await self.db.flush()

        logger.info("Comment %s added to task %s by %s", comment.id, task_id, identity.id)
        return await self._comment_response(comment.id)

    async def get_comment(self, identity: Identity, comment_id: UUID) -> CommentResponse:
        await self.guard.comment(identity, comment_id, Action.read)
        return await self._comment_response(comment_id)

    async def update_comment(
        self, identity: Identity, comment_id: UUID, data: CommentUpdateRequest
    ) -> CommentResponse:
        await self.guard.comment(identity, comment_id, Action.update)
        comment = await self._get_comment(comment_id)
        comment.content = data.content
        await self.db.flush()
        return await self._comment_response(comment_id)

    async def delete_comment(self, identity: Identity, comment_id: UUID) -> None:
        await self.guard.comment(identity, comment_id, Action.delete)
        comment = await self._get_comment(comment_id)
        await self.db.delete(comment)
        await self.db.flush()
        logger.info("Comment %s deleted by %s", comment_id, identity.id)

    # -----------------------------------------------------------------------
    # Helpers
    # -----------------------------------------------------------------------

    def _comment_query(self) -> Select[tuple[Comment]]:
        return (
            select(Comment)
            .options(selectinload(Comment.author))
            .execution_options(populate_existing=True)
        )

    async def _list(self, stmt: Select[tuple[Comment]]) -> CommentListResponse:
        result = await self.db.execute(stmt.order_by(Comment.created_at, Comment.id))
        comments = [CommentResponse.model_validate(c) for c in result.scalars().all()]
        return CommentListResponse(comments=comments, total=len(comments))

    async def _get_comment(self, comment_id: UUID) -> Comment:
        result = await self.db.execute(select(Comment).where(Comment.id == comment_id))
        comment = result.scalar_one_or_none()
        if comment is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail={"code": "COMMENT_NOT_FOUND", "message": "Comment not found"},
            )
        return comment

    async def _comment_response(self, comment_id: UUID) -> CommentResponse:
        result = await self.db.execute(
            self._comment_query().where(Comment.id == comment_id)
        )
        return CommentResponse.model_validate(result.scalar_one())
