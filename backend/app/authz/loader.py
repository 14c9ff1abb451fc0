"""
Resource snapshot loader.

Reads the minimal ownership and membership facts for one authorization
decision straight from the current transaction. Task and comment snapshots
always resolve through to the owning project's creator and member set.
"""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import ColumnElement, or_, select, true
from sqlalchemy.ext.asyncio import AsyncSession

from app.authz.errors import ResourceNotFoundError
from app.authz.policy import ProjectFilter
from app.authz.snapshots import (
    CommentSnapshot,
    ProjectSnapshot,
    TaskSnapshot,
    UserSnapshot,
)
from app.models.comment import Comment
from app.models.project import Project, project_members
from app.models.task import Task
from app.models.user import User

logger = logging.getLogger(__name__)


def visible_project_clause(project_filter: ProjectFilter) -> ColumnElement[bool]:
    """Translate a ProjectFilter into a WHERE clause on ``projects``."""
    if project_filter.is_unrestricted:
        return true()
    user_id = project_filter.user_id
    return or_(
        Project.created_by == user_id,
        Project.id.in_(
            select(project_members.c.project_id).where(
                project_members.c.user_id == user_id
            )
        ),
    )


class SnapshotLoader:
    """Builds snapshots from persisted state. Nothing is cached."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def load_project(self, project_id: UUID) -> ProjectSnapshot:
        result = await self.db.execute(
            select(Project.id, Project.created_by).where(Project.id == project_id)
        )
        row = result.one_or_none()
        if row is None:
            raise ResourceNotFoundError("project", project_id)
        return ProjectSnapshot(
            id=row.id,
            creator_id=row.created_by,
            member_ids=await self._member_ids(row.id),
        )

    async def load_task(self, task_id: UUID) -> TaskSnapshot:
        result = await self.db.execute(
            select(Task.id, Task.project_id, Task.assignee_id).where(Task.id == task_id)
        )
        row = result.one_or_none()
        if row is None:
            raise ResourceNotFoundError("task", task_id)
        return TaskSnapshot(
            id=row.id,
            project=await self.load_project(row.project_id),
            assignee_id=row.assignee_id,
        )

    async def load_comment(self, comment_id: UUID) -> CommentSnapshot:
        result = await self.db.execute(
            select(Comment.id, Comment.author_id, Comment.task_id).where(
                Comment.id == comment_id
            )
        )
        row = result.one_or_none()
        if row is None:
            raise ResourceNotFoundError("comment", comment_id)
        return CommentSnapshot(
            id=row.id,
            author_id=row.author_id,
            task=await self.load_task(row.task_id),
        )

    async def load_user(self, user_id: UUID) -> UserSnapshot:
        result = await self.db.execute(select(User.id).where(User.id == user_id))
        found = result.scalar_one_or_none()
        if found is None:
            raise ResourceNotFoundError("user", user_id)
        return UserSnapshot(id=found)

    async def _member_ids(self, project_id: UUID) -> frozenset[UUID]:
        result = await self.db.execute(
            select(project_members.c.user_id).where(
                project_members.c.project_id == project_id
            )
        )
        return frozenset(result.scalars().all())
