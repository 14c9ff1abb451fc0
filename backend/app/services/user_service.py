"""
User account business logic.

Account operations go through the same policy engine as projects and tasks:
users may read and edit their own account, everything else is admin-only.
"""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.authz.enforcement import AccessGuard
from app.authz.identity import Action, Identity, Role
from app.authz.loader import SnapshotLoader
from app.authz.policy import ProjectFilter
from app.models.user import User
from app.schemas.project import ProjectListResponse
from app.schemas.task import CommentListResponse, TaskListResponse
from app.schemas.user import UserListResponse, UserResponse, UserUpdateRequest
from app.services.comment_service import CommentService
from app.services.project_service import ProjectService
from app.services.task_service import TaskService

logger = logging.getLogger(__name__)


class UserService:
    """Handles all user account operations."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self.guard = AccessGuard(SnapshotLoader(db))

    async def get_me(self, identity: Identity) -> UserResponse:
        return await self.get_user(identity, identity.id)

    async def list_users(
        self, identity: Identity, skip: int = 0, limit: int = 50
    ) -> UserListResponse:
        """The user directory. Admin only."""
        await self.guard.user(identity, None, Action.read)

        total = (await self.db.execute(select(func.count(User.id)))).scalar_one()
        result = await self.db.execute(
            select(User).order_by(User.created_at, User.email).offset(skip).limit(limit)
        )
        users = [UserResponse.model_validate(u) for u in result.scalars().all()]
        return UserListResponse(users=users, total=total)

    async def get_user(self, identity: Identity, user_id: UUID) -> UserResponse:
        await self.guard.user(identity, user_id, Action.read)
        return UserResponse.model_validate(await self._get_user(user_id))

    async def update_user(
        self, identity: Identity, user_id: UUID, data: UserUpdateRequest
    ) -> UserResponse:
        await self.guard.user(identity, user_id, Action.update)
        user = await self._get_user(user_id)

        if data.email is not None and data.email != user.email:
            existing = await self.db.execute(
                select(User.id).where(User.email == data.email, User.id != user_id)
            )
            if existing.scalar_one_or_none() is not None:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail={"code": "EMAIL_TAKEN", "message": "Email is already in use"},
                )
            user.email = data.email
        if data.first_name is not None:
            user.first_name = data.first_name
        if data.last_name is not None:
            user.last_name = data.last_name

        await self.db.flush()
        return UserResponse.model_validate(await self._get_user(user_id, refresh=True))

    async def delete_user(self, identity: Identity, user_id: UUID) -> None:
        """
        Delete an account. Projects the user created go with it; tasks
        assigned to them become unassigned.
        """
        await self.guard.user(identity, user_id, Action.delete)
        user = await self._get_user(user_id)
        await self.db.delete(user)
        await self.db.flush()
        logger.info("User %s deleted by %s", user_id, identity.id)

    async def promote_user(self, identity: Identity, user_id: UUID) -> UserResponse:
        """Grant the admin role. The only role-escalation path; idempotent."""
        await self.guard.user(identity, user_id, Action.promote)
        user = await self._get_user(user_id)
        if user.role is not Role.admin:
            user.role = Role.admin
            await self.db.flush()
            logger.info("User %s promoted to admin by %s", user_id, identity.id)
        return UserResponse.model_validate(await self._get_user(user_id, refresh=True))

    # -----------------------------------------------------------------------
    # Related resources
    # -----------------------------------------------------------------------

    async def list_user_projects(self, identity: Identity, user_id: UUID) -> ProjectListResponse:
        """Projects the user created or belongs to."""
        await self.guard.user(identity, user_id, Action.read)
        return await ProjectService(self.db).projects_matching(ProjectFilter.for_user(user_id))

    async def list_user_tasks(
        self, identity: Identity, user_id: UUID, skip: int = 0, limit: int = 25
    ) -> TaskListResponse:
        await self.guard.user(identity, user_id, Action.read)
        return await TaskService(self.db).list_assigned(user_id, skip=skip, limit=limit)

    async def list_user_comments(self, identity: Identity, user_id: UUID) -> CommentListResponse:
        await self.guard.user(identity, user_id, Action.read)
        return await CommentService(self.db).list_by_author(user_id)

    async def _get_user(self, user_id: UUID, refresh: bool = False) -> User:
        stmt = select(User).where(User.id == user_id)
        if refresh:
            stmt = stmt.execution_options(populate_existing=True)
        user = (await self.db.execute(stmt)).scalar_one_or_none()
        if user is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail={"code": "USER_NOT_FOUND", "message": "User not found"},
            )
        return user
