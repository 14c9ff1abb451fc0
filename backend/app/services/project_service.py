"""
Project business logic.

Handles project CRUD and membership. Every operation is guarded by the
policy engine before it touches persisted state.
"""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import Select, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.authz.enforcement import AccessGuard
from app.authz.identity import Action, Identity
from app.authz.loader import SnapshotLoader, visible_project_clause
from app.authz.policy import ProjectFilter, visibility_predicate
from app.models.project import Project, project_members
from app.models.task import Task
from app.models.user import User
from app.schemas.project import (
    ProjectCreateRequest,
    ProjectListResponse,
    ProjectMembersRequest,
    ProjectMembersResponse,
    ProjectResponse,
    ProjectUpdateRequest,
)
from app.schemas.user import UserSummaryResponse

logger = logging.getLogger(__name__)


class ProjectService:
    """Handles all project and membership operations."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self.guard = AccessGuard(SnapshotLoader(db))

    # -----------------------------------------------------------------------
    # List / Read
    # -----------------------------------------------------------------------

    async def list_projects(self, identity: Identity) -> ProjectListResponse:
        """Projects visible to the caller, newest first."""
        return await self.projects_matching(visibility_predicate(identity))

    async def projects_matching(self, project_filter: ProjectFilter) -> ProjectListResponse:
        stmt = (
            self._project_query()
            .where(visible_project_clause(project_filter))
            .order_by(Project.created_at.desc())
        )
        projects = list((await self.db.execute(stmt)).scalars().all())
        counts = await self._task_counts([p.id for p in projects])
        return ProjectListResponse(
            projects=[self._to_response(p, counts.get(p.id, 0)) for p in projects],
            total=len(projects),
        )

    async def get_project(self, identity: Identity, project_id: UUID) -> ProjectResponse:
        await self.guard.project(identity, project_id, Action.read)
        return await self._project_response(project_id)

    # -----------------------------------------------------------------------
    # Create / Update / Delete
    # -----------------------------------------------------------------------

    async def create_project(
        self, identity: Identity, data: ProjectCreateRequest
    ) -> ProjectResponse:
        self.guard.new_project(identity)
        members = await self._get_users(data.member_ids)

        project = Project(
            name=data.name,
            description=data.description,
            created_by=identity.id,
        )
        project.members = members
        self.db.add(project)
        await self.db.flush()

        logger.info("Project %s created by %s", project.id, identity.id)
        return await self._project_response(project.id)

    async def update_project(
        self, identity: Identity, project_id: UUID, data: ProjectUpdateRequest
    ) -> ProjectResponse:
        await self.guard.project(identity, project_id, Action.update)
        project = await self._get_project(project_id)

        if data.name is not None:
            project.name = data.name
        if "description" in data.model_fields_set:
            project.description = data.description
        await self.db.flush()
        return await self._project_response(project_id)

    async def delete_project(self, identity: Identity, project_id: UUID) -> None:
        """Delete a project together with its tasks and their comments."""
        await self.guard.project(identity, project_id, Action.delete)
        project = await self._get_project(project_id)
        await self.db.delete(project)
        await self.db.flush()
        logger.info("Project %s deleted by %s", project_id, identity.id)

    # -----------------------------------------------------------------------
    # Members
    # -----------------------------------------------------------------------

    async def list_members(
        self, identity: Identity, project_id: UUID
    ) -> ProjectMembersResponse:
        await self.guard.project(identity, project_id, Action.read)
        return await self._members_response(project_id)

    async def add_members(
        self, identity: Identity, project_id: UUID, data: ProjectMembersRequest
    ) -> ProjectMembersResponse:
        """Add users to a project. Existing members are left as they are."""
        snapshot = await self.guard.project(identity, project_id, Action.manage_members)
        users = await self._get_users(data.user_ids)

        project = await self._get_project(project_id, with_members=True)
        for user in users:
            if user.id not in snapshot.member_ids:
                project.members.append(user)
        await self.db.flush()
        return await self._members_response(project_id)

    async def remove_member(
        self, identity: Identity, project_id: UUID, user_id: UUID
    ) -> ProjectMembersResponse:
        """
        Remove one member. Removing a non-member is a no-op.

        Tasks assigned to the user stay assigned to them.
        """
        await self.guard.project(identity, project_id, Action.manage_members)
        await self._get_users([user_id])

        await self.db.execute(
            delete(project_members).where(
                project_members.c.project_id == project_id,
                project_members.c.user_id == user_id,
            )
        )
        await self.db.flush()
        logger.info("User %s removed from project %s by %s", user_id, project_id, identity.id)
        return await self._members_response(project_id)

    # -----------------------------------------------------------------------
    # Helpers
    # -----------------------------------------------------------------------

    def _project_query(self) -> Select[tuple[Project]]:
        return (
            select(Project)
            .options(selectinload(Project.creator), selectinload(Project.members))
            .execution_options(populate_existing=True)
        )

    async def _get_project(self, project_id: UUID, with_members: bool = False) -> Project:
        stmt = select(Project).where(Project.id == project_id)
        if with_members:
            stmt = stmt.options(selectinload(Project.members)).execution_options(
                populate_existing=True
            )
        project = (await self.db.execute(stmt)).scalar_one_or_none()
        if project is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail={"code": "PROJECT_NOT_FOUND", "message": "Project not found"},
            )
        return project

    async def _get_users(self, user_ids: list[UUID]) -> list[User]:
        """Resolve every id to a user, or 404 if any is unknown."""
        wanted = list(dict.fromkeys(user_ids))
        if not wanted:
            return []
        result = await self.db.execute(select(User).where(User.id.in_(wanted)))
        users = {u.id: u for u in result.scalars().all()}
        if len(users) != len(wanted):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail={"code": "USER_NOT_FOUND", "message": "User not found"},
            )
        return [users[uid] for uid in wanted]

    async def _task_counts(self, project_ids: list[UUID]) -> dict[UUID, int]:
        if not project_ids:
            return {}
        result = await self.db.execute(
            select(Task.project_id, func.count(Task.id))
            .where(Task.project_id.in_(project_ids))
            .group_by(Task.project_id)
        )
        return {project_id: count for project_id, count in result.all()}

    async def _project_response(self, project_id: UUID) -> ProjectResponse:
        result = await self.db.execute(self._project_query().where(Project.id == project_id))
        project = result.scalar_one()
        counts = await self._task_counts([project_id])
        return self._to_response(project, counts.get(project_id, 0))

    async def _members_response(self, project_id: UUID) -> ProjectMembersResponse:
        result = await self.db.execute(self._project_query().where(Project.id == project_id))
        project = result.scalar_one()
        members = [UserSummaryResponse.model_validate(u) for u in project.members]
        return ProjectMembersResponse(
            project_id=project.id,
            creator=UserSummaryResponse.model_validate(project.creator),
            members=members,
            total=len(members),
        )

    @staticmethod
    def _to_response(project: Project, task_count: int) -> ProjectResponse:
        return ProjectResponse(
            id=project.id,
            name=project.name,
            description=project.description,
            created_by=project.created_by,
            created_at=project.created_at,
            updated_at=project.updated_at,
            creator=UserSummaryResponse.model_validate(project.creator),
            members=[UserSummaryResponse.model_validate(u) for u in project.members],
            task_count=task_count,
        )
