"""
Task business logic.

Handles task CRUD, status changes and (re)assignment. Assignment always
checks that the target user belongs to the task's project, for admins too.
"""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.authz.enforcement import AccessGuard
from app.authz.identity import Action, Identity
from app.authz.loader import SnapshotLoader, visible_project_clause
from app.authz.policy import visibility_predicate
from app.models.comment import Comment
from app.models.project import Project
from app.models.task import Task, TaskStatus
from app.schemas.task import (
    ProjectSummaryResponse,
    TaskAssignRequest,
    TaskCreateRequest,
    TaskListResponse,
    TaskResponse,
    TaskStatusUpdateRequest,
    TaskUpdateRequest,
)
from app.schemas.user import UserSummaryResponse

logger = logging.getLogger(__name__)


class TaskService:
    """Handles all task operations."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self.guard = AccessGuard(SnapshotLoader(db))

    # -----------------------------------------------------------------------
    # List Tasks
    # -----------------------------------------------------------------------

    async def list_tasks(
        self,
        identity: Identity,
        project_id: UUID | None = None,
        status_filter: TaskStatus | None = None,
        assignee_id: UUID | None = None,
        skip: int = 0,
        limit: int = 25,
    ) -> TaskListResponse:
        """
        List tasks with optional filters.

        With ``project_id`` the caller needs Task/Read on that project;
        without it the listing covers every project the caller can see.
        """
        stmt = select(Task)
        if project_id is not None:
            await self.guard.project_tasks(identity, project_id, Action.read)
            stmt = stmt.where(Task.project_id == project_id)
        else:
            visible = select(Project.id).where(
                visible_project_clause(visibility_predicate(identity))
            )
            stmt = stmt.where(Task.project_id.in_(visible))

        if status_filter is not None:
            stmt = stmt.where(Task.status == status_filter)
        if assignee_id is not None:
            stmt = stmt.where(Task.assignee_id == assignee_id)

        return await self._paginate(stmt, skip, limit)

    async def list_assigned(self, user_id: UUID, skip: int = 0, limit: int = 25) -> TaskListResponse:
        """Tasks currently assigned to ``user_id``. Callers guard the user first."""
        stmt = select(Task).where(Task.assignee_id == user_id)
        return await self._paginate(stmt, skip, limit)

    # -----------------------------------------------------------------------
    # Create / Read
    # -----------------------------------------------------------------------

    async def create_task(self, identity: Identity, data: TaskCreateRequest) -> TaskResponse:
        snapshot = await self.guard.new_task(identity, data.project_id)
        if data.assignee_id is not None:
            await self.guard.enforce_assignee(snapshot.project, data.assignee_id)

        task = Task(
            project_id=data.project_id,
            title=data.title,
            description=data.description,
            status=data.status,
            assignee_id=data.assignee_id,
        )
        self.db.add(task)
        await self.db.flush()

        logger.info("Task %s created in project %s by %s", task.id, task.project_id, identity.id)
        return await self._task_response(task.id)

    async def get_task(self, identity: Identity, task_id: UUID) -> TaskResponse:
        await self.guard.task(identity, task_id, Action.read)
        return await self._task_response(task_id)

    # -----------------------------------------------------------------------
    # Update
    # -----------------------------------------------------------------------

    async def update_task(
        self, identity: Identity, task_id: UUID, data: TaskUpdateRequest
    ) -> TaskResponse:
        """
        Partial update. Moving the task to a different assignee additionally
        requires AssignTask and a target who belongs to the project.
        """
        snapshot = await self.guard.task(identity, task_id, Action.update)
        fields = data.model_fields_set

        if (
            "assignee_id" in fields
            and data.assignee_id is not None
            and data.assignee_id != snapshot.assignee_id
        ):
            self.guard.enforce(identity, snapshot, Action.assign_task)
            await self.guard.enforce_assignee(snapshot.project, data.assignee_id)

        task = await self._get_task(task_id)
        if data.title is not None:
            task.title = data.title
        if "description" in fields:
            task.description = data.description
        if data.status is not None:
            task.status = data.status
        if "assignee_id" in fields:
            task.assignee_id = data.assignee_id
        await self.db.flush()
        return await self._task_response(task_id)

    async def update_status(
        self, identity: Identity, task_id: UUID, data: TaskStatusUpdateRequest
    ) -> TaskResponse:
        await self.guard.task(identity, task_id, Action.update)
        task = await self._get_task(task_id)
        task.status = data.status
        await self.db.flush()
        return await self._task_response(task_id)

    async def assign_task(
        self, identity: Identity, task_id: UUID, data: TaskAssignRequest
    ) -> TaskResponse:
        snapshot = await self.guard.task(identity, task_id, Action.assign_task)
        await self.guard.enforce_assignee(snapshot.project, data.assignee_id)

        task = await self._get_task(task_id)
        task.assignee_id = data.assignee_id
        await self.db.flush()
        logger.info("Task %s assigned to %s by %s", task_id, data.assignee_id, identity.id)
        return await self._task_response(task_id)

    async def unassign_task(self, identity: Identity, task_id: UUID) -> TaskResponse:
        await self.guard.task(identity, task_id, Action.update)
        task = await self._get_task(task_id)
        task.assignee_id = None
        await self.db.flush()
        return await self._task_response(task_id)

    # -----------------------------------------------------------------------
    # Delete
    # -----------------------------------------------------------------------

    async def delete_task(self, identity: Identity, task_id: UUID) -> None:
        await self.guard.task(identity, task_id, Action.delete)
        task = await self._get_task(task_id)
        await self.db.delete(task)
        await self.db.flush()
        logger.info("Task %s deleted by %s", task_id, identity.id)

    # -----------------------------------------------------------------------
    # Helpers
    # -----------------------------------------------------------------------

    async def _get_task(self, task_id: UUID) -> Task:
        result = await self.db.execute(select(Task).where(Task.id == task_id))
        task = result.scalar_one_or_none()
        if task is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail={"code": "TASK_NOT_FOUND", "message": "Task not found"},
            )
        return task

    async def _paginate(
        self, stmt: Select[tuple[Task]], skip: int, limit: int
    ) -> TaskListResponse:
        count_stmt = select(func.count()).select_from(stmt.subquery())
        total = (await self.db.execute(count_stmt)).scalar_one()

        stmt = (
            stmt.options(selectinload(Task.project), selectinload(Task.assignee))
            .execution_options(populate_existing=True)
            .order_by(Task.created_at.desc(), Task.id)
            .offset(skip)
            .limit(limit)
        )
        tasks = list((await self.db.execute(stmt)).scalars().all())
        counts = await self._comment_counts([t.id for t in tasks])

        return TaskListResponse(
            tasks=[self._to_response(t, counts.get(t.id, 0)) for t in tasks],
            total=total,
            skip=skip,
            limit=limit,
        )

    async def _comment_counts(self, task_ids: list[UUID]) -> dict[UUID, int]:
        if not task_ids:
            return {}
        result = await self.db.execute(
            select(Comment.task_id, func.count(Comment.id))
            .where(Comment.task_id.in_(task_ids))
            .group_by(Comment.task_id)
        )
        return {task_id: count for task_id, count in result.all()}

    async def _task_response(self, task_id: UUID) -> TaskResponse:
        result = await self.db.execute(
            select(Task)
            .options(selectinload(Task.project), selectinload(Task.assignee))
            .execution_options(populate_existing=True)
            .where(Task.id == task_id)
        )
        task = result.scalar_one()
        counts = await self._comment_counts([task_id])
        return self._to_response(task, counts.get(task_id, 0))

    @staticmethod
    def _to_response(task: Task, comment_count: int) -> TaskResponse:
        return TaskResponse(
            id=task.id,
            project_id=task.project_id,
            title=task.title,
            description=task.description,
            status=task.status,
            assignee_id=task.assignee_id,
            created_at=task.created_at,
            updated_at=task.updated_at,
            project=ProjectSummaryResponse.model_validate(task.project),
            assignee=(
                UserSummaryResponse.model_validate(task.assignee)
                if task.assignee is not None
                else None
            ),
            comment_count=comment_count,
        )
