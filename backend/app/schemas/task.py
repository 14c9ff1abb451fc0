"""
Task schemas.

Request/response models for task CRUD, assignment, status and comment
endpoints.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from app.models.task import TaskStatus
from app.schemas.user import UserSummaryResponse


# ---------------------------------------------------------------------------
# Task Create / Update
# ---------------------------------------------------------------------------

class TaskCreateRequest(BaseModel):
    """Request body for POST /tasks."""

    project_id: UUID
    title: str = Field(min_length=1, max_length=500)
    description: str | None = None
    status: TaskStatus = TaskStatus.todo
    assignee_id: UUID | None = None


class TaskUpdateRequest(BaseModel):
    """
    Request body for PATCH /tasks/{task_id}.

    Only fields present in the body are applied; an explicit
    ``"assignee_id": null`` unassigns the task.
    """

    title: str | None = Field(default=None, min_length=1, max_length=500)
    description: str | None = None
    status: TaskStatus | None = None
    assignee_id: UUID | None = None


class TaskStatusUpdateRequest(BaseModel):
    """Request body for PATCH /tasks/{task_id}/status."""

    status: TaskStatus


class TaskAssignRequest(BaseModel):
    """Request body for PUT /tasks/{task_id}/assignee."""

    assignee_id: UUID


# ---------------------------------------------------------------------------
# Task responses
# ---------------------------------------------------------------------------

class ProjectSummaryResponse(BaseModel):
    """Compact project info embedded in task responses."""

    id: UUID
    name: str

    model_config = {"from_attributes": True}


class TaskResponse(BaseModel):
    id: UUID
    project_id: UUID
    title: str
    description: str | None
    status: TaskStatus
    assignee_id: UUID | None
    created_at: datetime
    updated_at: datetime
    project: ProjectSummaryResponse | None = None
    assignee: UserSummaryResponse | None = None
    comment_count: int = 0

    model_config = {"from_attributes": True}


class TaskListResponse(BaseModel):
    """Response for GET /tasks."""

    tasks: list[TaskResponse]
    total: int
    skip: int
    limit: int


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------

class CommentCreateRequest(BaseModel):
    """Request body for POST /tasks/{task_id}/comments."""

    content: str = Field(min_length=1, max_length=10000)


class CommentUpdateRequest(BaseModel):
    """Request body for PATCH /comments/{comment_id}."""

    content: str = Field(min_length=1, max_length=10000)


class CommentResponse(BaseModel):
    id: UUID
    task_id: UUID
    author_id: UUID
    content: str
    created_at: datetime
    updated_at: datetime
    author: UserSummaryResponse | None = None

    model_config = {"from_attributes": True}


class CommentListResponse(BaseModel):
    comments: list[CommentResponse]
    total: int
