from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from app.schemas.user import UserSummaryResponse


class ProjectCreateRequest(BaseModel):
    name: str = Field(min_length=2, max_length=200)
    description: str | None = None
    member_ids: list[UUID] = Field(default_factory=list)


class ProjectUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=2, max_length=200)
    description: str | None = None


class ProjectResponse(BaseModel):
    id: UUID
    name: str
    description: str | None
    created_by: UUID
    created_at: datetime
    updated_at: datetime
    creator: UserSummaryResponse | None = None
    members: list[UserSummaryResponse] = Field(default_factory=list)
    task_count: int = 0

    model_config = {"from_attributes": True}


class ProjectListResponse(BaseModel):
    projects: list[ProjectResponse]
    total: int


class ProjectMembersRequest(BaseModel):
    """Request body for POST /projects/{project_id}/members."""

    user_ids: list[UUID] = Field(min_length=1)


class ProjectMembersResponse(BaseModel):
    project_id: UUID
    creator: UserSummaryResponse
    members: list[UserSummaryResponse]
    total: int
