"""
User schemas.

Request/response models for account and directory endpoints.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from app.authz.identity import Role


class UserSummaryResponse(BaseModel):
    """Compact user info embedded in project, task and comment responses."""

    id: UUID
    first_name: str
    last_name: str
    email: str

    model_config = {"from_attributes": True}


class UserResponse(BaseModel):
    id: UUID
    email: str
    first_name: str
    last_name: str
    role: Role
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class UserListResponse(BaseModel):
    users: list[UserResponse]
    total: int


class UserUpdateRequest(BaseModel):
    """Request body for PATCH /users/{user_id}. Role is not writable here."""

    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    email: EmailStr | None = None
