"""
Principal and verb model for access decisions.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any
from uuid import UUID


class Role(str, enum.Enum):
    """Global, organization-wide user role."""

    admin = "admin"
    member = "member"


class Action(str, enum.Enum):
    """Verb being authorized, independent of the resource type."""

    read = "read"
    create = "create"
    update = "update"
    delete = "delete"
    manage_members = "manage_members"
    assign_task = "assign_task"
    promote = "promote"


@dataclass(frozen=True, slots=True)
class Identity:
    """The authenticated actor for one request."""

    id: UUID
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role is Role.admin

    @classmethod
    def from_user(cls, user: Any) -> Identity:
        """Build an identity from anything exposing ``id`` and ``role``."""
        return cls(id=user.id, role=Role(user.role))
