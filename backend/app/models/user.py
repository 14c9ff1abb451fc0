"""
User ORM model.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Enum, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.authz.identity import Role
from app.models.base import Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from app.models.comment import Comment
    from app.models.project import Project
    from app.models.task import Task


class User(Base, UUIDMixin, TimestampMixin):
    """An account with one organization-wide role."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    role: Mapped[Role] = mapped_column(
        Enum(Role, name="user_role"),
        nullable=False,
        default=Role.member,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Relationships. Deletes are left to the database's ON DELETE rules.
    projects_created: Mapped[list[Project]] = relationship(
        "Project", back_populates="creator", passive_deletes=True
    )
    assigned_tasks: Mapped[list[Task]] = relationship(
        "Task", back_populates="assignee", passive_deletes=True
    )
    comments: Mapped[list[Comment]] = relationship(
        "Comment", back_populates="author", passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r} role={self.role.value}>"
