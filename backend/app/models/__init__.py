"""
SQLAlchemy ORM models.

All models imported here to ensure they are registered with Base.metadata.
Import order matters: base models before dependent models.
"""

from app.models.base import Base, TimestampMixin, UUIDMixin
from app.models.user import User
from app.models.project import Project, project_members
from app.models.task import Task, TaskStatus
from app.models.comment import Comment

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "User",
    "Project",
    "project_members",
    "Task",
    "TaskStatus",
    "Comment",
]
