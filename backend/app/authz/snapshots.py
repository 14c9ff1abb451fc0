"""
Resource snapshots.

The minimal relational facts needed for one authorization decision. They are
built fresh from persisted state for every check and never cached.

An ``id`` of ``None`` marks a proposed resource: a task or comment about to be
created, a project about to be created, or (for users) the whole directory.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID


@dataclass(frozen=True, slots=True)
class ProjectSnapshot:
    id: UUID | None
    creator_id: UUID
    member_ids: frozenset[UUID] = field(default_factory=frozenset)

    def includes(self, user_id: UUID | None) -> bool:
        """True if ``user_id`` is the creator or a member."""
        if user_id is None:
            return False
        return user_id == self.creator_id or user_id in self.member_ids


@dataclass(frozen=True, slots=True)
class TaskSnapshot:
    id: UUID | None
    project: ProjectSnapshot
    assignee_id: UUID | None = None


@dataclass(frozen=True, slots=True)
class CommentSnapshot:
    id: UUID | None
    author_id: UUID
    task: TaskSnapshot


@dataclass(frozen=True, slots=True)
class UserSnapshot:
    id: UUID | None


ResourceSnapshot = ProjectSnapshot | TaskSnapshot | CommentSnapshot | UserSnapshot
