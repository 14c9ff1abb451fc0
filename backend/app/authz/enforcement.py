"""
Enforcement adapter.

Wraps every guarded operation in the same sequence: load the snapshot,
ask the policy engine, and reject with an HTTPException on absence or Deny.
Absence is always resolved before permission.
"""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import HTTPException, status

from app.authz.errors import ResourceNotFoundError
from app.authz.identity import Action, Identity
from app.authz.loader import SnapshotLoader
from app.authz.policy import Decision, check_assignment_target, decide
from app.authz.snapshots import (
    CommentSnapshot,
    ProjectSnapshot,
    ResourceSnapshot,
    TaskSnapshot,
    UserSnapshot,
)

logger = logging.getLogger(__name__)


def not_found(resource_type: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={
            "code": f"{resource_type.upper()}_NOT_FOUND",
            "message": f"{resource_type.capitalize()} not found",
        },
    )


def forbidden(reason: str | None) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail={"code": "FORBIDDEN", "message": reason or "Access denied"},
    )


class AccessGuard:
    """Load, decide, reject. One instance per service, per request."""

    def __init__(self, loader: SnapshotLoader) -> None:
        self.loader = loader

    # -----------------------------------------------------------------------
    # Existing resources
    # -----------------------------------------------------------------------

    async def project(
        self, identity: Identity, project_id: UUID, action: Action
    ) -> ProjectSnapshot:
        try:
            snapshot = await self.loader.load_project(project_id)
        except ResourceNotFoundError as exc:
            raise self._absent(identity, exc, action)
        self.enforce(identity, snapshot, action)
        return snapshot

    async def task(self, identity: Identity, task_id: UUID, action: Action) -> TaskSnapshot:
        try:
            snapshot = await self.loader.load_task(task_id)
        except ResourceNotFoundError as exc:
            raise self._absent(identity, exc, action)
        self.enforce(identity, snapshot, action)
        return snapshot

    async def comment(
        self, identity: Identity, comment_id: UUID, action: Action
    ) -> CommentSnapshot:
        try:
            snapshot = await self.loader.load_comment(comment_id)
        except ResourceNotFoundError as exc:
            raise self._absent(identity, exc, action)
        self.enforce(identity, snapshot, action)
        return snapshot

    async def user(
        self, identity: Identity, user_id: UUID | None, action: Action
    ) -> UserSnapshot:
        """Guard a user account, or the whole directory when ``user_id`` is None."""
        if user_id is None:
            snapshot = UserSnapshot(id=None)
        else:
            try:
                snapshot = await self.loader.load_user(user_id)
            except ResourceNotFoundError as exc:
                raise self._absent(identity, exc, action)
        self.enforce(identity, snapshot, action)
        return snapshot

    # -----------------------------------------------------------------------
    # Proposed resources
    # -----------------------------------------------------------------------

    def new_project(self, identity: Identity) -> ProjectSnapshot:
        snapshot = ProjectSnapshot(id=None, creator_id=identity.id)
        self.enforce(identity, snapshot, Action.create)
        return snapshot

    async def new_task(self, identity: Identity, project_id: UUID) -> TaskSnapshot:
        """Task/Create is decided against the target project's facts."""
        return await self.project_tasks(identity, project_id, Action.create)

    async def project_tasks(
        self, identity: Identity, project_id: UUID, action: Action
    ) -> TaskSnapshot:
        """Guard task creation in, or task listing of, one project."""
        try:
            project = await self.loader.load_project(project_id)
        except ResourceNotFoundError as exc:
            raise self._absent(identity, exc, action)
        snapshot = TaskSnapshot(id=None, project=project)
        self.enforce(identity, snapshot, action)
        return snapshot

    async def task_comments(
        self, identity: Identity, task_id: UUID, action: Action
    ) -> CommentSnapshot:
        """
        Guard comment creation or listing on a task.

        The proposed comment carries the caller as author.
        """
        try:
            task = await self.loader.load_task(task_id)
        except ResourceNotFoundError as exc:
            raise self._absent(identity, exc, action)
        snapshot = CommentSnapshot(id=None, author_id=identity.id, task=task)
        self.enforce(identity, snapshot, action)
        return snapshot

    # -----------------------------------------------------------------------
    # Decisions
    # -----------------------------------------------------------------------

    def enforce(
        self, identity: Identity, snapshot: ResourceSnapshot, action: Action
    ) -> Decision:
        decision = decide(identity, snapshot, action)
        logger.debug(
            "authz %s %s %s by %s -> %s",
            type(snapshot).__name__,
            snapshot.id,
            action.value,
            identity.id,
            "allow" if decision else "deny",
        )
        if not decision:
            logger.info(
                "Denied %s on %s %s for user %s: %s",
                action.value,
                type(snapshot).__name__,
                snapshot.id,
                identity.id,
                decision.reason,
            )
            raise forbidden(decision.reason)
        return decision

    async def enforce_assignee(self, project: ProjectSnapshot, target_id: UUID) -> None:
        """
        Assignment-target rule: the new assignee must exist and belong to the
        project. Checked for every caller, admins included.
        """
        try:
            await self.loader.load_user(target_id)
        except ResourceNotFoundError:
            logger.info("Assignee %s not found", target_id)
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail={"code": "ASSIGNEE_NOT_FOUND", "message": "Assignee not found"},
            )
        decision = check_assignment_target(project, target_id)
        if not decision:
            logger.info(
                "Rejected assignment of %s in project %s: %s",
                target_id,
                project.id,
                decision.reason,
            )
            raise forbidden(decision.reason)

    def _absent(
        self, identity: Identity, exc: ResourceNotFoundError, action: Action
    ) -> HTTPException:
        logger.info(
            "Not found: %s %s (%s by user %s)",
            exc.resource_type,
            exc.resource_id,
            action.value,
            identity.id,
        )
        return not_found(exc.resource_type)
