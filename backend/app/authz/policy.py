"""
Policy engine.

Pure decision functions: given an Identity, a resource snapshot and an
Action, return Allow or Deny-with-reason. No I/O, no state; safe to call
concurrently from any number of requests.

Rules, first match wins:

    Project  read                          admin, creator or member
    Project  create/update/delete/members  admin
    Task     read/create                   admin, project creator or member
    Task     update/assign_task            admin, assignee, project creator or member
    Task     delete                        admin
    Comment  read/create                   admin, project creator or member
    Comment  update/delete                 admin or author
    User     read/update                   admin or the user themself
    User     delete/promote                admin

The assignee clause lets a task's assignee progress it without being a project
member, including after their membership is revoked.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from app.authz.errors import InvalidAuthorizationRequest
from app.authz.identity import Action, Identity
from app.authz.snapshots import (
    CommentSnapshot,
    ProjectSnapshot,
    ResourceSnapshot,
    TaskSnapshot,
    UserSnapshot,
)

ADMIN_REQUIRED = "admin role required"
NOT_PROJECT_MEMBER = "not a project member"
NOT_TASK_PARTICIPANT = "not the task assignee or a project member"
NOT_COMMENT_AUTHOR = "only the comment author can modify this comment"
NOT_ACCOUNT_OWNER = "can only access your own account"
ASSIGNEE_NOT_MEMBER = "assignee is not a member of this project"


@dataclass(frozen=True, slots=True)
class Decision:
    allowed: bool
    reason: str | None = None

    @classmethod
    def allow(cls) -> Decision:
        return _ALLOW

    @classmethod
    def deny(cls, reason: str) -> Decision:
        return cls(allowed=False, reason=reason)

    def __bool__(self) -> bool:
        return self.allowed


_ALLOW = Decision(allowed=True)


@dataclass(frozen=True, slots=True)
class ProjectFilter:
    """
    Project visibility scope for list queries.

    ``user_id=None`` is the unconstrained filter; otherwise a project is
    visible when the user created it or is one of its members.
    """

    user_id: UUID | None = None

    @classmethod
    def unrestricted(cls) -> ProjectFilter:
        return cls(user_id=None)

    @classmethod
    def for_user(cls, user_id: UUID) -> ProjectFilter:
        return cls(user_id=user_id)

    @property
    def is_unrestricted(self) -> bool:
        return self.user_id is None

    def matches(self, project: ProjectSnapshot) -> bool:
        return self.is_unrestricted or project.includes(self.user_id)


_SUPPORTED_ACTIONS: dict[type, frozenset[Action]] = {
    ProjectSnapshot: frozenset(
        {Action.read, Action.create, Action.update, Action.delete, Action.manage_members}
    ),
    TaskSnapshot: frozenset(
        {Action.read, Action.create, Action.update, Action.delete, Action.assign_task}
    ),
    CommentSnapshot: frozenset(
        {Action.read, Action.create, Action.update, Action.delete}
    ),
    UserSnapshot: frozenset(
        {Action.read, Action.update, Action.delete, Action.promote}
    ),
}


def decide(identity: Identity, resource: ResourceSnapshot, action: Action) -> Decision:
    """
    Decide whether ``identity`` may perform ``action`` on ``resource``.

    Returns a Decision; a Deny is an expected outcome, not an error.

    Raises:
        InvalidAuthorizationRequest: identity is missing, the action is
            unknown, or the action does not apply to this resource type.
            Raised for admins too, since it signals a caller defect rather
            than a permission question.
    """
    if identity is None:
        raise InvalidAuthorizationRequest("an identity is required for every decision")

    supported = _SUPPORTED_ACTIONS.get(type(resource))
    if supported is None:
        raise InvalidAuthorizationRequest(
            f"unsupported resource type: {type(resource).__name__}"
        )
    try:
        action = Action(action)
    except ValueError as exc:
        raise InvalidAuthorizationRequest(f"unknown action: {action!r}") from exc
    if action not in supported:
        raise InvalidAuthorizationRequest(
            f"action {action.value!r} does not apply to {type(resource).__name__}"
        )

    if identity.is_admin:
        return Decision.allow()

    if isinstance(resource, ProjectSnapshot):
        return _decide_project(identity, resource, action)
    if isinstance(resource, TaskSnapshot):
        return _decide_task(identity, resource, action)
    if isinstance(resource, CommentSnapshot):
        return _decide_comment(identity, resource, action)
    return _decide_user(identity, resource, action)


def visibility_predicate(identity: Identity) -> ProjectFilter:
    """Projects an identity may list: everything for admins, else own or joined."""
    if identity is None:
        raise InvalidAuthorizationRequest("an identity is required for every decision")
    if identity.is_admin:
        return ProjectFilter.unrestricted()
    return ProjectFilter.for_user(identity.id)


def check_assignment_target(project: ProjectSnapshot, target_id: UUID) -> Decision:
    """
    Resource-integrity rule for (re)assignment.

    The target must be the project's creator or a member. Applies to every
    caller, admins included, on top of the Task update permission.
    """
    if project.includes(target_id):
        return Decision.allow()
    return Decision.deny(ASSIGNEE_NOT_MEMBER)


def _decide_project(identity: Identity, project: ProjectSnapshot, action: Action) -> Decision:
    if action is Action.read:
        if project.includes(identity.id):
            return Decision.allow()
        return Decision.deny(NOT_PROJECT_MEMBER)
    return Decision.deny(ADMIN_REQUIRED)


def _decide_task(identity: Identity, task: TaskSnapshot, action: Action) -> Decision:
    if action is Action.delete:
        return Decision.deny(ADMIN_REQUIRED)

    if action in (Action.update, Action.assign_task):
        if task.assignee_id is not None and task.assignee_id == identity.id:
            return Decision.allow()
        if task.project.includes(identity.id):
            return Decision.allow()
        return Decision.deny(NOT_TASK_PARTICIPANT)

    # read, create
    if task.project.includes(identity.id):
        return Decision.allow()
    return Decision.deny(NOT_PROJECT_MEMBER)


def _decide_comment(identity: Identity, comment: CommentSnapshot, action: Action) -> Decision:
    if action in (Action.update, Action.delete):
        if comment.author_id == identity.id:
            return Decision.allow()
        return Decision.deny(NOT_COMMENT_AUTHOR)

    if comment.task.project.includes(identity.id):
        return Decision.allow()
    return Decision.deny(NOT_PROJECT_MEMBER)


def _decide_user(identity: Identity, user: UserSnapshot, action: Action) -> Decision:
    if action in (Action.read, Action.update):
        if user.id is not None and user.id == identity.id:
            return Decision.allow()
        return Decision.deny(NOT_ACCOUNT_OWNER)
    return Decision.deny(ADMIN_REQUIRED)
