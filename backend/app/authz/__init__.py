"""
Authorization core.

Identity and Action model, resource snapshots, the pure policy engine,
the snapshot loader and the enforcement adapter that joins them.
"""

from app.authz.errors import (
    AuthorizationError,
    InvalidAuthorizationRequest,
    ResourceNotFoundError,
)
from app.authz.identity import Action, Identity, Role
from app.authz.policy import (
    Decision,
    ProjectFilter,
    check_assignment_target,
    decide,
    visibility_predicate,
)
from app.authz.snapshots import (
    CommentSnapshot,
    ProjectSnapshot,
    ResourceSnapshot,
    TaskSnapshot,
    UserSnapshot,
)

__all__ = [
    "Action",
    "AuthorizationError",
    "CommentSnapshot",
    "Decision",
    "Identity",
    "InvalidAuthorizationRequest",
    "ProjectFilter",
    "ProjectSnapshot",
    "ResourceNotFoundError",
    "ResourceSnapshot",
    "Role",
    "TaskSnapshot",
    "UserSnapshot",
    "check_assignment_target",
    "decide",
    "visibility_predicate",
]
