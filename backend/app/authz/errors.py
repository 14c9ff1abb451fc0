"""
Authorization error taxonomy.

A Deny is not an error: it is returned as a ``Decision``. Only absence of the
resource and caller defects are raised.
"""

from __future__ import annotations

from uuid import UUID


class AuthorizationError(Exception):
    """Base class for authorization failures."""


class ResourceNotFoundError(AuthorizationError):
    """The resource id does not resolve."""

    def __init__(self, resource_type: str, resource_id: UUID | None = None) -> None:
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(f"{resource_type} {resource_id} not found")


class InvalidAuthorizationRequest(AuthorizationError):
    """Malformed decision input, e.g. an unsupported (resource, action) pair."""
