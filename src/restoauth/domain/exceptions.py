"""Exceptions raised by the authorization core."""

from typing import Any


class AuthorizationError(Exception):
    """Base class for all authorization-core errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidIdentifier(AuthorizationError):
    """Raised when a user, restaurant, location, or role ID is malformed.

    Caller error; retrying with the same input will fail again.
    """

    def __init__(self, kind: str, value: Any) -> None:
        self.kind = kind
        self.value = value
        super().__init__(f"Invalid {kind} identifier: {value!r}")


class ResolutionFailed(AuthorizationError):
    """Raised when the assignment store is unreachable or times out.

    Transient; safe to retry with backoff.
    """

    retryable = True

    def __init__(self, user_id: str | None, cause: str) -> None:
        self.user_id = user_id
        self.cause = cause
        super().__init__(f"Failed to resolve authorization for user {user_id}: {cause}")


class Forbidden(AuthorizationError):
    """Raised when a well-formed request is rejected by the authorization rules."""

    def __init__(
        self,
        operation: str,
        actor_id: str,
        reason: str,
        target_id: str | None = None,
        restaurant_id: str | None = None,
        message: str = "Insufficient permissions to perform this operation",
    ) -> None:
        self.operation = operation
        self.actor_id = actor_id
        self.target_id = target_id
        self.restaurant_id = restaurant_id
        self.reason = reason
        super().__init__(message)

    def to_audit_dict(self) -> dict[str, Any]:
        """Fields for audit logging."""
        return {
            "operation": self.operation,
            "actor_id": self.actor_id,
            "target_id": self.target_id,
            "restaurant_id": self.restaurant_id,
            "reason": self.reason,
        }


class RoleNotFoundError(AuthorizationError):
    """Raised when a role name does not match an active catalog role."""

    def __init__(self, role_name: str) -> None:
        self.role_name = role_name
        super().__init__(f"Role '{role_name}' not found")


class UserNotFoundError(AuthorizationError):
    """Raised when a referenced user does not exist."""

    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__(f"User '{user_id}' not found")


class InvalidRoleAssignmentError(AuthorizationError):
    """Raised when an assignment does not fit its role's scope."""
