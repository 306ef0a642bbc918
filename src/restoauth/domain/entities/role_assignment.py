"""Role assignment entity.

A role assignment is the only mutable authorization fact: a user holds a
role, optionally bound to a restaurant and a location, inside a validity
window. Revocation flips ``is_active``; rows are never deleted.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Normalize a datetime to aware UTC.

    SQLite hands back naive datetimes; those are stored as UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class RoleAssignment:
    """A grant of a role to a user.

    Attributes:
        id: Unique identifier (UUID string).
        user_id: User holding the role.
        role_id: Granted role.
        restaurant_id: Restaurant the grant is bound to, if any.
        location_id: Location the grant is bound to, if any.
        assigned_by: User who made the grant (audit only).
        permissions_override: Free-form capability overrides.
        is_active: False once revoked.
        valid_from: Start of the validity window.
        valid_until: End of the validity window, None for open-ended.
        is_primary_role: Explicit primary marker kept for display.
        created_at: Row creation time.
    """

    id: str
    user_id: str
    role_id: str
    restaurant_id: str | None = None
    location_id: str | None = None
    assigned_by: str | None = None
    permissions_override: dict[str, Any] | None = None
    is_active: bool = True
    valid_from: datetime = field(default_factory=utc_now)
    valid_until: datetime | None = None
    is_primary_role: bool = False
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        if not self.user_id:
            raise ValueError("User ID is required")
        if not self.role_id:
            raise ValueError("Role ID is required")
        if self.location_id and not self.restaurant_id:
            raise ValueError("A location-bound assignment requires a restaurant")


def is_effective(assignment: RoleAssignment, now: datetime | None = None) -> bool:
    """Whether an assignment currently grants its role.

    An assignment is effective iff it is active and its ``valid_until`` is
    absent or in the future.
    """
    if not assignment.is_active:
        return False
    return not is_expired(assignment, now)


def is_expired(assignment: RoleAssignment, now: datetime | None = None) -> bool:
    """Whether the validity window of an assignment has closed."""
    if assignment.valid_until is None:
        return False
    current = as_utc(now) if now is not None else utc_now()
    return as_utc(assignment.valid_until) <= current
