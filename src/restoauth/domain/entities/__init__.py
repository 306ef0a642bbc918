"""Domain entities for restoauth.

Entities are pure Python dataclasses that represent core business concepts.
They have no dependencies on infrastructure or external frameworks.
"""

from restoauth.domain.entities.authorization import (
    AccessibleLocation,
    AccessLevel,
    AuthContext,
    LocationView,
    Operation,
    ResolvedRole,
    ResolvedUserAuthorization,
    RoleView,
    UserRef,
)
from restoauth.domain.entities.role import Role, RoleScope
from restoauth.domain.entities.role_assignment import (
    RoleAssignment,
    as_utc,
    is_effective,
    is_expired,
    utc_now,
)

__all__ = [
    "AccessibleLocation",
    "AccessLevel",
    "AuthContext",
    "LocationView",
    "Operation",
    "ResolvedRole",
    "ResolvedUserAuthorization",
    "Role",
    "RoleAssignment",
    "RoleScope",
    "RoleView",
    "UserRef",
    "as_utc",
    "is_effective",
    "is_expired",
    "utc_now",
]
