"""Persistence repositories for database operations."""

from restoauth.infrastructure.persistence.repositories.location_repository import (
    LocationRepository,
)
from restoauth.infrastructure.persistence.repositories.role_assignment_repository import (
    RoleAssignmentRepository,
)
from restoauth.infrastructure.persistence.repositories.role_repository import (
    RoleRepository,
)
from restoauth.infrastructure.persistence.repositories.user_repository import (
    UserRepository,
)

__all__ = [
    "LocationRepository",
    "RoleAssignmentRepository",
    "RoleRepository",
    "UserRepository",
]
