"""API schemas for request/response validation."""

from restoauth.infrastructure.api.schemas.authorization_schemas import (
    AssignableRoleResponse,
    AssignableRolesResponse,
    AssignRoleRequest,
    LocationViewResponse,
    RevokeRoleResponse,
    RoleAssignmentResponse,
    RoleViewResponse,
    UserAuthorizationResponse,
    UserLocationsResponse,
    UserRolesResponse,
)

__all__ = [
    "AssignableRoleResponse",
    "AssignableRolesResponse",
    "AssignRoleRequest",
    "LocationViewResponse",
    "RevokeRoleResponse",
    "RoleAssignmentResponse",
    "RoleViewResponse",
    "UserAuthorizationResponse",
    "UserLocationsResponse",
    "UserRolesResponse",
]
