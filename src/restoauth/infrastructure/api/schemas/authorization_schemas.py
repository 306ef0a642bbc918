"""Authorization API schemas for request/response validation."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator


class RoleViewResponse(BaseModel):
    """One effective role as shown to clients."""

    model_config = ConfigDict(from_attributes=True)

    role_name: str
    display_name: str
    level: int
    is_admin_role: bool
    restaurant_name: str | None = None
    location_name: str | None = None


class LocationViewResponse(BaseModel):
    """One accessible location as shown to clients."""

    model_config = ConfigDict(from_attributes=True)

    location_id: str
    name: str
    access_level: str
    via_role: str


class UserRolesResponse(BaseModel):
    """Response schema for a user's effective roles.

    Attributes:
        user_id: Resolved user.
        primary_role: Highest-precedence role, if any.
        roles: Effective roles in precedence order.
        is_admin: Whether any role is admin-capable.
        is_super_admin: Whether any role grants system-wide admin.
    """

    user_id: str
    primary_role: RoleViewResponse | None = None
    roles: list[RoleViewResponse]
    is_admin: bool
    is_super_admin: bool


class UserLocationsResponse(BaseModel):
    """Response schema for a user's accessible locations."""

    user_id: str
    locations: list[LocationViewResponse]
    primary_location: LocationViewResponse | None = None


class UserAuthorizationResponse(BaseModel):
    """Combined roles and locations summary.

    ``role`` carries the primary role name for older clients.
    """

    user_id: str
    role: str | None = None
    is_admin: bool
    is_super_admin: bool
    primary_role: RoleViewResponse | None = None
    roles: list[RoleViewResponse]
    locations: list[LocationViewResponse]
    primary_location: LocationViewResponse | None = None


class AssignRoleRequest(BaseModel):
    """Request schema for granting a role.

    Attributes:
        role_name: Catalog role name.
        restaurant_id: Restaurant the grant binds to.
        location_id: Location the grant binds to.
        valid_until: Optional end of validity.
        is_primary_role: Set the display-only primary marker.
    """

    role_name: str
    restaurant_id: str | None = None
    location_id: str | None = None
    valid_until: datetime | None = None
    is_primary_role: bool = False

    @field_validator("role_name")
    @classmethod
    def role_name_not_empty(cls, v: str) -> str:
        """Validate that role name is not empty."""
        if not v or not v.strip():
            raise ValueError("Role name cannot be empty")
        return v.strip().lower()


class RoleAssignmentResponse(BaseModel):
    """Response schema for a created assignment."""

    id: str
    user_id: str
    role_name: str
    restaurant_id: str | None = None
    location_id: str | None = None
    assigned_by: str | None = None
    is_active: bool
    is_primary_role: bool
    valid_from: datetime
    valid_until: datetime | None = None


class RevokeRoleResponse(BaseModel):
    """Response schema for a revocation."""

    user_id: str
    role_name: str
    revoked: int


class AssignableRoleResponse(BaseModel):
    """A role the caller may grant."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    display_name: str
    level: int
    scope: str
    is_admin_role: bool
    description: str | None = None


class AssignableRolesResponse(BaseModel):
    """Response schema for the assignable roles list."""

    items: list[AssignableRoleResponse]
    total: int
