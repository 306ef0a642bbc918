"""Role entity for authorization.

Roles are reference data shared by every restaurant. Each role carries a
hierarchy level, capability flags, and the scope its assignments bind to.
"""

from dataclasses import dataclass
from enum import Enum


class RoleScope(str, Enum):
    """What a role assignment is bound to."""

    GLOBAL = "global"
    RESTAURANT = "restaurant"
    LOCATION = "location"


@dataclass(frozen=True)
class Role:
    """Role catalog entry.

    Attributes:
        id: Unique identifier (UUID string).
        name: Unique lowercase key (e.g., 'restaurant_administrator').
        display_name: Human-readable name.
        level: Hierarchy level, higher is more privileged.
        scope: Scope kind assignments of this role bind to.
        is_admin_role: Whether the role grants administrative access.
        can_manage_users: Whether holders may manage other users.
        can_manage_locations: Whether holders may manage locations.
        description: Optional description of the role's purpose.
        is_active: Inactive roles cannot be assigned.
    """

    id: str
    name: str
    display_name: str
    level: int
    scope: RoleScope
    is_admin_role: bool = False
    can_manage_users: bool = False
    can_manage_locations: bool = False
    description: str | None = None
    is_active: bool = True

    def __post_init__(self) -> None:
        """Validate role data after initialization."""
        if not self.name:
            raise ValueError("Role name is required")
        if self.name != self.name.lower():
            raise ValueError("Role name must be lowercase")
        if self.level < 1:
            raise ValueError("Role level must be a positive integer")
        if not isinstance(self.scope, RoleScope):
            object.__setattr__(self, "scope", RoleScope(self.scope))

    @property
    def requires_restaurant(self) -> bool:
        return self.scope in (RoleScope.RESTAURANT, RoleScope.LOCATION)

    @property
    def requires_location(self) -> bool:
        return self.scope is RoleScope.LOCATION
