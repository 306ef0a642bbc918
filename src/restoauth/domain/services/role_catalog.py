"""Role catalog and precedence rules.

All role precedence decisions go through ``precedence_key``: higher level
first, then the oldest assignment. Role names are never compared against
each other to decide precedence.
"""

import uuid
from collections.abc import Iterable

from restoauth.domain.entities.authorization import AuthContext, ResolvedRole
from restoauth.domain.entities.role import Role, RoleScope
from restoauth.domain.entities.role_assignment import as_utc

# Stable IDs so every environment seeds the same catalog rows.
_CATALOG_NAMESPACE = uuid.UUID("6f1b2c8e-3d4a-5b6c-8d9e-0a1b2c3d4e5f")


def _role_id(name: str) -> str:
    return str(uuid.uuid5(_CATALOG_NAMESPACE, name))


SUPERADMIN = "superadmin"
RESTAURANT_ADMINISTRATOR = "restaurant_administrator"
LOCATION_ADMINISTRATOR = "location_administrator"
POS_OPERATOR = "pos_operator"
KDS_OPERATOR = "kds_operator"
WAITER = "waiter"
FOOD_RUNNER = "food_runner"

DEFAULT_ROLES: tuple[Role, ...] = (
    Role(
        id=_role_id(SUPERADMIN),
        name=SUPERADMIN,
        display_name="Super Administrator",
        level=5,
        scope=RoleScope.GLOBAL,
        is_admin_role=True,
        can_manage_users=True,
        can_manage_locations=True,
        description="System-wide administration across all restaurants",
    ),
    Role(
        id=_role_id(RESTAURANT_ADMINISTRATOR),
        name=RESTAURANT_ADMINISTRATOR,
        display_name="Restaurant Administrator",
        level=4,
        scope=RoleScope.RESTAURANT,
        is_admin_role=True,
        can_manage_users=True,
        can_manage_locations=True,
        description="Manages one restaurant, its locations and staff",
    ),
    Role(
        id=_role_id(LOCATION_ADMINISTRATOR),
        name=LOCATION_ADMINISTRATOR,
        display_name="Location Administrator",
        level=3,
        scope=RoleScope.LOCATION,
        is_admin_role=True,
        can_manage_users=True,
        can_manage_locations=False,
        description="Manages staff at one location",
    ),
    Role(
        id=_role_id(POS_OPERATOR),
        name=POS_OPERATOR,
        display_name="POS Operator",
        level=2,
        scope=RoleScope.LOCATION,
        description="Operates the point of sale",
    ),
    Role(
        id=_role_id(KDS_OPERATOR),
        name=KDS_OPERATOR,
        display_name="KDS Operator",
        level=1,
        scope=RoleScope.LOCATION,
        description="Operates the kitchen display system",
    ),
    Role(
        id=_role_id(WAITER),
        name=WAITER,
        display_name="Waiter",
        level=1,
        scope=RoleScope.LOCATION,
    ),
    Role(
        id=_role_id(FOOD_RUNNER),
        name=FOOD_RUNNER,
        display_name="Food Runner",
        level=1,
        scope=RoleScope.LOCATION,
    ),
)


def precedence_key(resolved: ResolvedRole) -> tuple:
    """Sort key giving the total precedence order of resolved roles.

    Level descending, then ``valid_from`` ascending, then creation time,
    then assignment ID.
    """
    assignment = resolved.assignment
    valid_from = as_utc(assignment.valid_from)
    created_at = as_utc(assignment.created_at) if assignment.created_at else valid_from
    return (-resolved.role.level, valid_from, created_at, assignment.id)


def sort_by_precedence(roles: Iterable[ResolvedRole]) -> list[ResolvedRole]:
    """Order resolved roles from highest to lowest precedence."""
    return sorted(roles, key=precedence_key)


class RoleCatalog:
    """In-memory view of the active role catalog."""

    def __init__(self, roles: Iterable[Role]) -> None:
        self._roles = {role.name: role for role in roles}

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._roles

    def __iter__(self):
        return iter(self.roles)

    def __len__(self) -> int:
        return len(self._roles)

    @property
    def roles(self) -> list[Role]:
        """Roles ordered from most to least privileged."""
        return sorted(self._roles.values(), key=lambda r: (-r.level, r.name))

    def get(self, name: str) -> Role | None:
        return self._roles.get(name.strip().lower())

    def by_scope(self, scope: RoleScope) -> list[Role]:
        return [r for r in self.roles if r.scope is scope]

    def assignable_by(self, actor: AuthContext) -> list[Role]:
        """Roles an actor may grant to others.

        Global roles are never granted through this path. A super-admin may
        grant every other role; other users need a user-managing role and
        may grant roles up to the highest level among those roles.
        """
        candidates = [r for r in self.roles if r.is_active and r.scope is not RoleScope.GLOBAL]
        if actor.is_super_admin:
            return candidates

        managing_levels = [
            r.level for r in actor.effective_roles if r.role.can_manage_users
        ]
        if not managing_levels:
            return []
        ceiling = max(managing_levels)
        return [r for r in candidates if r.level <= ceiling]
