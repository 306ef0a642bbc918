"""Derived authorization values.

These objects are computed from effective role assignments on every
request and are never persisted. The views at the bottom are the only
fields promised to callers outside the authorization core.
"""

from dataclasses import dataclass, field
from enum import Enum

from restoauth.domain.entities.role import Role, RoleScope
from restoauth.domain.entities.role_assignment import RoleAssignment


class AccessLevel(str, Enum):
    """Coarse grant strength attached to a reachable location."""

    STANDARD = "standard"
    FULL = "full"

    @property
    def rank(self) -> int:
        return _ACCESS_RANKS[self]


_ACCESS_RANKS = {AccessLevel.STANDARD: 1, AccessLevel.FULL: 2}


class Operation(str, Enum):
    """Operations the CRUD layer asks the gate about."""

    READ = "read"
    UPDATE = "update"
    DEACTIVATE = "deactivate"
    DELETE = "delete"

    @property
    def is_destructive(self) -> bool:
        return self in (Operation.DEACTIVATE, Operation.DELETE)


@dataclass(frozen=True)
class RoleView:
    """Outward representation of one resolved role."""

    role_name: str
    display_name: str
    level: int
    is_admin_role: bool
    restaurant_name: str | None = None
    location_name: str | None = None


@dataclass(frozen=True)
class LocationView:
    """Outward representation of one accessible location."""

    location_id: str
    name: str
    access_level: str
    via_role: str


@dataclass(frozen=True)
class ResolvedRole:
    """An effective assignment joined with its catalog role."""

    assignment: RoleAssignment
    role: Role
    restaurant_name: str | None = None
    location_name: str | None = None

    @property
    def role_name(self) -> str:
        return self.role.name

    @property
    def level(self) -> int:
        return self.role.level

    @property
    def scope(self) -> RoleScope:
        return self.role.scope

    @property
    def restaurant_id(self) -> str | None:
        return self.assignment.restaurant_id

    @property
    def location_id(self) -> str | None:
        return self.assignment.location_id

    @property
    def is_admin_role(self) -> bool:
        return self.role.is_admin_role

    @property
    def grants_super_admin(self) -> bool:
        """Admin-capable and not tied to any restaurant."""
        return (
            self.role.is_admin_role
            and self.assignment.restaurant_id is None
            and self.assignment.location_id is None
        )

    @property
    def grants_restaurant_admin(self) -> bool:
        """Admin-capable role scoped to exactly one restaurant."""
        return (
            self.role.is_admin_role
            and self.role.scope is RoleScope.RESTAURANT
            and self.assignment.restaurant_id is not None
        )

    def to_view(self) -> RoleView:
        return RoleView(
            role_name=self.role.name,
            display_name=self.role.display_name,
            level=self.role.level,
            is_admin_role=self.role.is_admin_role,
            restaurant_name=self.restaurant_name,
            location_name=self.location_name,
        )


@dataclass(frozen=True)
class ResolvedUserAuthorization:
    """Effective roles of one user, ordered by precedence.

    Attributes:
        user_id: User the roles were resolved for.
        roles: Effective roles, highest precedence first.
    """

    user_id: str
    roles: tuple[ResolvedRole, ...] = ()

    @property
    def primary_role(self) -> ResolvedRole | None:
        return self.roles[0] if self.roles else None

    @property
    def is_admin(self) -> bool:
        return any(r.is_admin_role for r in self.roles)

    @property
    def is_super_admin(self) -> bool:
        return any(r.grants_super_admin for r in self.roles)

    def to_dict(self) -> dict:
        primary = self.primary_role
        return {
            "primary_role": primary.to_view() if primary else None,
            "roles": [r.to_view() for r in self.roles],
            "is_admin": self.is_admin,
            "is_super_admin": self.is_super_admin,
        }


@dataclass(frozen=True)
class AccessibleLocation:
    """A location a user can reach and the grant that reaches it."""

    location_id: str
    name: str
    restaurant_id: str
    access_level: AccessLevel
    via_role_id: str
    via_role_name: str
    via_assignment_id: str

    def to_view(self) -> LocationView:
        return LocationView(
            location_id=self.location_id,
            name=self.name,
            access_level=self.access_level.value,
            via_role=self.via_role_name,
        )


@dataclass(frozen=True)
class UserRef:
    """The target of a user-level authorization check."""

    id: str
    restaurant_id: str | None = None


@dataclass(frozen=True)
class AuthContext:
    """The acting user, built once per request and passed by value.

    Attributes:
        id: Acting user ID.
        restaurant_id: The actor's own restaurant, if any.
        effective_roles: The actor's effective roles in precedence order.
    """

    id: str
    restaurant_id: str | None = None
    effective_roles: tuple[ResolvedRole, ...] = field(default_factory=tuple)

    @classmethod
    def from_resolution(
        cls,
        resolution: ResolvedUserAuthorization,
        restaurant_id: str | None = None,
    ) -> "AuthContext":
        """Build a context from resolved roles.

        Without an explicit restaurant, the primary role's restaurant is used.
        """
        if restaurant_id is None and resolution.primary_role is not None:
            restaurant_id = resolution.primary_role.restaurant_id
        return cls(
            id=resolution.user_id,
            restaurant_id=restaurant_id,
            effective_roles=resolution.roles,
        )

    @property
    def primary_role(self) -> ResolvedRole | None:
        return self.effective_roles[0] if self.effective_roles else None

    @property
    def is_super_admin(self) -> bool:
        return any(r.grants_super_admin for r in self.effective_roles)

    @property
    def is_admin(self) -> bool:
        return any(r.is_admin_role for r in self.effective_roles)

    @property
    def admin_restaurant_ids(self) -> frozenset[str]:
        """Restaurants the actor administers through a restaurant-scoped role."""
        return frozenset(
            r.restaurant_id for r in self.effective_roles if r.grants_restaurant_admin
        )

    @property
    def restaurant_ids(self) -> frozenset[str]:
        """Every restaurant the actor's grants are bound to."""
        ids = {r.restaurant_id for r in self.effective_roles if r.restaurant_id}
        if self.restaurant_id:
            ids.add(self.restaurant_id)
        return frozenset(ids)

    @property
    def highest_level(self) -> int:
        return self.primary_role.level if self.primary_role else 0
