"""Location access resolution.

Expands a user's effective roles into the concrete set of restaurant
locations they can reach, and picks the location shown by default.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from restoauth.core.logging import get_logger
from restoauth.domain.entities.authorization import (
    AccessibleLocation,
    AccessLevel,
    ResolvedRole,
    ResolvedUserAuthorization,
)
from restoauth.domain.entities.role import RoleScope
from restoauth.domain.services.role_resolver import RoleResolver, guarded_store_call
from restoauth.infrastructure.persistence.models import RestaurantLocationModel
from restoauth.infrastructure.persistence.repositories import LocationRepository

logger = get_logger(__name__)


def grant_level(role: ResolvedRole) -> AccessLevel:
    """Access level a single resolved role grants on the locations it reaches.

    Global roles always grant full access. Scoped roles grant full access
    when they are admin-capable or manage locations.
    """
    if role.scope is RoleScope.GLOBAL:
        return AccessLevel.FULL
    if role.role.is_admin_role or role.role.can_manage_locations:
        return AccessLevel.FULL
    return AccessLevel.STANDARD


class LocationAccessResolver:
    """Resolves the locations a user can reach through their roles.

    Each location appears once, carrying the highest access level any role
    grants on it. When two roles grant the same level, the one earlier in
    precedence order is reported.
    """

    def __init__(
        self,
        session: AsyncSession,
        role_resolver: RoleResolver | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            session: Database session for reading locations.
            role_resolver: Resolver to reuse; one is created if omitted.
        """
        self.session = session
        self.role_resolver = role_resolver or RoleResolver(session)
        self.location_repo = LocationRepository(session)

    async def resolve_accessible_locations(self, user_id: str) -> list[AccessibleLocation]:
        """Resolve every location a user can reach.

        Raises:
            InvalidIdentifier: If user_id is not a UUID.
            ResolutionFailed: If the store cannot be read.
        """
        resolution = await self.role_resolver.resolve_roles(user_id)
        return await self.for_resolution(resolution)

    async def resolve_primary_location(self, user_id: str) -> AccessibleLocation | None:
        """Pick the location a user's views default to.

        Returns:
            The chosen location, or None if the user reaches no location.
        """
        resolution = await self.role_resolver.resolve_roles(user_id)
        locations = await self.for_resolution(resolution)
        return self.primary_location_for(resolution, locations)

    async def for_resolution(
        self, resolution: ResolvedUserAuthorization
    ) -> list[AccessibleLocation]:
        """Expand already-resolved roles into accessible locations."""
        if not resolution.roles:
            return []

        catalog = await self._load_locations(resolution)
        merged: dict[str, AccessibleLocation] = {}

        for role in resolution.roles:
            level = grant_level(role)
            for location in self._reach(role, catalog):
                current = merged.get(location.id)
                if current is not None and current.access_level.rank >= level.rank:
                    continue
                merged[location.id] = AccessibleLocation(
                    location_id=location.id,
                    name=location.name,
                    restaurant_id=location.restaurant_id,
                    access_level=level,
                    via_role_id=role.role.id,
                    via_role_name=role.role_name,
                    via_assignment_id=role.assignment.id,
                )

        locations = list(merged.values())
        logger.debug(
            "Resolved accessible locations",
            user_id=resolution.user_id,
            location_count=len(locations),
        )
        return locations

    @staticmethod
    def primary_location_for(
        resolution: ResolvedUserAuthorization,
        locations: list[AccessibleLocation],
    ) -> AccessibleLocation | None:
        """Choose the default location among already-resolved locations.

        A location-scoped primary role picks its own location. A
        restaurant-scoped primary role picks the restaurant's location when
        it has exactly one. Otherwise the first accessible location wins.
        """
        if not locations:
            return None

        primary = resolution.primary_role
        if primary is not None:
            if primary.location_id is not None:
                for location in locations:
                    if location.location_id == primary.location_id:
                        return location
            elif primary.scope is RoleScope.RESTAURANT and primary.restaurant_id is not None:
                in_restaurant = [
                    loc for loc in locations if loc.restaurant_id == primary.restaurant_id
                ]
                if len(in_restaurant) == 1:
                    return in_restaurant[0]

        return locations[0]

    async def _load_locations(
        self, resolution: ResolvedUserAuthorization
    ) -> "_LocationCatalog":
        needs_all = any(
            r.scope is RoleScope.GLOBAL and r.restaurant_id is None for r in resolution.roles
        )
        restaurant_ids = {
            r.restaurant_id
            for r in resolution.roles
            if r.restaurant_id is not None and r.location_id is None
        }
        location_ids = {r.location_id for r in resolution.roles if r.location_id is not None}

        async def load() -> list[RestaurantLocationModel]:
            if needs_all:
                return await self.location_repo.list_all()
            rows = await self.location_repo.list_by_restaurant_ids(restaurant_ids)
            rows.extend(await self.location_repo.list_by_ids(location_ids))
            return rows

        rows = await guarded_store_call(load, resolution.user_id, self.role_resolver.timeout)
        return _LocationCatalog(rows)

    def _reach(
        self, role: ResolvedRole, catalog: "_LocationCatalog"
    ) -> list[RestaurantLocationModel]:
        if role.location_id is not None:
            location = catalog.by_id.get(role.location_id)
            if location is None or location.restaurant_id != role.restaurant_id:
                logger.warning(
                    "Assignment points at an unknown location",
                    assignment_id=role.assignment.id,
                    location_id=role.location_id,
                )
                return []
            return [location]

        if role.restaurant_id is not None:
            return catalog.in_restaurant(role.restaurant_id)

        if role.scope is RoleScope.GLOBAL:
            return catalog.ordered

        logger.warning(
            "Scoped assignment has no restaurant or location",
            assignment_id=role.assignment.id,
            role_name=role.role_name,
        )
        return []


class _LocationCatalog:
    """Locations loaded for one resolution, deduplicated and ordered."""

    def __init__(self, rows: list[RestaurantLocationModel]) -> None:
        self.by_id: dict[str, RestaurantLocationModel] = {}
        for row in rows:
            self.by_id.setdefault(row.id, row)
        self.ordered = sorted(
            self.by_id.values(),
            key=lambda loc: (loc.restaurant_id, not loc.is_primary, loc.name, loc.id),
        )

    def in_restaurant(self, restaurant_id: str) -> list[RestaurantLocationModel]:
        return [loc for loc in self.ordered if loc.restaurant_id == restaurant_id]
