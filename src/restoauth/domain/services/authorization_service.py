"""Authorization summary service.

Combines role and location resolution into the per-user summary consumed
by the API and the CLI.
"""

from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from restoauth.domain.entities.authorization import (
    AccessibleLocation,
    AuthContext,
    ResolvedUserAuthorization,
    UserRef,
)
from restoauth.domain.exceptions import UserNotFoundError
from restoauth.domain.services.identifiers import validate_identifier
from restoauth.domain.services.location_access_resolver import LocationAccessResolver
from restoauth.domain.services.role_resolver import RoleResolver, guarded_store_call
from restoauth.infrastructure.persistence.repositories import UserRepository


@dataclass
class UserAuthorizationSummary:
    """Everything a client needs to render a user's access.

    Attributes:
        user_id: Summarized user.
        authorization: Effective roles in precedence order.
        locations: Accessible locations.
        primary_location: Default location, if any.
    """

    user_id: str
    authorization: ResolvedUserAuthorization
    locations: list[AccessibleLocation] = field(default_factory=list)
    primary_location: AccessibleLocation | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize the summary.

        ``role`` and ``is_admin`` mirror the primary role for clients that
        predate multi-role users.
        """
        primary = self.authorization.primary_role
        return {
            "user_id": self.user_id,
            "role": primary.role_name if primary else None,
            "is_admin": self.authorization.is_admin,
            "is_super_admin": self.authorization.is_super_admin,
            "primary_role": primary.to_view() if primary else None,
            "roles": [r.to_view() for r in self.authorization.roles],
            "locations": [loc.to_view() for loc in self.locations],
            "primary_location": (
                self.primary_location.to_view() if self.primary_location else None
            ),
        }


class AuthorizationService:
    """Facade over role resolution, location resolution and user lookup."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.role_resolver = RoleResolver(session)
        self.location_resolver = LocationAccessResolver(session, self.role_resolver)
        self.user_repo = UserRepository(session)

    async def describe_user(self, user_id: str) -> UserAuthorizationSummary:
        """Resolve roles and locations for one user in a single pass."""
        authorization = await self.role_resolver.resolve_roles(user_id)
        locations = await self.location_resolver.for_resolution(authorization)
        return UserAuthorizationSummary(
            user_id=authorization.user_id,
            authorization=authorization,
            locations=locations,
            primary_location=self.location_resolver.primary_location_for(
                authorization, locations
            ),
        )

    async def get_user_ref(self, user_id: str) -> UserRef:
        """Load the target of a user-level check.

        Raises:
            InvalidIdentifier: If user_id is not a UUID.
            UserNotFoundError: If the user does not exist.
        """
        user_id = validate_identifier(user_id, "user")
        user = await guarded_store_call(
            lambda: self.user_repo.get_by_id(user_id), user_id, self.role_resolver.timeout
        )
        if user is None:
            raise UserNotFoundError(user_id)
        return UserRef(id=user.id, restaurant_id=user.restaurant_id)

    async def build_auth_context(self, user_id: str) -> AuthContext:
        """Build the acting-user context, using the user's own restaurant."""
        user = await self.get_user_ref(user_id)
        return await self.role_resolver.build_auth_context(
            user.id, restaurant_id=user.restaurant_id
        )
