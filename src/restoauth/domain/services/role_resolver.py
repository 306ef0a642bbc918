"""Role resolution service.

Turns a user's stored role assignments into the ordered list of effective
roles. Every authorization decision starts here.
"""

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from datetime import datetime
from typing import TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from restoauth.core.config import get_settings
from restoauth.core.logging import get_logger
from restoauth.domain.entities.authorization import (
    AuthContext,
    ResolvedRole,
    ResolvedUserAuthorization,
)
from restoauth.domain.entities.role_assignment import (
    is_effective,
    is_expired,
    utc_now,
)
from restoauth.domain.exceptions import ResolutionFailed
from restoauth.domain.services.identifiers import (
    validate_identifier,
    validate_optional_identifier,
)
from restoauth.domain.services.role_catalog import sort_by_precedence
from restoauth.infrastructure.persistence.repositories import RoleAssignmentRepository

logger = get_logger(__name__)

T = TypeVar("T")

STORE_ERRORS = (SQLAlchemyError, OSError, asyncio.TimeoutError, TimeoutError)


async def guarded_store_call(
    call: Callable[[], Awaitable[T]],
    user_id: str | None,
    timeout: float | None = None,
) -> T:
    """Run a store read under a timeout, mapping failures to ResolutionFailed.

    Args:
        call: Zero-argument coroutine factory performing the read.
        user_id: User the read is for, used in the error and the log.
        timeout: Seconds before giving up. Defaults to the configured value.

    Raises:
        ResolutionFailed: If the store raises or the timeout elapses.
    """
    if timeout is None:
        timeout = get_settings().resolution_timeout_seconds
    try:
        return await asyncio.wait_for(call(), timeout=timeout)
    except STORE_ERRORS as e:
        cause = "timed out" if isinstance(e, (asyncio.TimeoutError, TimeoutError)) else type(e).__name__
        logger.error(
            "Assignment store read failed",
            user_id=user_id,
            cause=cause,
            error=str(e),
        )
        raise ResolutionFailed(user_id, cause) from e


class RoleResolver:
    """Resolves a user's effective roles.

    An assignment is effective when it is active and not expired. Effective
    roles are returned in precedence order, so the first one is the primary
    role. Results are never cached; each call reads the store.
    """

    def __init__(self, session: AsyncSession, timeout: float | None = None) -> None:
        """Initialize the resolver.

        Args:
            session: Database session for reading assignments.
            timeout: Store read timeout in seconds. Defaults to settings.
        """
        self.session = session
        self.timeout = timeout
        self.assignment_repo = RoleAssignmentRepository(session)

    async def resolve_roles(
        self,
        user_id: str,
        include_inactive: bool = False,
        now: datetime | None = None,
    ) -> ResolvedUserAuthorization:
        """Resolve the effective roles of a user.

        Args:
            user_id: User to resolve.
            include_inactive: Also consider revoked assignments. Expired
                assignments are still excluded.
            now: Evaluation time, defaults to the current UTC time.

        Returns:
            Roles in precedence order; empty when the user has none.

        Raises:
            InvalidIdentifier: If user_id is not a UUID.
            ResolutionFailed: If the store cannot be read.
        """
        user_id = validate_identifier(user_id, "user")
        now = now or utc_now()

        rows = await guarded_store_call(
            lambda: self.assignment_repo.list_for_user(user_id, include_inactive=include_inactive),
            user_id,
            self.timeout,
        )

        resolved = []
        for row in rows:
            assignment = row.to_entity()
            if include_inactive:
                # Revoked rows are wanted, expired ones never are.
                usable = not is_expired(assignment, now)
            else:
                usable = is_effective(assignment, now)
            if not usable or row.role is None:
                continue
            resolved.append(
                ResolvedRole(
                    assignment=assignment,
                    role=row.role.to_entity(),
                    restaurant_name=row.restaurant.restaurant_name if row.restaurant else None,
                    location_name=row.location.name if row.location else None,
                )
            )

        roles = tuple(sort_by_precedence(resolved))
        logger.debug(
            "Resolved roles",
            user_id=user_id,
            role_count=len(roles),
            primary_role=roles[0].role_name if roles else None,
        )
        return ResolvedUserAuthorization(user_id=user_id, roles=roles)

    async def has_role(
        self,
        user_id: str,
        role_name: str,
        context: Mapping[str, str | None] | None = None,
    ) -> bool:
        """Check whether a user holds an effective role.

        Args:
            user_id: User to check.
            role_name: Catalog role name.
            context: Optional ``restaurant_id`` and ``location_id`` filters.
                Only keys present with a non-None value narrow the match.

        Returns:
            True if some effective assignment matches.
        """
        context = context or {}
        restaurant_id = validate_optional_identifier(context.get("restaurant_id"), "restaurant")
        location_id = validate_optional_identifier(context.get("location_id"), "location")
        wanted = role_name.strip().lower()

        resolution = await self.resolve_roles(user_id)
        for role in resolution.roles:
            if role.role_name != wanted:
                continue
            if restaurant_id is not None and role.restaurant_id != restaurant_id:
                continue
            if location_id is not None and role.location_id != location_id:
                continue
            return True
        return False

    async def has_admin_access(self, user_id: str) -> bool:
        """True if any effective role is admin-capable."""
        resolution = await self.resolve_roles(user_id)
        return resolution.is_admin

    async def build_auth_context(
        self, user_id: str, restaurant_id: str | None = None
    ) -> AuthContext:
        """Resolve a user's roles and wrap them as an acting-user context.

        Args:
            user_id: Acting user.
            restaurant_id: The actor's own restaurant, if known.
        """
        restaurant_id = validate_optional_identifier(restaurant_id, "restaurant")
        resolution = await self.resolve_roles(user_id)
        return AuthContext.from_resolution(resolution, restaurant_id=restaurant_id)

    async def list_role_location_pairs(self, user_id: str) -> list[dict[str, str | None]]:
        """Flat list of the user's effective grants for staff listings."""
        resolution = await self.resolve_roles(user_id)
        return [
            {
                "role_name": r.role_name,
                "display_name": r.role.display_name,
                "restaurant_id": r.restaurant_id,
                "restaurant_name": r.restaurant_name,
                "location_id": r.location_id,
                "location_name": r.location_name,
            }
            for r in resolution.roles
        ]

