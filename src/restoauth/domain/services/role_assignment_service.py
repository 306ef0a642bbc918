"""Role assignment service.

Grants and revokes roles. Changes are flushed but not committed; the
caller owns the transaction.
"""

from datetime import datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from restoauth.core.logging import get_logger
from restoauth.domain.entities.authorization import AuthContext, Operation, UserRef
from restoauth.domain.entities.role import Role, RoleScope
from restoauth.domain.entities.role_assignment import RoleAssignment, as_utc, utc_now
from restoauth.domain.exceptions import (
    Forbidden,
    InvalidRoleAssignmentError,
    RoleNotFoundError,
    UserNotFoundError,
)
from restoauth.domain.services.authorization_gate import authorization_gate
from restoauth.domain.services.identifiers import (
    validate_identifier,
    validate_optional_identifier,
)
from restoauth.domain.services.role_catalog import RoleCatalog
from restoauth.infrastructure.persistence.models import UserRoleModel
from restoauth.infrastructure.persistence.repositories import (
    LocationRepository,
    RoleAssignmentRepository,
    RoleRepository,
    UserRepository,
)

logger = get_logger(__name__)


class RoleAssignmentService:
    """Service for granting and revoking role assignments."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the service.

        Args:
            session: Database session.
        """
        self.session = session
        self.role_repo = RoleRepository(session)
        self.assignment_repo = RoleAssignmentRepository(session)
        self.location_repo = LocationRepository(session)
        self.user_repo = UserRepository(session)

    async def get_catalog(self) -> RoleCatalog:
        """Load the active role catalog."""
        rows = await self.role_repo.list_active()
        return RoleCatalog(row.to_entity() for row in rows)

    async def get_assignable_roles(self, actor: AuthContext) -> list[Role]:
        """List the roles an actor may grant, most privileged first."""
        catalog = await self.get_catalog()
        return catalog.assignable_by(actor)

    async def authorize_assignment(
        self,
        actor: AuthContext,
        target: UserRef,
        role_name: str,
        restaurant_id: str | None = None,
        operation: str = "assign_role",
    ) -> Role:
        """Check that an actor may grant or revoke a role for a target user.

        Only super-admins may change their own role assignments. Otherwise
        the actor must be allowed to update the target, reach the restaurant
        the grant binds to, and hold a role that can grant this one.

        Returns:
            The catalog role to grant.

        Raises:
            Forbidden: If any check fails.
            RoleNotFoundError: If the role is not in the active catalog.
        """
        if target.id == actor.id and not actor.is_super_admin:
            self._refuse(
                operation,
                actor,
                target,
                reason="self_assignment",
                restaurant_id=restaurant_id,
                message="You cannot change your own role assignments",
            )

        authorization_gate.can_access_user(actor, target, Operation.UPDATE)
        if restaurant_id is not None:
            authorization_gate.can_access_restaurant(actor, restaurant_id)

        catalog = await self.get_catalog()
        role = catalog.get(role_name)
        if role is None:
            raise RoleNotFoundError(role_name)

        if role not in catalog.assignable_by(actor):
            self._refuse(
                operation,
                actor,
                target,
                reason="role_not_assignable",
                restaurant_id=restaurant_id,
                message=f"You cannot assign the role '{role.name}'",
            )
        return role

    async def assign_role(
        self,
        user_id: str,
        role_name: str,
        restaurant_id: str | None = None,
        location_id: str | None = None,
        assigned_by: str | None = None,
        valid_until: datetime | None = None,
        is_primary_role: bool = False,
        permissions_override: dict[str, Any] | None = None,
    ) -> RoleAssignment:
        """Grant a role to a user.

        Args:
            user_id: User receiving the role.
            role_name: Catalog role name.
            restaurant_id: Restaurant the grant binds to.
            location_id: Location the grant binds to.
            assigned_by: Granting user, kept for audit.
            valid_until: Optional end of validity; must be in the future.
            is_primary_role: Set the display-only primary marker.
            permissions_override: Free-form capability overrides.

        Returns:
            The created assignment.

        Raises:
            InvalidIdentifier: If any ID is malformed.
            UserNotFoundError: If the user does not exist.
            RoleNotFoundError: If the role is unknown or inactive.
            InvalidRoleAssignmentError: If the grant does not fit the role's scope.
        """
        user_id = validate_identifier(user_id, "user")
        restaurant_id = validate_optional_identifier(restaurant_id, "restaurant")
        location_id = validate_optional_identifier(location_id, "location")
        assigned_by = validate_optional_identifier(assigned_by, "user")

        if await self.user_repo.get_by_id(user_id) is None:
            raise UserNotFoundError(user_id)

        role_model = await self.role_repo.get_by_name(role_name)
        if role_model is None or not role_model.is_active:
            raise RoleNotFoundError(role_name)
        role = role_model.to_entity()

        await self._validate_scope(role, restaurant_id, location_id)

        if valid_until is not None and as_utc(valid_until) <= utc_now():
            raise InvalidRoleAssignmentError("valid_until must be in the future")

        model = UserRoleModel(
            user_id=user_id,
            role_id=role.id,
            restaurant_id=restaurant_id,
            location_id=location_id,
            assigned_by=assigned_by,
            valid_until=valid_until,
            is_primary_role=False,
            permissions_override=permissions_override,
            is_active=True,
        )
        model = await self.assignment_repo.create(model)
        if is_primary_role:
            await self.assignment_repo.set_primary(user_id, role.id)
            await self.session.refresh(model)

        logger.info(
            "Role assigned",
            user_id=user_id,
            role_name=role.name,
            restaurant_id=restaurant_id,
            location_id=location_id,
            assigned_by=assigned_by,
            assignment_id=model.id,
        )
        return model.to_entity()

    async def revoke_role(
        self,
        user_id: str,
        role_name: str,
        restaurant_id: str | None = None,
        location_id: str | None = None,
    ) -> int:
        """Revoke a user's active assignments of a role.

        Omitted restaurant/location filters revoke the role in every scope.

        Returns:
            Number of assignments revoked.
        """
        user_id = validate_identifier(user_id, "user")
        restaurant_id = validate_optional_identifier(restaurant_id, "restaurant")
        location_id = validate_optional_identifier(location_id, "location")

        role_model = await self.role_repo.get_by_name(role_name)
        if role_model is None:
            raise RoleNotFoundError(role_name)

        revoked = await self.assignment_repo.deactivate(
            user_id, role_model.id, restaurant_id=restaurant_id, location_id=location_id
        )
        logger.info(
            "Role revoked",
            user_id=user_id,
            role_name=role_model.name,
            restaurant_id=restaurant_id,
            location_id=location_id,
            revoked=revoked,
        )
        return revoked

    async def revoke_assignment(self, assignment_id: str) -> bool:
        """Revoke a single assignment by ID.

        Returns:
            True if an active assignment was revoked.
        """
        assignment_id = validate_identifier(assignment_id, "assignment")
        revoked = await self.assignment_repo.deactivate_by_id(assignment_id)
        logger.info("Assignment revoked", assignment_id=assignment_id, revoked=revoked)
        return revoked

    async def set_primary_role(self, user_id: str, role_name: str) -> bool:
        """Move the display-only primary marker to one of a user's roles.

        This does not change precedence; the primary role of a resolution
        is always the highest-precedence effective role.

        Returns:
            True if the user holds an active assignment of the role.
        """
        user_id = validate_identifier(user_id, "user")
        role_model = await self.role_repo.get_by_name(role_name)
        if role_model is None:
            raise RoleNotFoundError(role_name)
        updated = await self.assignment_repo.set_primary(user_id, role_model.id)
        logger.info("Primary role marker set", user_id=user_id, role_name=role_model.name, updated=updated)
        return updated

    async def _validate_scope(
        self, role: Role, restaurant_id: str | None, location_id: str | None
    ) -> None:
        if location_id is not None and restaurant_id is None:
            raise InvalidRoleAssignmentError("A location-bound assignment requires a restaurant")

        if role.scope is RoleScope.GLOBAL and location_id is not None:
            raise InvalidRoleAssignmentError(
                f"Role '{role.name}' is global and cannot be bound to a location"
            )
        if role.scope is RoleScope.RESTAURANT and restaurant_id is None:
            raise InvalidRoleAssignmentError(f"Role '{role.name}' requires a restaurant")
        if role.scope is RoleScope.LOCATION and location_id is None:
            raise InvalidRoleAssignmentError(f"Role '{role.name}' requires a location")

        if location_id is not None:
            location = await self.location_repo.get_by_id(location_id)
            if location is None:
                raise InvalidRoleAssignmentError(f"Location '{location_id}' not found")
            if location.restaurant_id != restaurant_id:
                raise InvalidRoleAssignmentError(
                    f"Location '{location_id}' does not belong to restaurant '{restaurant_id}'"
                )

    @staticmethod
    def _refuse(
        operation: str,
        actor: AuthContext,
        target: UserRef,
        reason: str,
        restaurant_id: str | None,
        message: str,
    ) -> None:
        error = Forbidden(
            operation=operation,
            actor_id=actor.id,
            reason=reason,
            target_id=target.id,
            restaurant_id=restaurant_id,
            message=message,
        )
        logger.warning("Access denied", **error.to_audit_dict())
        raise error
