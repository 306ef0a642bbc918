"""Role assignment repository for database operations.

Assignments are never hard-deleted; revocation sets ``is_active`` to False.
"""

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from restoauth.domain.entities.role_assignment import utc_now
from restoauth.infrastructure.persistence.models import UserRoleModel


class RoleAssignmentRepository:
    """Repository for user_roles database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def list_for_user(
        self, user_id: str, include_inactive: bool = False
    ) -> list[UserRoleModel]:
        """List a user's assignments with role, restaurant and location loaded.

        Expiry is not filtered here; callers decide effectiveness.

        Args:
            user_id: User ID.
            include_inactive: Also return revoked rows.

        Returns:
            List of assignment models.
        """
        query = (
            select(UserRoleModel)
            .where(UserRoleModel.user_id == user_id)
            .options(
                selectinload(UserRoleModel.role),
                selectinload(UserRoleModel.restaurant),
                selectinload(UserRoleModel.location),
            )
        )
        if not include_inactive:
            query = query.where(UserRoleModel.is_active.is_(True))

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_by_id(self, assignment_id: str) -> UserRoleModel | None:
        """Get an assignment by ID."""
        result = await self.session.execute(
            select(UserRoleModel).where(UserRoleModel.id == assignment_id)
        )
        return result.scalar_one_or_none()

    async def create(self, assignment: UserRoleModel) -> UserRoleModel:
        """Create a new assignment.

        Args:
            assignment: Assignment model to create.

        Returns:
            Created assignment model.
        """
        self.session.add(assignment)
        await self.session.flush()
        return assignment

    async def deactivate(
        self,
        user_id: str,
        role_id: str,
        restaurant_id: str | None = None,
        location_id: str | None = None,
    ) -> int:
        """Revoke the active assignments of a role for a user.

        Omitted restaurant/location filters match every scope.

        Returns:
            Number of rows revoked.
        """
        stmt = (
            update(UserRoleModel)
            .where(
                UserRoleModel.user_id == user_id,
                UserRoleModel.role_id == role_id,
                UserRoleModel.is_active.is_(True),
            )
            .values(is_active=False, is_primary_role=False, updated_at=utc_now())
        )
        if restaurant_id:
            stmt = stmt.where(UserRoleModel.restaurant_id == restaurant_id)
        if location_id:
            stmt = stmt.where(UserRoleModel.location_id == location_id)

        result = await self.session.execute(stmt.execution_options(synchronize_session="fetch"))
        await self.session.flush()
        return result.rowcount or 0

    async def deactivate_by_id(self, assignment_id: str) -> bool:
        """Revoke one assignment by ID.

        Returns:
            True if an active row was revoked.
        """
        result = await self.session.execute(
            update(UserRoleModel)
            .where(UserRoleModel.id == assignment_id, UserRoleModel.is_active.is_(True))
            .values(is_active=False, is_primary_role=False, updated_at=utc_now())
            .execution_options(synchronize_session="fetch")
        )
        await self.session.flush()
        return (result.rowcount or 0) > 0

    async def set_primary(self, user_id: str, role_id: str) -> bool:
        """Move the primary marker to the user's active assignments of a role.

        The marker is left untouched if the user holds no active assignment
        of the role.

        Returns:
            True if at least one assignment now carries the marker.
        """
        result = await self.session.execute(
            update(UserRoleModel)
            .where(
                UserRoleModel.user_id == user_id,
                UserRoleModel.role_id == role_id,
                UserRoleModel.is_active.is_(True),
            )
            .values(is_primary_role=True, updated_at=utc_now())
            .execution_options(synchronize_session="fetch")
        )
        if not result.rowcount:
            return False

        await self.session.execute(
            update(UserRoleModel)
            .where(
                UserRoleModel.user_id == user_id,
                UserRoleModel.role_id != role_id,
                UserRoleModel.is_primary_role.is_(True),
            )
            .values(is_primary_role=False, updated_at=utc_now())
            .execution_options(synchronize_session="fetch")
        )
        await self.session.flush()
        return True
