"""Role repository for database operations."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from restoauth.domain.entities.role import RoleScope
from restoauth.infrastructure.persistence.models import RoleModel


class RoleRepository:
    """Repository for role catalog database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def get_by_id(self, role_id: str) -> RoleModel | None:
        """Get a role by ID.

        Args:
            role_id: Role ID.

        Returns:
            Role model if found, None otherwise.
        """
        result = await self.session.execute(
            select(RoleModel).where(RoleModel.id == role_id)
        )
        return result.scalar_one_or_none()

    async def get_by_name(self, name: str) -> RoleModel | None:
        """Get a role by name.

        Names are stored lowercase; the lookup normalizes its input.

        Args:
            name: Role name (e.g., 'waiter').

        Returns:
            Role model if found, None otherwise.
        """
        result = await self.session.execute(
            select(RoleModel).where(RoleModel.name == name.strip().lower())
        )
        return result.scalar_one_or_none()

    async def list_active(self) -> list[RoleModel]:
        """List active roles, most privileged first."""
        result = await self.session.execute(
            select(RoleModel)
            .where(RoleModel.is_active.is_(True))
            .order_by(RoleModel.level.desc(), RoleModel.name)
        )
        return list(result.scalars().all())

    async def list_by_scope(self, scope: RoleScope) -> list[RoleModel]:
        """List active roles of one scope kind."""
        result = await self.session.execute(
            select(RoleModel)
            .where(RoleModel.scope == scope.value, RoleModel.is_active.is_(True))
            .order_by(RoleModel.level.desc(), RoleModel.name)
        )
        return list(result.scalars().all())

    async def list_admin_roles(self) -> list[RoleModel]:
        """List active admin-capable roles."""
        result = await self.session.execute(
            select(RoleModel)
            .where(RoleModel.is_admin_role.is_(True), RoleModel.is_active.is_(True))
            .order_by(RoleModel.level.desc(), RoleModel.name)
        )
        return list(result.scalars().all())

    async def create(self, role: RoleModel) -> RoleModel:
        """Create a new role.

        Args:
            role: Role model to create.

        Returns:
            Created role model.
        """
        self.session.add(role)
        await self.session.flush()
        return role
