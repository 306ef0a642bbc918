"""Restaurant location repository for database operations."""

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from restoauth.infrastructure.persistence.models import RestaurantLocationModel

_ORDERING = (
    RestaurantLocationModel.restaurant_id,
    RestaurantLocationModel.is_primary.desc(),
    RestaurantLocationModel.name,
    RestaurantLocationModel.id,
)


class LocationRepository:
    """Read-only repository for restaurant locations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def get_by_id(self, location_id: str) -> RestaurantLocationModel | None:
        """Get a location by ID."""
        result = await self.session.execute(
            select(RestaurantLocationModel).where(RestaurantLocationModel.id == location_id)
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> list[RestaurantLocationModel]:
        """List every location in the system."""
        result = await self.session.execute(select(RestaurantLocationModel).order_by(*_ORDERING))
        return list(result.scalars().all())

    async def list_by_restaurant_ids(
        self, restaurant_ids: Iterable[str]
    ) -> list[RestaurantLocationModel]:
        """List the locations of the given restaurants."""
        ids = list(set(restaurant_ids))
        if not ids:
            return []
        result = await self.session.execute(
            select(RestaurantLocationModel)
            .where(RestaurantLocationModel.restaurant_id.in_(ids))
            .order_by(*_ORDERING)
        )
        return list(result.scalars().all())

    async def list_by_ids(self, location_ids: Iterable[str]) -> list[RestaurantLocationModel]:
        """List locations by ID."""
        ids = list(set(location_ids))
        if not ids:
            return []
        result = await self.session.execute(
            select(RestaurantLocationModel)
            .where(RestaurantLocationModel.id.in_(ids))
            .order_by(*_ORDERING)
        )
        return list(result.scalars().all())
