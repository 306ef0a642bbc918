"""Pytest configuration for all tests."""

import uuid
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from restoauth.core.config import get_settings
from restoauth.infrastructure.persistence.database import Base, seed_default_roles
from restoauth.infrastructure.persistence.models import (
    RestaurantLocationModel,
    RestaurantModel,
    RoleModel,
    UserModel,
    UserRoleModel,
)


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session with the default role catalog.

    Uses an in-memory SQLite database for testing.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_maker = sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        await seed_default_roles(session)

    async with async_session_maker() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


class Seeder:
    """Inserts restaurants, locations, users and raw assignments.

    Assignments are written straight to the table so tests can set up
    states the assignment service would refuse (expired, revoked, odd
    timestamps).
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def restaurant(self, name: str = "Bistro") -> RestaurantModel:
        restaurant = RestaurantModel(
            id=str(uuid.uuid4()),
            restaurant_name=name,
            restaurant_url_name=f"{name.lower().replace(' ', '-')}-{uuid.uuid4().hex[:6]}",
        )
        self.session.add(restaurant)
        await self.session.flush()
        return restaurant

    async def location(
        self,
        restaurant: RestaurantModel,
        name: str = "Main",
        is_primary: bool = False,
    ) -> RestaurantLocationModel:
        location = RestaurantLocationModel(
            id=str(uuid.uuid4()),
            restaurant_id=restaurant.id,
            name=name,
            is_primary=is_primary,
        )
        self.session.add(location)
        await self.session.flush()
        return location

    async def user(
        self,
        restaurant: RestaurantModel | None = None,
        email: str | None = None,
    ) -> UserModel:
        user_id = str(uuid.uuid4())
        user = UserModel(
            id=user_id,
            email=email or f"{user_id[:8]}@example.com",
            full_name="Test User",
            restaurant_id=restaurant.id if restaurant else None,
        )
        self.session.add(user)
        await self.session.flush()
        return user

    async def role(self, name: str) -> RoleModel:
        result = await self.session.execute(select(RoleModel).where(RoleModel.name == name))
        return result.scalar_one()

    async def grant(
        self,
        user: UserModel,
        role_name: str,
        restaurant: RestaurantModel | None = None,
        location: RestaurantLocationModel | None = None,
        is_active: bool = True,
        valid_from: datetime | None = None,
        valid_until: datetime | None = None,
        created_at: datetime | None = None,
        is_primary_role: bool = False,
    ) -> UserRoleModel:
        role = await self.role(role_name)
        now = datetime.now(timezone.utc)
        assignment = UserRoleModel(
            id=str(uuid.uuid4()),
            user_id=user.id,
            role_id=role.id,
            restaurant_id=restaurant.id if restaurant else None,
            location_id=location.id if location else None,
            is_active=is_active,
            valid_from=valid_from or now,
            valid_until=valid_until,
            created_at=created_at or valid_from or now,
            is_primary_role=is_primary_role,
        )
        self.session.add(assignment)
        await self.session.flush()
        return assignment


@pytest_asyncio.fixture
async def seed(db_session: AsyncSession) -> Seeder:
    """Helper for inserting test data."""
    return Seeder(db_session)


@pytest.fixture
def make_token():
    """Build signed access tokens the way the authentication service does."""

    def _make_token(user_id: str, expires_in: timedelta = timedelta(minutes=15), **claims) -> str:
        settings = get_settings()
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "iss": settings.token_issuer,
            "iat": now,
            "exp": now + expires_in,
            **claims,
        }
        return jwt.encode(payload, settings.secret_key, algorithm=settings.token_algorithm)

    return _make_token


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with overridden database dependency."""
    from restoauth.infrastructure.api.app import app
    from restoauth.infrastructure.persistence.database import get_db_session

    app.dependency_overrides[get_db_session] = lambda: db_session

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides = {}
