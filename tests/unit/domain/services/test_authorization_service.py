"""Unit tests for AuthorizationService."""

import uuid

import pytest

from restoauth.domain.exceptions import InvalidIdentifier, UserNotFoundError
from restoauth.domain.services import AuthorizationService


@pytest.fixture
def service(db_session):
    return AuthorizationService(db_session)


class TestDescribeUser:
    @pytest.mark.asyncio
    async def test_summary_combines_roles_and_locations(self, service, seed):
        restaurant = await seed.restaurant("Harbor Grill")
        pier = await seed.location(restaurant, "Pier 3", is_primary=True)
        await seed.location(restaurant, "Dockside")
        user = await seed.user(restaurant)
        await seed.grant(user, "restaurant_administrator", restaurant)
        await seed.grant(user, "waiter", restaurant, pier)

        data = (await service.describe_user(user.id)).to_dict()

        assert data["role"] == "restaurant_administrator"
        assert data["is_admin"] is True
        assert data["is_super_admin"] is False
        assert [r.role_name for r in data["roles"]] == ["restaurant_administrator", "waiter"]
        assert len(data["locations"]) == 2
        assert data["primary_location"].location_id == pier.id

    @pytest.mark.asyncio
    async def test_user_without_roles(self, service, seed):
        user = await seed.user()
        data = (await service.describe_user(user.id)).to_dict()
        assert data["role"] is None
        assert data["is_admin"] is False
        assert data["roles"] == []
        assert data["locations"] == []
        assert data["primary_location"] is None


class TestUserRef:
    @pytest.mark.asyncio
    async def test_loads_restaurant(self, service, seed):
        restaurant = await seed.restaurant()
        user = await seed.user(restaurant)
        ref = await service.get_user_ref(user.id)
        assert ref.id == user.id
        assert ref.restaurant_id == restaurant.id

    @pytest.mark.asyncio
    async def test_missing_user(self, service):
        with pytest.raises(UserNotFoundError):
            await service.get_user_ref(str(uuid.uuid4()))

    @pytest.mark.asyncio
    async def test_malformed_user(self, service):
        with pytest.raises(InvalidIdentifier):
            await service.get_user_ref("42")

    @pytest.mark.asyncio
    async def test_auth_context_uses_users_restaurant(self, service, seed):
        home = await seed.restaurant("Home")
        other = await seed.restaurant("Other")
        user = await seed.user(home)
        await seed.grant(user, "restaurant_administrator", other)

        context = await service.build_auth_context(user.id)

        assert context.restaurant_id == home.id
        assert context.restaurant_ids == frozenset({home.id, other.id})
