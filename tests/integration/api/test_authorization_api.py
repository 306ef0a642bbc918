"""Integration tests for the authorization API."""

import uuid
from datetime import timedelta
from unittest.mock import patch

import pytest
import pytest_asyncio

from restoauth.domain.exceptions import ResolutionFailed
from restoauth.domain.services import RoleResolver

pytestmark = pytest.mark.integration

API = "/api/v1"


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def world(seed):
    """Two restaurants with an admin, staff and a super-admin."""
    harbor = await seed.restaurant("Harbor Grill")
    pier = await seed.location(harbor, "Pier 3", is_primary=True)
    dock = await seed.location(harbor, "Dockside")
    summit = await seed.restaurant("Summit")
    peak = await seed.location(summit, "Peak")

    superadmin = await seed.user(email="root@example.com")
    await seed.grant(superadmin, "superadmin")

    harbor_admin = await seed.user(harbor, email="admin@harbor.example.com")
    await seed.grant(harbor_admin, "restaurant_administrator", harbor)

    waiter = await seed.user(harbor, email="waiter@harbor.example.com")
    await seed.grant(waiter, "waiter", harbor, pier)

    summit_cook = await seed.user(summit, email="kds@summit.example.com")
    await seed.grant(summit_cook, "kds_operator", summit, peak)

    await seed.session.commit()
    return {
        "harbor": harbor,
        "pier": pier,
        "dock": dock,
        "summit": summit,
        "peak": peak,
        "superadmin": superadmin,
        "harbor_admin": harbor_admin,
        "waiter": waiter,
        "summit_cook": summit_cook,
    }


class TestAuthentication:
    @pytest.mark.asyncio
    async def test_missing_header(self, client, world):
        response = await client.get(f"{API}/users/{world['waiter'].id}/roles")
        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_expired_token(self, client, world, make_token):
        token = make_token(world["waiter"].id, expires_in=timedelta(seconds=-30))
        response = await client.get(f"{API}/users/{world['waiter'].id}/roles", headers=bearer(token))
        assert response.status_code == 401
        assert response.json()["detail"] == "Token has expired"

    @pytest.mark.asyncio
    async def test_unknown_subject(self, client, world, make_token):
        token = make_token(str(uuid.uuid4()))
        response = await client.get(f"{API}/users/{world['waiter'].id}/roles", headers=bearer(token))
        assert response.status_code == 401


class TestReadRoles:
    @pytest.mark.asyncio
    async def test_super_admin_reads_anyone(self, client, world, make_token):
        token = make_token(world["superadmin"].id)
        response = await client.get(
            f"{API}/users/{world['summit_cook'].id}/roles", headers=bearer(token)
        )
        assert response.status_code == 200
        data = response.json()
        assert data["primary_role"]["role_name"] == "kds_operator"
        assert data["roles"][0]["restaurant_name"] == "Summit"
        assert data["is_admin"] is False

    @pytest.mark.asyncio
    async def test_restaurant_admin_reads_own_staff(self, client, world, make_token):
        token = make_token(world["harbor_admin"].id)
        response = await client.get(f"{API}/users/{world['waiter'].id}/roles", headers=bearer(token))
        assert response.status_code == 200
        assert [r["role_name"] for r in response.json()["roles"]] == ["waiter"]

    @pytest.mark.asyncio
    async def test_restaurant_admin_cannot_cross_restaurants(self, client, world, make_token):
        token = make_token(world["harbor_admin"].id)
        response = await client.get(
            f"{API}/users/{world['summit_cook'].id}/roles", headers=bearer(token)
        )
        assert response.status_code == 403
        assert response.json()["reason"] == "cross_restaurant"

    @pytest.mark.asyncio
    async def test_staff_reads_self_but_not_others(self, client, world, make_token):
        token = make_token(world["waiter"].id)
        own = await client.get(f"{API}/users/{world['waiter'].id}/roles", headers=bearer(token))
        other = await client.get(
            f"{API}/users/{world['harbor_admin'].id}/roles", headers=bearer(token)
        )
        assert own.status_code == 200
        assert other.status_code == 403

    @pytest.mark.asyncio
    async def test_malformed_user_id(self, client, world, make_token):
        token = make_token(world["superadmin"].id)
        response = await client.get(f"{API}/users/not-a-uuid/roles", headers=bearer(token))
        assert response.status_code == 400
        assert response.json()["kind"] == "user"

    @pytest.mark.asyncio
    async def test_unknown_target(self, client, world, make_token):
        token = make_token(world["superadmin"].id)
        response = await client.get(f"{API}/users/{uuid.uuid4()}/roles", headers=bearer(token))
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_store_outage_is_retryable(self, client, world, make_token):
        token = make_token(world["superadmin"].id)
        with patch.object(
            RoleResolver,
            "resolve_roles",
            side_effect=ResolutionFailed(world["superadmin"].id, "timed out"),
        ):
            response = await client.get(
                f"{API}/users/{world['waiter'].id}/roles", headers=bearer(token)
            )
        assert response.status_code == 503
        assert response.headers["Retry-After"] == "1"


class TestLocations:
    @pytest.mark.asyncio
    async def test_admin_locations(self, client, world, make_token):
        token = make_token(world["harbor_admin"].id)
        response = await client.get(
            f"{API}/users/{world['harbor_admin'].id}/locations", headers=bearer(token)
        )
        assert response.status_code == 200
        data = response.json()
        assert {loc["name"] for loc in data["locations"]} == {"Pier 3", "Dockside"}
        assert all(loc["access_level"] == "full" for loc in data["locations"])
        assert data["primary_location"]["name"] == "Pier 3"

    @pytest.mark.asyncio
    async def test_authorization_summary(self, client, world, make_token):
        token = make_token(world["waiter"].id)
        response = await client.get(
            f"{API}/users/{world['waiter'].id}/authorization", headers=bearer(token)
        )
        assert response.status_code == 200
        data = response.json()
        assert data["role"] == "waiter"
        assert data["is_admin"] is False
        assert data["locations"] == [
            {
                "location_id": world["pier"].id,
                "name": "Pier 3",
                "access_level": "standard",
                "via_role": "waiter",
            }
        ]


class TestAssignAndRevoke:
    @pytest.mark.asyncio
    async def test_admin_grants_and_revokes_staff_role(self, client, world, make_token):
        token = make_token(world["harbor_admin"].id)
        waiter_id = world["waiter"].id

        created = await client.post(
            f"{API}/users/{waiter_id}/roles",
            headers=bearer(token),
            json={
                "role_name": "pos_operator",
                "restaurant_id": world["harbor"].id,
                "location_id": world["dock"].id,
            },
        )
        assert created.status_code == 201
        assert created.json()["assigned_by"] == world["harbor_admin"].id

        roles = await client.get(f"{API}/users/{waiter_id}/roles", headers=bearer(token))
        assert roles.json()["primary_role"]["role_name"] == "pos_operator"

        revoked = await client.delete(
            f"{API}/users/{waiter_id}/roles/pos_operator", headers=bearer(token)
        )
        assert revoked.status_code == 200
        assert revoked.json()["revoked"] == 1

        roles = await client.get(f"{API}/users/{waiter_id}/roles", headers=bearer(token))
        assert [r["role_name"] for r in roles.json()["roles"]] == ["waiter"]

    @pytest.mark.asyncio
    async def test_scope_mismatch(self, client, world, make_token):
        token = make_token(world["harbor_admin"].id)
        response = await client.post(
            f"{API}/users/{world['waiter'].id}/roles",
            headers=bearer(token),
            json={"role_name": "waiter", "restaurant_id": world["harbor"].id},
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_staff_cannot_promote_themselves(self, client, world, make_token):
        token = make_token(world["waiter"].id)
        response = await client.post(
            f"{API}/users/{world['waiter'].id}/roles",
            headers=bearer(token),
            json={"role_name": "restaurant_administrator", "restaurant_id": world["harbor"].id},
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_location_admin_cannot_extend_own_reach(self, client, world, seed, make_token):
        pier_admin = await seed.user(world["harbor"], email="pier@harbor.example.com")
        await seed.grant(pier_admin, "location_administrator", world["harbor"], world["pier"])
        await seed.session.commit()
        token = make_token(pier_admin.id)

        response = await client.post(
            f"{API}/users/{pier_admin.id}/roles",
            headers=bearer(token),
            json={
                "role_name": "location_administrator",
                "restaurant_id": world["harbor"].id,
                "location_id": world["dock"].id,
            },
        )

        assert response.status_code == 403
        assert response.json()["reason"] == "self_assignment"
        locations = await client.get(f"{API}/users/{pier_admin.id}/locations", headers=bearer(token))
        assert [loc["location_id"] for loc in locations.json()["locations"]] == [world["pier"].id]

    @pytest.mark.asyncio
    async def test_admin_cannot_revoke_own_role(self, client, world, make_token):
        admin_id = world["harbor_admin"].id
        token = make_token(admin_id)
        response = await client.delete(
            f"{API}/users/{admin_id}/roles/restaurant_administrator", headers=bearer(token)
        )
        assert response.status_code == 403
        assert response.json()["reason"] == "self_assignment"

    @pytest.mark.asyncio
    async def test_staff_cannot_grant_to_colleagues(self, client, world, make_token):
        token = make_token(world["waiter"].id)
        response = await client.post(
            f"{API}/users/{world['harbor_admin'].id}/roles",
            headers=bearer(token),
            json={
                "role_name": "waiter",
                "restaurant_id": world["harbor"].id,
                "location_id": world["dock"].id,
            },
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_admin_cannot_grant_into_other_restaurant(self, client, world, make_token):
        token = make_token(world["harbor_admin"].id)
        response = await client.post(
            f"{API}/users/{world['summit_cook'].id}/roles",
            headers=bearer(token),
            json={
                "role_name": "waiter",
                "restaurant_id": world["summit"].id,
                "location_id": world["peak"].id,
            },
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_unknown_role(self, client, world, make_token):
        token = make_token(world["superadmin"].id)
        response = await client.post(
            f"{API}/users/{world['waiter'].id}/roles",
            headers=bearer(token),
            json={"role_name": "sommelier", "restaurant_id": world["harbor"].id},
        )
        assert response.status_code == 404


class TestAssignableRoles:
    @pytest.mark.asyncio
    async def test_restaurant_admin(self, client, world, make_token):
        token = make_token(world["harbor_admin"].id)
        response = await client.get(f"{API}/roles/assignable", headers=bearer(token))
        assert response.status_code == 200
        names = [item["name"] for item in response.json()["items"]]
        assert names[0] == "restaurant_administrator"
        assert "superadmin" not in names

    @pytest.mark.asyncio
    async def test_staff(self, client, world, make_token):
        token = make_token(world["waiter"].id)
        response = await client.get(f"{API}/roles/assignable", headers=bearer(token))
        assert response.json() == {"items": [], "total": 0}


class TestServiceEndpoints:
    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_correlation_id_is_echoed(self, client):
        response = await client.get("/health", headers={"X-Correlation-ID": "cid_test"})
        assert response.headers["X-Correlation-ID"] == "cid_test"
