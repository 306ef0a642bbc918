"""Pytest configuration for unit tests."""

import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from restoauth.domain.entities import AuthContext, ResolvedRole, RoleAssignment
from restoauth.domain.services.role_catalog import DEFAULT_ROLES

ROLES_BY_NAME = {role.name: role for role in DEFAULT_ROLES}


@pytest.fixture
def mock_session():
    """Create a mock database session."""
    return AsyncMock(spec=AsyncSession)


@pytest.fixture
def make_resolved():
    """Build a ResolvedRole for a catalog role without touching the database."""

    def _make_resolved(
        role_name: str,
        user_id: str | None = None,
        restaurant_id: str | None = None,
        location_id: str | None = None,
        valid_from: datetime | None = None,
        assignment_id: str | None = None,
    ) -> ResolvedRole:
        role = ROLES_BY_NAME[role_name]
        valid_from = valid_from or datetime(2024, 1, 1, tzinfo=timezone.utc)
        assignment = RoleAssignment(
            id=assignment_id or str(uuid.uuid4()),
            user_id=user_id or str(uuid.uuid4()),
            role_id=role.id,
            restaurant_id=restaurant_id,
            location_id=location_id,
            valid_from=valid_from,
            created_at=valid_from,
        )
        return ResolvedRole(assignment=assignment, role=role)

    return _make_resolved


@pytest.fixture
def make_actor(make_resolved):
    """Build an AuthContext holding the given (role_name, restaurant_id) grants."""

    def _make_actor(
        *grants: tuple[str, str | None],
        actor_id: str | None = None,
        restaurant_id: str | None = None,
    ) -> AuthContext:
        actor_id = actor_id or str(uuid.uuid4())
        roles = tuple(
            make_resolved(name, user_id=actor_id, restaurant_id=grant_restaurant)
            for name, grant_restaurant in grants
        )
        roles = tuple(sorted(roles, key=lambda r: -r.level))
        return AuthContext(id=actor_id, restaurant_id=restaurant_id, effective_roles=roles)

    return _make_actor
