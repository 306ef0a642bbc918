"""Unit tests for role and assignment entities."""

from datetime import datetime, timedelta, timezone

import pytest

from restoauth.domain.entities import (
    Role,
    RoleAssignment,
    RoleScope,
    as_utc,
    is_effective,
    is_expired,
)

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def make_assignment(**overrides) -> RoleAssignment:
    data = {
        "id": "a1",
        "user_id": "u1",
        "role_id": "r1",
        "valid_from": NOW - timedelta(days=30),
    }
    data.update(overrides)
    return RoleAssignment(**data)


class TestIsEffective:
    """Tests for the single effectiveness rule."""

    def test_active_open_ended_assignment_is_effective(self):
        assert is_effective(make_assignment(), NOW) is True

    def test_revoked_assignment_is_not_effective(self):
        assert is_effective(make_assignment(is_active=False), NOW) is False

    def test_future_expiry_is_effective(self):
        assignment = make_assignment(valid_until=NOW + timedelta(seconds=1))
        assert is_effective(assignment, NOW) is True

    def test_expiry_equal_to_now_is_not_effective(self):
        assignment = make_assignment(valid_until=NOW)
        assert is_effective(assignment, NOW) is False
        assert is_expired(assignment, NOW) is True

    def test_naive_expiry_is_treated_as_utc(self):
        naive = (NOW - timedelta(hours=1)).replace(tzinfo=None)
        assert is_expired(make_assignment(valid_until=naive), NOW) is True

    def test_future_valid_from_does_not_affect_effectiveness(self):
        assignment = make_assignment(valid_from=NOW + timedelta(days=1))
        assert is_effective(assignment, NOW) is True


class TestRoleAssignmentValidation:
    def test_location_without_restaurant_is_rejected(self):
        with pytest.raises(ValueError, match="requires a restaurant"):
            make_assignment(location_id="l1")

    def test_user_id_is_required(self):
        with pytest.raises(ValueError, match="User ID is required"):
            make_assignment(user_id="")


class TestRole:
    def test_scope_string_is_coerced(self):
        role = Role(id="r1", name="waiter", display_name="Waiter", level=1, scope="location")
        assert role.scope is RoleScope.LOCATION
        assert role.requires_location is True

    def test_uppercase_name_is_rejected(self):
        with pytest.raises(ValueError, match="lowercase"):
            Role(id="r1", name="Waiter", display_name="Waiter", level=1, scope=RoleScope.LOCATION)

    def test_level_must_be_positive(self):
        with pytest.raises(ValueError, match="positive"):
            Role(id="r1", name="waiter", display_name="Waiter", level=0, scope=RoleScope.LOCATION)


def test_as_utc_keeps_aware_values():
    aware = datetime(2025, 1, 1, tzinfo=timezone.utc)
    assert as_utc(aware) == aware
    assert as_utc(aware.replace(tzinfo=None)).tzinfo is timezone.utc
