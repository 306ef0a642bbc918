"""Authorization gate for user and restaurant level operations.

The gate is pure: it decides from an already-built AuthContext and never
touches the store. Denials raise Forbidden and are logged at warning level.
"""

from restoauth.core.logging import get_logger
from restoauth.domain.entities.authorization import AuthContext, Operation, UserRef
from restoauth.domain.exceptions import Forbidden
from restoauth.domain.services.identifiers import validate_identifier

logger = get_logger(__name__)

SELF_DESTRUCTIVE_MESSAGE = "You cannot deactivate or delete your own account"
CROSS_RESTAURANT_MESSAGE = "Access denied: user belongs to a different restaurant"
RESTAURANT_DENIED_MESSAGE = "Access denied: insufficient permissions for this restaurant"


class AuthorizationGate:
    """Checks whether an actor may act on a user or a restaurant.

    User operations are allowed, in order, when:

    1. the actor is a super-admin, or
    2. the actor administers the target's restaurant, or
    3. the actor targets themselves with a non-destructive operation.

    Deactivating or deleting one's own account is refused before any of
    these rules apply.
    """

    def can_access_user(
        self,
        actor: AuthContext,
        target: UserRef,
        operation: Operation | str,
    ) -> None:
        """Allow or refuse a user-level operation.

        Args:
            actor: The acting user.
            target: The user being acted on.
            operation: One of read, update, deactivate, delete.

        Raises:
            Forbidden: If the operation is not allowed.
            ValueError: If the operation is unknown.
        """
        operation = Operation(operation)
        is_self = actor.id == target.id

        if is_self and operation.is_destructive:
            self._deny(
                operation.value,
                actor,
                reason="self_destructive_operation",
                target_id=target.id,
                restaurant_id=target.restaurant_id,
                message=SELF_DESTRUCTIVE_MESSAGE,
            )

        if actor.is_super_admin:
            self._allow(operation.value, actor, "super_admin", target_id=target.id)
            return

        if target.restaurant_id is not None and target.restaurant_id in actor.admin_restaurant_ids:
            self._allow(operation.value, actor, "restaurant_admin", target_id=target.id)
            return

        if is_self:
            self._allow(operation.value, actor, "self", target_id=target.id)
            return

        self._deny(
            operation.value,
            actor,
            reason="cross_restaurant" if actor.is_admin else "not_admin",
            target_id=target.id,
            restaurant_id=target.restaurant_id,
            message=CROSS_RESTAURANT_MESSAGE,
        )

    def can_access_restaurant(self, actor: AuthContext, restaurant_id: str) -> None:
        """Allow or refuse restaurant-level access.

        Super-admins reach every restaurant. Everyone else reaches only the
        restaurants they administer through a restaurant-scoped admin role.

        Raises:
            InvalidIdentifier: If restaurant_id is not a UUID.
            Forbidden: If access is not allowed.
        """
        restaurant_id = validate_identifier(restaurant_id, "restaurant")

        if actor.is_super_admin:
            self._allow("restaurant_access", actor, "super_admin", restaurant_id=restaurant_id)
            return

        if restaurant_id in actor.admin_restaurant_ids:
            self._allow(
                "restaurant_access", actor, "restaurant_admin", restaurant_id=restaurant_id
            )
            return

        self._deny(
            "restaurant_access",
            actor,
            reason="not_restaurant_admin",
            restaurant_id=restaurant_id,
            message=RESTAURANT_DENIED_MESSAGE,
        )

    def is_user_access_allowed(
        self, actor: AuthContext, target: UserRef, operation: Operation | str
    ) -> bool:
        """Boolean form of can_access_user."""
        try:
            self.can_access_user(actor, target, operation)
        except Forbidden:
            return False
        return True

    def is_restaurant_access_allowed(self, actor: AuthContext, restaurant_id: str) -> bool:
        """Boolean form of can_access_restaurant."""
        try:
            self.can_access_restaurant(actor, restaurant_id)
        except Forbidden:
            return False
        return True

    @staticmethod
    def _allow(operation: str, actor: AuthContext, rule: str, **fields: str | None) -> None:
        logger.debug("Access granted", operation=operation, actor_id=actor.id, rule=rule, **fields)

    @staticmethod
    def _deny(
        operation: str,
        actor: AuthContext,
        reason: str,
        message: str,
        target_id: str | None = None,
        restaurant_id: str | None = None,
    ) -> None:
        error = Forbidden(
            operation=operation,
            actor_id=actor.id,
            reason=reason,
            target_id=target_id,
            restaurant_id=restaurant_id,
            message=message,
        )
        logger.warning("Access denied", **error.to_audit_dict())
        raise error


# Global gate instance
authorization_gate = AuthorizationGate()


def can_access_user(actor: AuthContext, target: UserRef, operation: Operation | str) -> None:
    """Module-level shortcut for AuthorizationGate.can_access_user."""
    authorization_gate.can_access_user(actor, target, operation)


def can_access_restaurant(actor: AuthContext, restaurant_id: str) -> None:
    """Module-level shortcut for AuthorizationGate.can_access_restaurant."""
    authorization_gate.can_access_restaurant(actor, restaurant_id)
