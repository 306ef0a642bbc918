"""User authorization API routes.

Exposes a user's effective roles and accessible locations, and lets
administrators grant and revoke roles.
"""

from fastapi import APIRouter, Query, status

from restoauth.core.logging import get_logger
from restoauth.domain.entities.authorization import Operation
from restoauth.domain.services import (
    AuthorizationService,
    RoleAssignmentService,
    authorization_gate,
)
from restoauth.domain.exceptions import Forbidden
from restoauth.infrastructure.api.dependencies import Actor, DbSession
from restoauth.infrastructure.api.schemas import (
    AssignRoleRequest,
    LocationViewResponse,
    RevokeRoleResponse,
    RoleAssignmentResponse,
    RoleViewResponse,
    UserAuthorizationResponse,
    UserLocationsResponse,
    UserRolesResponse,
)

logger = get_logger(__name__)

router = APIRouter()


@router.get(
    "/{user_id}/roles",
    status_code=status.HTTP_200_OK,
    response_model=UserRolesResponse,
    responses={
        400: {"description": "Malformed user ID"},
        403: {"description": "Not allowed to view this user"},
        404: {"description": "User not found"},
        503: {"description": "Role store unavailable"},
    },
)
async def get_user_roles(user_id: str, actor: Actor, session: DbSession) -> UserRolesResponse:
    """List a user's effective roles in precedence order."""
    service = AuthorizationService(session)
    target = await service.get_user_ref(user_id)
    authorization_gate.can_access_user(actor, target, Operation.READ)

    resolution = await service.role_resolver.resolve_roles(target.id)
    primary = resolution.primary_role
    return UserRolesResponse(
        user_id=resolution.user_id,
        primary_role=RoleViewResponse.model_validate(primary.to_view()) if primary else None,
        roles=[RoleViewResponse.model_validate(r.to_view()) for r in resolution.roles],
        is_admin=resolution.is_admin,
        is_super_admin=resolution.is_super_admin,
    )


@router.get(
    "/{user_id}/locations",
    status_code=status.HTTP_200_OK,
    response_model=UserLocationsResponse,
    responses={
        400: {"description": "Malformed user ID"},
        403: {"description": "Not allowed to view this user"},
        404: {"description": "User not found"},
        503: {"description": "Role store unavailable"},
    },
)
async def get_user_locations(
    user_id: str, actor: Actor, session: DbSession
) -> UserLocationsResponse:
    """List the locations a user can reach and their default location."""
    service = AuthorizationService(session)
    target = await service.get_user_ref(user_id)
    authorization_gate.can_access_user(actor, target, Operation.READ)

    summary = await service.describe_user(target.id)
    return UserLocationsResponse(
        user_id=summary.user_id,
        locations=[LocationViewResponse.model_validate(loc.to_view()) for loc in summary.locations],
        primary_location=(
            LocationViewResponse.model_validate(summary.primary_location.to_view())
            if summary.primary_location
            else None
        ),
    )


@router.get(
    "/{user_id}/authorization",
    status_code=status.HTTP_200_OK,
    response_model=UserAuthorizationResponse,
    responses={
        400: {"description": "Malformed user ID"},
        403: {"description": "Not allowed to view this user"},
        404: {"description": "User not found"},
        503: {"description": "Role store unavailable"},
    },
)
async def get_user_authorization(
    user_id: str, actor: Actor, session: DbSession
) -> UserAuthorizationResponse:
    """Combined roles and locations summary for one user."""
    service = AuthorizationService(session)
    target = await service.get_user_ref(user_id)
    authorization_gate.can_access_user(actor, target, Operation.READ)

    summary = await service.describe_user(target.id)
    return UserAuthorizationResponse.model_validate(summary.to_dict(), from_attributes=True)


@router.post(
    "/{user_id}/roles",
    status_code=status.HTTP_201_CREATED,
    response_model=RoleAssignmentResponse,
    responses={
        400: {"description": "Malformed identifier"},
        403: {"description": "Not allowed to grant this role"},
        404: {"description": "User or role not found"},
        422: {"description": "Assignment does not fit the role's scope"},
    },
)
async def assign_user_role(
    user_id: str,
    request: AssignRoleRequest,
    actor: Actor,
    session: DbSession,
) -> RoleAssignmentResponse:
    """Grant a role to a user.

    The caller must be allowed to update the user, administer the grant's
    restaurant, and hold a role able to grant the requested one. Only
    super-admins may grant roles to themselves.
    """
    authorization_service = AuthorizationService(session)
    assignment_service = RoleAssignmentService(session)

    target = await authorization_service.get_user_ref(user_id)
    role = await assignment_service.authorize_assignment(
        actor, target, request.role_name, restaurant_id=request.restaurant_id
    )

    assignment = await assignment_service.assign_role(
        target.id,
        role.name,
        restaurant_id=request.restaurant_id,
        location_id=request.location_id,
        assigned_by=actor.id,
        valid_until=request.valid_until,
        is_primary_role=request.is_primary_role,
    )
    await session.commit()

    return RoleAssignmentResponse(
        id=assignment.id,
        user_id=assignment.user_id,
        role_name=role.name,
        restaurant_id=assignment.restaurant_id,
        location_id=assignment.location_id,
        assigned_by=assignment.assigned_by,
        is_active=assignment.is_active,
        is_primary_role=assignment.is_primary_role,
        valid_from=assignment.valid_from,
        valid_until=assignment.valid_until,
    )


@router.delete(
    "/{user_id}/roles/{role_name}",
    status_code=status.HTTP_200_OK,
    response_model=RevokeRoleResponse,
    responses={
        400: {"description": "Malformed identifier"},
        403: {"description": "Not allowed to revoke this role"},
        404: {"description": "User or role not found"},
    },
)
async def revoke_user_role(
    user_id: str,
    role_name: str,
    actor: Actor,
    session: DbSession,
    restaurant_id: str | None = Query(default=None),
    location_id: str | None = Query(default=None),
) -> RevokeRoleResponse:
    """Revoke a user's active assignments of a role.

    Without restaurant/location filters every scope of the role is revoked.
    Non-super-admins must name a restaurant they administer and cannot
    revoke their own roles.
    """
    authorization_service = AuthorizationService(session)
    assignment_service = RoleAssignmentService(session)

    target = await authorization_service.get_user_ref(user_id)
    if restaurant_id is None and not actor.is_super_admin:
        restaurant_id = target.restaurant_id
        if restaurant_id is None:
            error = Forbidden(
                operation="revoke_role",
                actor_id=actor.id,
                reason="restaurant_required",
                target_id=target.id,
                message="A restaurant must be given to revoke this role",
            )
            logger.warning("Access denied", **error.to_audit_dict())
            raise error

    role = await assignment_service.authorize_assignment(
        actor, target, role_name, restaurant_id=restaurant_id, operation="revoke_role"
    )
    revoked = await assignment_service.revoke_role(
        target.id, role.name, restaurant_id=restaurant_id, location_id=location_id
    )
    await session.commit()

    return RevokeRoleResponse(user_id=target.id, role_name=role.name, revoked=revoked)
