"""Role catalog API routes."""

from fastapi import APIRouter, status

from restoauth.core.logging import get_logger
from restoauth.domain.services import RoleAssignmentService
from restoauth.infrastructure.api.dependencies import Actor, DbSession
from restoauth.infrastructure.api.schemas import (
    AssignableRoleResponse,
    AssignableRolesResponse,
)

logger = get_logger(__name__)

router = APIRouter()


@router.get(
    "/assignable",
    status_code=status.HTTP_200_OK,
    response_model=AssignableRolesResponse,
)
async def list_assignable_roles(actor: Actor, session: DbSession) -> AssignableRolesResponse:
    """List the roles the caller may grant to other users.

    Args:
        actor: Authenticated caller.
        session: Database session.

    Returns:
        Assignable roles, most privileged first.
    """
    service = RoleAssignmentService(session)
    roles = await service.get_assignable_roles(actor)

    items = [
        AssignableRoleResponse(
            name=role.name,
            display_name=role.display_name,
            level=role.level,
            scope=role.scope.value,
            is_admin_role=role.is_admin_role,
            description=role.description,
        )
        for role in roles
    ]

    logger.debug("Assignable roles listed", count=len(items), requested_by=actor.id)

    return AssignableRolesResponse(items=items, total=len(items))
