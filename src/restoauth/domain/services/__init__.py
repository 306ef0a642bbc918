"""Domain services for role resolution, location access and authorization."""

from restoauth.domain.services.authorization_gate import (
    AuthorizationGate,
    authorization_gate,
    can_access_restaurant,
    can_access_user,
)
from restoauth.domain.services.authorization_service import (
    AuthorizationService,
    UserAuthorizationSummary,
)
from restoauth.domain.services.identifiers import (
    validate_identifier,
    validate_optional_identifier,
)
from restoauth.domain.services.location_access_resolver import (
    LocationAccessResolver,
    grant_level,
)
from restoauth.domain.services.role_assignment_service import RoleAssignmentService
from restoauth.domain.services.role_catalog import (
    DEFAULT_ROLES,
    RoleCatalog,
    precedence_key,
    sort_by_precedence,
)
from restoauth.domain.services.role_resolver import RoleResolver, guarded_store_call

__all__ = [
    "AuthorizationGate",
    "AuthorizationService",
    "DEFAULT_ROLES",
    "LocationAccessResolver",
    "RoleAssignmentService",
    "RoleCatalog",
    "RoleResolver",
    "UserAuthorizationSummary",
    "authorization_gate",
    "can_access_restaurant",
    "can_access_user",
    "grant_level",
    "guarded_store_call",
    "precedence_key",
    "sort_by_precedence",
    "validate_identifier",
    "validate_optional_identifier",
]
