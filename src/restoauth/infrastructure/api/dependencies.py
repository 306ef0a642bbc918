"""FastAPI dependencies for authentication and authorization.

Extracts the acting user from the bearer token and builds their
authorization context once per request.
"""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from restoauth.core.logging import get_logger
from restoauth.domain.entities.authorization import AuthContext
from restoauth.domain.exceptions import InvalidIdentifier, UserNotFoundError
from restoauth.domain.services import AuthorizationService
from restoauth.infrastructure.auth import (
    InvalidTokenError,
    TokenExpiredError,
    token_verifier,
)
from restoauth.infrastructure.persistence.database import get_db_session

logger = get_logger(__name__)

DbSession = Annotated[AsyncSession, Depends(get_db_session)]


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user_id(
    authorization: Annotated[str | None, Header()] = None,
) -> str:
    """Extract and validate the acting user ID from the Authorization header.

    Args:
        authorization: The Authorization header value (e.g., "Bearer <token>").

    Returns:
        The token subject.

    Raises:
        HTTPException: 401 if the token is missing, invalid, or expired.
    """
    if authorization is None:
        logger.info("Authentication failed: missing Authorization header")
        raise _unauthorized("Missing Authorization header")

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        logger.info("Authentication failed: invalid Authorization header format")
        raise _unauthorized("Could not validate credentials")

    try:
        return token_verifier.get_subject(parts[1])
    except TokenExpiredError:
        logger.info("Authentication failed: token expired")
        raise _unauthorized("Token has expired")
    except InvalidTokenError as e:
        logger.info("Authentication failed: invalid token", error=str(e))
        raise _unauthorized("Could not validate credentials")


CurrentUserId = Annotated[str, Depends(get_current_user_id)]


async def get_auth_context(user_id: CurrentUserId, session: DbSession) -> AuthContext:
    """Resolve the acting user's roles into an AuthContext.

    Raises:
        HTTPException: 401 if the token subject is not a known user.
        ResolutionFailed: If the store cannot be read (mapped to 503).
    """
    service = AuthorizationService(session)
    try:
        return await service.build_auth_context(user_id)
    except (InvalidIdentifier, UserNotFoundError):
        logger.info("Authentication failed: unknown token subject", user_id=user_id)
        raise _unauthorized("Could not validate credentials")


Actor = Annotated[AuthContext, Depends(get_auth_context)]
