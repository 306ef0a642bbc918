"""Access token verification components."""

from restoauth.infrastructure.auth.token_verifier import (
    InvalidTokenError,
    TokenError,
    TokenExpiredError,
    TokenVerifier,
    token_verifier,
)

__all__ = [
    "InvalidTokenError",
    "TokenError",
    "TokenExpiredError",
    "TokenVerifier",
    "token_verifier",
]
