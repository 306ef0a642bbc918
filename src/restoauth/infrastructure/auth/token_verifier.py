"""Access token verification.

Tokens are issued by the authentication service. This module only checks
the signature, expiry and issuer, and extracts the user ID from ``sub``.
"""

from typing import Any

import jwt

from restoauth.core.config import get_settings


class TokenError(Exception):
    """Base exception for token verification errors."""

    pass


class TokenExpiredError(TokenError):
    """Raised when a token has expired."""

    pass


class InvalidTokenError(TokenError):
    """Raised when a token is invalid."""

    pass


class TokenVerifier:
    """Verifies signed access tokens."""

    def __init__(
        self,
        secret_key: str | None = None,
        issuer: str | None = None,
        algorithm: str | None = None,
    ) -> None:
        """Initialize the verifier.

        Args:
            secret_key: Verification key. Defaults to settings.
            issuer: Expected ``iss`` claim. Defaults to settings.
            algorithm: Signing algorithm. Defaults to settings.
        """
        self._secret_key = secret_key
        self._issuer = issuer
        self._algorithm = algorithm

    @property
    def secret_key(self) -> str:
        return self._secret_key or get_settings().secret_key

    @property
    def issuer(self) -> str:
        return self._issuer or get_settings().token_issuer

    @property
    def algorithm(self) -> str:
        return self._algorithm or get_settings().token_algorithm

    def decode_token(self, token: str) -> dict[str, Any]:
        """Decode and validate a token.

        Args:
            token: The encoded token.

        Returns:
            Decoded token payload.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidTokenError: If the token is invalid.
        """
        try:
            return jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError("Token has expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError("Invalid token") from e

    def get_subject(self, token: str) -> str:
        """Validate a token and return its ``sub`` claim."""
        payload = self.decode_token(token)
        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            raise InvalidTokenError("Token has no subject")
        return subject


# Default token verifier instance
token_verifier = TokenVerifier()
