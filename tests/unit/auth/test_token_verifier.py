"""Unit tests for access token verification."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from restoauth.infrastructure.auth import (
    InvalidTokenError,
    TokenExpiredError,
    TokenVerifier,
)

SECRET = "test-secret"


@pytest.fixture
def verifier():
    return TokenVerifier(secret_key=SECRET, issuer="restoauth", algorithm="HS256")


def encode(payload: dict, secret: str = SECRET) -> str:
    return jwt.encode(payload, secret, algorithm="HS256")


def claims(**overrides) -> dict:
    now = datetime.now(timezone.utc)
    data = {"sub": "user-1", "iss": "restoauth", "iat": now, "exp": now + timedelta(minutes=5)}
    data.update(overrides)
    return data


class TestTokenVerifier:
    def test_valid_token_yields_subject(self, verifier):
        assert verifier.get_subject(encode(claims())) == "user-1"

    def test_expired_token(self, verifier):
        token = encode(claims(exp=datetime.now(timezone.utc) - timedelta(seconds=10)))
        with pytest.raises(TokenExpiredError):
            verifier.decode_token(token)

    def test_wrong_signature(self, verifier):
        with pytest.raises(InvalidTokenError):
            verifier.decode_token(encode(claims(), secret="other"))

    def test_wrong_issuer(self, verifier):
        with pytest.raises(InvalidTokenError):
            verifier.decode_token(encode(claims(iss="someone-else")))

    def test_missing_subject(self, verifier):
        payload = claims()
        del payload["sub"]
        with pytest.raises(InvalidTokenError):
            verifier.get_subject(encode(payload))

    def test_garbage(self, verifier):
        with pytest.raises(InvalidTokenError):
            verifier.decode_token("not.a.token")
