"""Unit tests for configuration."""

import pytest
from pydantic import ValidationError

from restoauth.core.config import Settings


def test_defaults():
    settings = Settings(_env_file=None)
    assert settings.api_prefix == "/api/v1"
    assert settings.resolution_timeout_seconds == 5.0
    assert settings.seed_default_roles is True
    assert settings.is_development is True


def test_environment_variables_use_prefix(monkeypatch):
    monkeypatch.setenv("RESTOAUTH_ENVIRONMENT", "testing")
    monkeypatch.setenv("RESTOAUTH_RESOLUTION_TIMEOUT_SECONDS", "0.5")
    settings = Settings(_env_file=None)
    assert settings.is_testing is True
    assert settings.resolution_timeout_seconds == 0.5


def test_timeout_must_be_positive():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, resolution_timeout_seconds=0)


def test_sqlite_rejects_multiple_workers():
    with pytest.raises(ValidationError, match="SQLite does not support"):
        Settings(_env_file=None, workers=4)
