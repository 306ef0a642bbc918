"""Identifier validation.

Every user, role, restaurant, location and assignment ID is a UUID.
"""

import uuid
from typing import Any

from restoauth.domain.exceptions import InvalidIdentifier


def validate_identifier(value: Any, kind: str = "user") -> str:
    """Return the canonical string form of a UUID identifier.

    Args:
        value: Candidate identifier.
        kind: What the identifier names, used in the error message.

    Returns:
        Lowercase hyphenated UUID string.

    Raises:
        InvalidIdentifier: If the value is not a UUID.
    """
    if isinstance(value, uuid.UUID):
        return str(value)
    if not isinstance(value, str) or not value.strip():
        raise InvalidIdentifier(kind, value)
    try:
        return str(uuid.UUID(value.strip()))
    except ValueError as e:
        raise InvalidIdentifier(kind, value) from e


def validate_optional_identifier(value: Any, kind: str) -> str | None:
    """Like validate_identifier, but passes None through."""
    if value is None:
        return None
    return validate_identifier(value, kind)
