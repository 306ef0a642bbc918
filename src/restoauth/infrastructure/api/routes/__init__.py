"""API routes for restoauth."""

from .roles_router import router as roles_router
from .users_router import router as users_router

__all__ = [
    "roles_router",
    "users_router",
]
