"""SQLAlchemy models for the restoauth tables.

All models inherit from the Base class defined in database.py.
"""

from restoauth.infrastructure.persistence.models.restaurant import (
    RestaurantLocationModel,
    RestaurantModel,
)
from restoauth.infrastructure.persistence.models.role import RoleModel
from restoauth.infrastructure.persistence.models.user import UserModel
from restoauth.infrastructure.persistence.models.user_role import UserRoleModel

__all__ = [
    "RestaurantLocationModel",
    "RestaurantModel",
    "RoleModel",
    "UserModel",
    "UserRoleModel",
]
