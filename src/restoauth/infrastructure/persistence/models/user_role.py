"""SQLAlchemy model for the user_roles table.

Each row is one role grant. Rows are deactivated, never deleted, so the
table doubles as the assignment audit history.
"""

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Index, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from restoauth.domain.entities.role_assignment import RoleAssignment, utc_now
from restoauth.infrastructure.persistence.database import Base
from restoauth.infrastructure.persistence.models.restaurant import (
    RestaurantLocationModel,
    RestaurantModel,
)
from restoauth.infrastructure.persistence.models.role import RoleModel


class UserRoleModel(Base):
    """SQLAlchemy model for the user_roles table.

    Attributes:
        id: Primary key (UUID string).
        user_id: User holding the role.
        role_id: Granted role.
        restaurant_id: Restaurant scope, if any.
        location_id: Location scope, if any.
        assigned_by: Granting user (audit).
        is_primary_role: Explicit primary marker (display only).
        permissions_override: Free-form capability overrides.
        is_active: False once revoked.
        valid_from: Start of validity.
        valid_until: End of validity, None for open-ended.
    """

    __tablename__ = "user_roles"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("roles.id"),
        nullable=False,
        index=True,
    )
    restaurant_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("restaurants.id", ondelete="CASCADE"),
        nullable=True,
    )
    location_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("restaurant_locations.id", ondelete="CASCADE"),
        nullable=True,
    )
    assigned_by: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    is_primary_role: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    permissions_override: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    valid_from: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )
    valid_until: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=func.now(),
        onupdate=utc_now,
    )

    role: Mapped[RoleModel] = relationship(RoleModel)
    restaurant: Mapped[RestaurantModel | None] = relationship(RestaurantModel)
    location: Mapped[RestaurantLocationModel | None] = relationship(RestaurantLocationModel)

    __table_args__ = (
        Index("ix_user_roles_user_active", "user_id", "is_active"),
    )

    def to_entity(self) -> RoleAssignment:
        return RoleAssignment(
            id=self.id,
            user_id=self.user_id,
            role_id=self.role_id,
            restaurant_id=self.restaurant_id,
            location_id=self.location_id,
            assigned_by=self.assigned_by,
            permissions_override=self.permissions_override,
            is_active=self.is_active,
            valid_from=self.valid_from,
            valid_until=self.valid_until,
            is_primary_role=self.is_primary_role,
            created_at=self.created_at,
        )

    def __repr__(self) -> str:
        return (
            f"<UserRole(id={self.id}, user_id={self.user_id}, role_id={self.role_id}, "
            f"active={self.is_active})>"
        )
