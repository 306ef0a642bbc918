"""SQLAlchemy model for the roles table.

Roles are reference data shared by every restaurant; they are seeded from
the default catalog and are not edited while serving requests.
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from restoauth.domain.entities.role import Role, RoleScope
from restoauth.infrastructure.persistence.database import Base


class RoleModel(Base):
    """SQLAlchemy model for the roles table.

    Attributes:
        id: Primary key (UUID string).
        name: Unique lowercase role key.
        display_name: Human-readable name.
        description: Optional description of the role's purpose.
        level: Hierarchy level, higher is more privileged.
        scope: 'global', 'restaurant' or 'location'.
        is_admin_role: Whether the role grants administrative access.
        can_manage_users: Whether holders may manage users.
        can_manage_locations: Whether holders may manage locations.
        is_active: Inactive roles cannot be assigned.
    """

    __tablename__ = "roles"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    name: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        unique=True,
        index=True,
        comment="Role name (e.g., 'restaurant_administrator')",
    )
    display_name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    level: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    scope: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=RoleScope.LOCATION.value,
        comment="global, restaurant or location",
    )
    is_admin_role: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    can_manage_users: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    can_manage_locations: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def to_entity(self) -> Role:
        return Role(
            id=self.id,
            name=self.name,
            display_name=self.display_name,
            level=self.level,
            scope=RoleScope(self.scope),
            is_admin_role=self.is_admin_role,
            can_manage_users=self.can_manage_users,
            can_manage_locations=self.can_manage_locations,
            description=self.description,
            is_active=self.is_active,
        )

    @classmethod
    def from_entity(cls, role: Role) -> "RoleModel":
        return cls(
            id=role.id,
            name=role.name,
            display_name=role.display_name,
            description=role.description,
            level=role.level,
            scope=role.scope.value,
            is_admin_role=role.is_admin_role,
            can_manage_users=role.can_manage_users,
            can_manage_locations=role.can_manage_locations,
            is_active=role.is_active,
        )

    def __repr__(self) -> str:
        return f"<Role(id={self.id}, name={self.name}, level={self.level})>"
