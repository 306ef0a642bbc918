"""SQLAlchemy models for restaurants and their locations.

The authorization core only reads these tables for identifiers and names;
the restaurant-management layer owns them.
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from restoauth.infrastructure.persistence.database import Base


class RestaurantModel(Base):
    """SQLAlchemy model for the restaurants table."""

    __tablename__ = "restaurants"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    restaurant_name: Mapped[str] = mapped_column(String(255), nullable=False)
    restaurant_url_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    locations: Mapped[list["RestaurantLocationModel"]] = relationship(
        "RestaurantLocationModel",
        back_populates="restaurant",
    )

    def __repr__(self) -> str:
        return f"<Restaurant(id={self.id}, name={self.restaurant_name})>"


class RestaurantLocationModel(Base):
    """SQLAlchemy model for the restaurant_locations table."""

    __tablename__ = "restaurant_locations"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    restaurant_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("restaurants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    restaurant: Mapped[RestaurantModel] = relationship(
        "RestaurantModel",
        back_populates="locations",
    )

    def __repr__(self) -> str:
        return f"<RestaurantLocation(id={self.id}, name={self.name})>"
