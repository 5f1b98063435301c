"""
SQLAlchemy Database Models

Two durable entities:
- Restaurant: profile keyed by an immutable durable identity (UUID4 string)
- RestaurantMenu: at most one menu document per restaurant, items kept as JSON
"""

import re
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, Text, Boolean, JSON, ForeignKey
from sqlalchemy.orm import validates

from app.database import Base
from app.core.exceptions import ValidationFailure

CONTACT_NO_PATTERN = re.compile(r"^\d{10}$")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Restaurant(Base):
    """
    Restaurant profile.

    ``restaurant_id`` is the durable identity: generated once at creation and
    the only key ever used to look a restaurant up. The integer ``id`` is the
    storage row key and only drives listing order.
    """
    __tablename__ = "restaurants"

    id = Column(Integer, primary_key=True, autoincrement=True)
    restaurant_id = Column(String(36), nullable=False, unique=True, index=True)

    # =========================================================================
    # PROFILE
    # =========================================================================
    name = Column(String(200), nullable=False)
    contact_no = Column(String(10), nullable=False)
    address = Column(String(500), nullable=False)
    menu_summary = Column(Text, nullable=False)

    # GeoJSON point: {"type": "Point", "coordinates": [longitude, latitude]}
    location = Column(JSON, nullable=True)

    # =========================================================================
    # STATUS FLAGS
    # =========================================================================
    is_online = Column(Boolean, default=False, nullable=False, index=True)
    menu_uploaded = Column(Boolean, default=False, nullable=False)

    # =========================================================================
    # TIMESTAMPS
    # =========================================================================
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    @validates("name", "address", "menu_summary")
    def validate_required_text(self, key: str, value):
        if value is None or not str(value).strip():
            raise ValidationFailure(f"Path `{key}` is required.")
        return str(value).strip()

    @validates("contact_no")
    def validate_contact_no(self, key: str, value):
        if value is None or not CONTACT_NO_PATTERN.match(str(value)):
            raise ValidationFailure("Please add a valid 10-digit contact number")
        return str(value)

    def __repr__(self):
        return f"<Restaurant {self.restaurant_id} - {self.name}>"


class RestaurantMenu(Base):
    """
    Menu document for one restaurant.

    Writes are whole-document upserts keyed on ``restaurant_id``; ``items``
    holds the normalized output of the menu merge engine.
    """
    __tablename__ = "restaurant_menus"

    id = Column(Integer, primary_key=True, autoincrement=True)
    restaurant_id = Column(
        String(36),
        ForeignKey("restaurants.restaurant_id"),
        nullable=False,
        unique=True,
        index=True,
    )
    restaurant_name = Column(String(200), nullable=False)
    items = Column(JSON, nullable=False, default=list)

    last_updated = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    def __repr__(self):
        return f"<RestaurantMenu {self.restaurant_id} - {len(self.items or [])} items>"
