"""
Restaurant Store

Durable CRUD for restaurant profiles, always keyed by the durable identity.
Callers holding an external identifier resolve it through the
IdentifierRegistry before reaching this layer.
"""

import logging
import uuid
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import RestaurantNotFoundError
from app.models import Restaurant

logger = logging.getLogger(__name__)

# Columns a caller may set on create/update
WRITABLE_FIELDS = ("name", "contact_no", "address", "menu_summary", "is_online")


def to_geo_point(location: Optional[dict[str, Any]]) -> Optional[dict[str, Any]]:
    """
    Convert ``{"latitude": .., "longitude": ..}`` to a GeoJSON point.

    Returns None unless both coordinates are present. Coordinates are
    stored longitude first.
    """
    if not location:
        return None
    latitude = location.get("latitude")
    longitude = location.get("longitude")
    if latitude is None or longitude is None:
        return None
    return {"type": "Point", "coordinates": [longitude, latitude]}


class RestaurantStore:
    """Restaurant persistence bound to one database session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, data: dict[str, Any]) -> Restaurant:
        """
        Persist a new restaurant under a freshly generated durable identity.

        Args:
            data: snake_case profile fields; ``location`` as latitude/longitude

        Raises:
            ValidationFailure: If a required field is missing or malformed
        """
        restaurant = Restaurant(
            restaurant_id=str(uuid.uuid4()),
            name=data.get("name"),
            contact_no=data.get("contact_no"),
            address=data.get("address"),
            menu_summary=data.get("menu_summary"),
            is_online=bool(data.get("is_online") or False),
            menu_uploaded=False,
            location=to_geo_point(data.get("location")),
        )

        self.session.add(restaurant)
        await self.session.commit()
        await self.session.refresh(restaurant)

        logger.info(f"Restaurant {restaurant.restaurant_id} created ({restaurant.name})")
        return restaurant

    async def find(self, durable_id: str) -> Optional[Restaurant]:
        result = await self.session.execute(
            select(Restaurant).where(Restaurant.restaurant_id == durable_id)
        )
        return result.scalar_one_or_none()

    async def get(self, durable_id: str) -> Restaurant:
        """Fetch a restaurant or raise RestaurantNotFoundError."""
        restaurant = await self.find(durable_id)
        if restaurant is None:
            raise RestaurantNotFoundError(durable_id)
        return restaurant

    async def list_all(self, online_only: bool = False) -> list[Restaurant]:
        """All restaurants in creation order, optionally only those online."""
        query = select(Restaurant).order_by(Restaurant.id)
        if online_only:
            query = query.where(Restaurant.is_online.is_(True))
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def update(self, durable_id: str, changes: dict[str, Any]) -> Restaurant:
        """
        Replace the supplied fields of a restaurant.

        Fields absent from ``changes`` are left untouched. A supplied
        ``location`` replaces the stored one wholesale; an incomplete one
        (missing latitude or longitude) is ignored.

        Raises:
            RestaurantNotFoundError: If no restaurant has ``durable_id``
            ValidationFailure: If a supplied field is malformed
        """
        restaurant = await self.get(durable_id)

        try:
            for field in WRITABLE_FIELDS:
                if field in changes:
                    setattr(restaurant, field, changes[field])

            if "location" in changes:
                point = to_geo_point(changes["location"])
                if point is not None:
                    restaurant.location = point

            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        await self.session.refresh(restaurant)
        logger.info(f"Restaurant {durable_id} updated: {sorted(changes)}")
        return restaurant

    async def mark_menu_uploaded(self, durable_id: str) -> Restaurant:
        """Set ``menu_uploaded`` on an existing restaurant."""
        restaurant = await self.get(durable_id)
        restaurant.menu_uploaded = True
        await self.session.commit()
        await self.session.refresh(restaurant)

        logger.info(f"Restaurant {durable_id} marked as menu uploaded")
        return restaurant
