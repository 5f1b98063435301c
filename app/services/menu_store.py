"""
Menu Store

One menu document per restaurant, written as a whole-document upsert keyed
on the restaurant's durable identity.

The upsert and the owning restaurant's ``menu_uploaded`` flag are committed
in the same transaction: either both are written or neither is. Two first
writes racing for the same restaurant both see no document; the loser hits
the unique constraint on ``restaurant_id`` and is replayed once as an update.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import MenuNotFoundError
from app.models import Restaurant, RestaurantMenu, utcnow
from app.services.menu_merge import MenuItem

logger = logging.getLogger(__name__)


class MenuStore:
    """Menu document persistence bound to one database session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find(self, durable_id: str) -> RestaurantMenu | None:
        result = await self.session.execute(
            select(RestaurantMenu).where(RestaurantMenu.restaurant_id == durable_id)
        )
        return result.scalar_one_or_none()

    async def get(self, durable_id: str) -> RestaurantMenu:
        """Fetch the menu of a restaurant or raise MenuNotFoundError."""
        menu = await self.find(durable_id)
        if menu is None:
            raise MenuNotFoundError(durable_id)
        return menu

    async def upsert(self, restaurant: Restaurant, items: list[MenuItem]) -> RestaurantMenu:
        """
        Replace the whole menu of ``restaurant`` with ``items``.

        Creates the document when it does not exist yet, and flips
        ``restaurant.menu_uploaded`` to True in the same commit. On failure
        the transaction is rolled back and the flag keeps its previous value.

        Args:
            restaurant: Owning restaurant, already loaded in this session
            items: Normalized items from ``merge_menu_items``
        """
        # Read before anything can expire the instance
        durable_id = restaurant.restaurant_id

        try:
            try:
                menu = await self._write(restaurant, durable_id, items)
            except IntegrityError:
                await self.session.rollback()
                logger.warning(
                    f"Menu for restaurant {durable_id} was created concurrently, "
                    f"retrying as an update"
                )
                await self.session.refresh(restaurant)
                menu = await self._write(restaurant, durable_id, items)
        except Exception:
            await self.session.rollback()
            logger.error(f"Menu upsert failed for restaurant {durable_id}, rolled back")
            raise

        await self.session.refresh(menu)
        logger.info(
            f"Menu for restaurant {durable_id} saved "
            f"({len(menu.items)} items)"
        )
        return menu

    async def _write(
        self,
        restaurant: Restaurant,
        durable_id: str,
        items: list[MenuItem],
    ) -> RestaurantMenu:
        menu = await self.find(durable_id)
        if menu is None:
            menu = RestaurantMenu(restaurant_id=durable_id)
            self.session.add(menu)

        menu.restaurant_name = restaurant.name
        menu.items = list(items)
        menu.last_updated = utcnow()
        restaurant.menu_uploaded = True

        await self.session.commit()
        return menu
