"""
                        Services Module

Business logic and external collaborators.

Services:
    - identifiers: external id <-> durable identity registry
    - menu_merge: raw menu submission -> normalized menu items
    - restaurant_store / menu_store: database access by durable identity
    - storage: image uploads (mock / S3)
    - chat: chat completion relay (mock / OpenAI)
"""

from app.services.identifiers import IdentifierRegistry
from app.services.menu_merge import merge_menu_items
from app.services.menu_store import MenuStore
from app.services.restaurant_store import RestaurantStore

__all__ = ["IdentifierRegistry", "merge_menu_items", "MenuStore", "RestaurantStore"]
