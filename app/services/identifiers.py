"""
Identifier Registry

Presents restaurants to callers under small sequential integers ("external
identifiers") while the durable identity stays the only key used against
storage.

The mapping lives for the lifetime of the process and is rebuilt wholesale
every time restaurants are listed:

    registry = IdentifierRegistry()
    registry.rebuild(restaurants)          # "1" -> first listed, "2" -> ...
    registry.resolve("2")                  # durable identity of the 2nd
    registry.resolve("8f0c...")            # unknown keys fall through as-is
    registry.reverse_lookup("8f0c...")     # -> 2, or None

One instance is created at startup and shared by every request. There is no
locking or versioning: a rebuild invalidates every external identifier
handed out before it, and a stale identifier resolves to itself, which then
matches no durable identity and surfaces as not-found.
"""

import logging
from typing import Iterable, Optional, Protocol

logger = logging.getLogger(__name__)


class HasDurableId(Protocol):
    restaurant_id: str


class IdentifierRegistry:
    """Process-wide external id <-> durable identity mapping."""

    def __init__(self) -> None:
        self._mapping: dict[str, str] = {}

    @property
    def size(self) -> int:
        """Number of external identifiers handed out by the last rebuild."""
        return len(self._mapping)

    def rebuild(self, restaurants: Iterable[HasDurableId]) -> dict[str, str]:
        """
        Replace the mapping with one built from ``restaurants``.

        The ``i``-th restaurant (0-based, in the order supplied) receives
        external identifier ``i + 1``. The registry never reorders its input.

        Returns:
            A copy of the new mapping (external id string -> durable id).
        """
        self._mapping.clear()
        for index, restaurant in enumerate(restaurants):
            self._mapping[str(index + 1)] = restaurant.restaurant_id

        logger.debug(f"Identifier registry rebuilt with {len(self._mapping)} entries")
        return dict(self._mapping)

    def resolve(self, external_id: str) -> str:
        """
        Map an external identifier to a durable identity.

        Unknown identifiers are returned unchanged and treated as if they
        already were a durable identity.
        """
        key = str(external_id)
        durable_id = self._mapping.get(key)
        if durable_id is None:
            logger.debug(f"Identifier '{key}' not in registry, using it as a durable id")
            return key
        return durable_id

    def reverse_lookup(self, durable_id: str) -> Optional[int]:
        """Return the external identifier of ``durable_id``, or None."""
        for external_id, mapped in self._mapping.items():
            if mapped == durable_id:
                return int(external_id)
        return None

    def snapshot(self) -> dict[str, str]:
        """Copy of the current mapping."""
        return dict(self._mapping)
