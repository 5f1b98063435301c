"""
Menu Merge Engine

Pure transformation from a raw menu submission to the normalized items that
are stored in a restaurant's menu document.

Two loosely coupled inputs are combined:

    menu_items      [{"id": 1, "name": "Masala Dosa", "price": "120", ...}, ...]
    customisations  [{"id": 1, "customisation": {"categories": [...]}}, ...]

Each item picks up the customisation block of the first entry whose ``id``
equals its own (compared as submitted, before any coercion). Items without a
match get an empty customisation, so leaving an item out of
``customisations`` means "no add-ons".

Individual fields never fail the merge: values that are missing, falsy or
not numeric fall back to their defaults.
"""

import copy
import logging
import math
import re
from typing import Any, Iterable, Mapping, Optional, TypedDict, Union

logger = logging.getLogger(__name__)

Number = Union[int, float]


class AddOnItem(TypedDict):
    name: str
    price: Number


class AddOnCategory(TypedDict):
    categoryName: str
    minQuantity: Number
    maxQuantity: Number
    items: list[AddOnItem]


class Customisation(TypedDict):
    categories: list[AddOnCategory]


class MenuItem(TypedDict):
    id: int
    name: str
    description: str
    category: str
    price: Number
    image: str
    spicinessLevel: Number
    sweetnessLevel: Number
    dietaryPreference: list[str]
    healthinessScore: Number
    caffeineLevel: str
    sufficientFor: Number
    available: bool
    customisation: Customisation


DEFAULT_CAFFEINE_LEVEL = "None"
DEFAULT_SUFFICIENT_FOR = 1

# Numeric string syntax accepted by JavaScript's Number()
_DECIMAL_LITERAL = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")
_PREFIXED_LITERAL = re.compile(r"0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+")


def empty_customisation() -> Customisation:
    return {"categories": []}


def _parse_number(text: str) -> Optional[Number]:
    text = text.strip()
    if _DECIMAL_LITERAL.fullmatch(text):
        return float(text)
    if _PREFIXED_LITERAL.fullmatch(text):
        return int(text, 0)
    return None


def to_number(value: Any, default: Number = 0) -> Number:
    """
    Coerce a submitted scalar to a number.

    Falsy values (None, 0, "", False) and anything that does not parse as a
    finite number give ``default``. Strings must be JavaScript numeric
    literals: "1e3" and "0x1F" parse, "1_000" and "nan" do not. Integral
    results are returned as int.
    """
    if not value:
        return default
    if isinstance(value, bool):
        return 1
    if isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str):
        number = _parse_number(value)
        if number is None:
            return default
    else:
        return default

    if isinstance(number, float):
        if not math.isfinite(number):
            return default
        if number.is_integer():
            number = int(number)
    # "0" and "0.0" are zero after parsing and fall back like 0 does
    return number or default


def _to_text(value: Any, default: str) -> str:
    return str(value) if value else default


def _ids_equal(left: Any, right: Any) -> bool:
    # 1 and True compare equal in Python but are different submitted ids
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    return left == right


def find_customisation(item_id: Any, customisations: Iterable[Any]) -> Optional[Mapping[str, Any]]:
    """First customisation entry whose raw ``id`` equals ``item_id``."""
    for entry in customisations:
        if isinstance(entry, Mapping) and _ids_equal(entry.get("id"), item_id):
            return entry
    return None


def normalize_item(raw: Mapping[str, Any], found: Optional[Mapping[str, Any]]) -> MenuItem:
    """Apply coercion and defaults to a single raw item."""
    dietary = raw.get("dietaryPreference")
    customisation = found.get("customisation") if found is not None else None

    return {
        "id": int(to_number(raw.get("id"), 0)),
        "name": "" if raw.get("name") is None else str(raw.get("name")),
        "description": _to_text(raw.get("description"), ""),
        "category": _to_text(raw.get("category"), ""),
        "price": to_number(raw.get("price"), 0),
        "image": _to_text(raw.get("image"), ""),
        "spicinessLevel": to_number(raw.get("spicinessLevel"), 0),
        "sweetnessLevel": to_number(raw.get("sweetnessLevel"), 0),
        "dietaryPreference": [str(tag) for tag in dietary] if isinstance(dietary, list) else [],
        "healthinessScore": to_number(raw.get("healthinessScore"), 0),
        "caffeineLevel": _to_text(raw.get("caffeineLevel"), DEFAULT_CAFFEINE_LEVEL),
        "sufficientFor": to_number(raw.get("sufficientFor"), DEFAULT_SUFFICIENT_FOR),
        "available": raw.get("available") is not False,
        "customisation": (
            copy.deepcopy(customisation) if customisation is not None else empty_customisation()
        ),
    }


def merge_menu_items(
    menu_items: Iterable[Any],
    customisations: Iterable[Any],
) -> list[MenuItem]:
    """
    Merge raw items with their customisations into normalized menu items.

    Args:
        menu_items: Raw item objects in menu order
        customisations: Raw ``{"id": ..., "customisation": {...}}`` objects

    Returns:
        Normalized items, in the same order as ``menu_items``. Entries that
        are not JSON objects are skipped.
    """
    entries: list[Mapping[str, Any]] = []
    for position, entry in enumerate(customisations):
        if not isinstance(entry, Mapping):
            logger.warning(
                f"Skipping customisation #{position}: expected an object, got {type(entry).__name__}"
            )
            continue
        entries.append(entry)

    merged: list[MenuItem] = []
    seen_ids: set[int] = set()

    for position, raw in enumerate(menu_items):
        if not isinstance(raw, Mapping):
            logger.warning(f"Skipping menu item #{position}: expected an object, got {type(raw).__name__}")
            continue

        item = normalize_item(raw, find_customisation(raw.get("id"), entries))
        if item["id"] in seen_ids:
            logger.warning(f"Duplicate menu item id {item['id']} at position {position}")
        seen_ids.add(item["id"])
        merged.append(item)

    return merged
