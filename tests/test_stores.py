"""Tests for the restaurant and menu stores against an in-memory database."""

import uuid

import pytest
from sqlalchemy import func, select

from app.core.exceptions import MenuNotFoundError, RestaurantNotFoundError, ValidationFailure
from app.models import RestaurantMenu
from app.services.menu_merge import merge_menu_items
from app.services.menu_store import MenuStore
from app.services.restaurant_store import RestaurantStore, to_geo_point

PROFILE = {
    "name": "Spice Route",
    "contact_no": "9876543210",
    "address": "12 MG Road, Bengaluru",
    "menu_summary": "South Indian breakfast",
    "location": {"latitude": 12.9716, "longitude": 77.5946},
}


def test_to_geo_point_stores_longitude_first():
    assert to_geo_point({"latitude": 1.5, "longitude": 2.5}) == {
        "type": "Point",
        "coordinates": [2.5, 1.5],
    }
    assert to_geo_point({"latitude": 1.5}) is None
    assert to_geo_point(None) is None


class TestRestaurantStore:
    """Tests for RestaurantStore."""

    @pytest.mark.asyncio
    async def test_create_assigns_durable_identity_and_defaults(self, session):
        store = RestaurantStore(session)

        restaurant = await store.create(PROFILE)

        assert str(uuid.UUID(restaurant.restaurant_id)) == restaurant.restaurant_id
        assert restaurant.is_online is False
        assert restaurant.menu_uploaded is False
        assert restaurant.location == {"type": "Point", "coordinates": [77.5946, 12.9716]}
        assert restaurant.created_at is not None

    @pytest.mark.asyncio
    async def test_create_generates_distinct_identities(self, session):
        store = RestaurantStore(session)

        first = await store.create(PROFILE)
        second = await store.create(PROFILE)

        assert first.restaurant_id != second.restaurant_id

    @pytest.mark.asyncio
    async def test_create_rejects_bad_contact_number(self, session):
        store = RestaurantStore(session)

        with pytest.raises(ValidationFailure, match="10-digit"):
            await store.create({**PROFILE, "contact_no": "12345"})

    @pytest.mark.asyncio
    async def test_create_rejects_missing_name(self, session):
        store = RestaurantStore(session)

        with pytest.raises(ValidationFailure, match="name"):
            await store.create({**PROFILE, "name": "   "})

    @pytest.mark.asyncio
    async def test_get_unknown_raises(self, session):
        store = RestaurantStore(session)

        with pytest.raises(RestaurantNotFoundError):
            await store.get("does-not-exist")

    @pytest.mark.asyncio
    async def test_list_all_in_creation_order_and_online_filter(self, session):
        store = RestaurantStore(session)
        first = await store.create({**PROFILE, "name": "First", "is_online": True})
        await store.create({**PROFILE, "name": "Second"})
        third = await store.create({**PROFILE, "name": "Third", "is_online": True})

        everything = await store.list_all()
        online = await store.list_all(online_only=True)

        assert [r.name for r in everything] == ["First", "Second", "Third"]
        assert [r.restaurant_id for r in online] == [first.restaurant_id, third.restaurant_id]

    @pytest.mark.asyncio
    async def test_update_changes_only_supplied_fields(self, session):
        store = RestaurantStore(session)
        created = await store.create({**PROFILE, "is_online": True})

        updated = await store.update(created.restaurant_id, {"name": "Spice Route Express"})

        assert updated.name == "Spice Route Express"
        assert updated.is_online is True
        assert updated.contact_no == PROFILE["contact_no"]
        assert updated.location == {"type": "Point", "coordinates": [77.5946, 12.9716]}
        assert updated.restaurant_id == created.restaurant_id

    @pytest.mark.asyncio
    async def test_update_replaces_complete_location_only(self, session):
        store = RestaurantStore(session)
        created = await store.create(PROFILE)

        await store.update(created.restaurant_id, {"location": {"latitude": 10.0}})
        unchanged = await store.get(created.restaurant_id)
        assert unchanged.location["coordinates"] == [77.5946, 12.9716]

        moved = await store.update(
            created.restaurant_id, {"location": {"latitude": 10.0, "longitude": 20.0}}
        )
        assert moved.location == {"type": "Point", "coordinates": [20.0, 10.0]}

    @pytest.mark.asyncio
    async def test_update_unknown_raises(self, session):
        store = RestaurantStore(session)

        with pytest.raises(RestaurantNotFoundError):
            await store.update("does-not-exist", {"name": "x"})

    @pytest.mark.asyncio
    async def test_update_invalid_value_leaves_record_untouched(self, session, session_maker):
        store = RestaurantStore(session)
        durable_id = (await store.create(PROFILE)).restaurant_id

        with pytest.raises(ValidationFailure):
            await store.update(durable_id, {"name": "New", "contact_no": "abc"})

        # The rollback expired the instance in this session; read from a fresh one
        async with session_maker() as fresh:
            reloaded = await RestaurantStore(fresh).get(durable_id)
            assert reloaded.name == PROFILE["name"]
            assert reloaded.contact_no == PROFILE["contact_no"]

    @pytest.mark.asyncio
    async def test_mark_menu_uploaded(self, session):
        store = RestaurantStore(session)
        created = await store.create(PROFILE)

        restaurant = await store.mark_menu_uploaded(created.restaurant_id)

        assert restaurant.menu_uploaded is True


class TestMenuStore:
    """Tests for MenuStore."""

    @pytest.mark.asyncio
    async def test_upsert_creates_menu_and_sets_flag(self, session):
        restaurant = await RestaurantStore(session).create(PROFILE)
        menus = MenuStore(session)

        menu = await menus.upsert(restaurant, merge_menu_items([{"id": 1, "name": "Dosa"}], []))

        assert menu.restaurant_id == restaurant.restaurant_id
        assert menu.restaurant_name == "Spice Route"
        assert [item["name"] for item in menu.items] == ["Dosa"]
        assert menu.last_updated is not None
        assert restaurant.menu_uploaded is True

    @pytest.mark.asyncio
    async def test_upsert_replaces_whole_document(self, session):
        restaurant = await RestaurantStore(session).create(PROFILE)
        menus = MenuStore(session)

        await menus.upsert(restaurant, merge_menu_items([{"id": 1}, {"id": 2}, {"id": 3}], []))
        await menus.upsert(restaurant, merge_menu_items([{"id": 9}], []))

        count = await session.scalar(select(func.count()).select_from(RestaurantMenu))
        menu = await menus.get(restaurant.restaurant_id)
        assert count == 1
        assert [item["id"] for item in menu.items] == [9]

    @pytest.mark.asyncio
    async def test_failed_upsert_keeps_flag_and_menu_unchanged(self, session):
        restaurant = await RestaurantStore(session).create(PROFILE)
        menus = MenuStore(session)

        # A set cannot be serialized to JSON, so the commit fails
        with pytest.raises(Exception):
            await menus.upsert(restaurant, [{"id": 1, "tags": {"a", "b"}}])

        await session.refresh(restaurant)
        assert restaurant.menu_uploaded is False
        assert await menus.find(restaurant.restaurant_id) is None

    @pytest.mark.asyncio
    async def test_concurrent_first_write_is_retried_as_update(self, session, monkeypatch):
        restaurant = await RestaurantStore(session).create(PROFILE)
        menus = MenuStore(session)
        await menus.upsert(restaurant, merge_menu_items([{"id": 1, "name": "Dosa"}], []))

        # Another writer created the document after this one looked for it
        real_find = menus.find
        lookups = []

        async def find_missing_once(durable_id):
            lookups.append(durable_id)
            if len(lookups) == 1:
                return None
            return await real_find(durable_id)

        monkeypatch.setattr(menus, "find", find_missing_once)

        menu = await menus.upsert(restaurant, merge_menu_items([{"id": 2, "name": "Vada"}], []))

        count = await session.scalar(select(func.count()).select_from(RestaurantMenu))
        assert count == 1
        assert len(lookups) == 2
        assert [item["name"] for item in menu.items] == ["Vada"]
        assert restaurant.menu_uploaded is True

    @pytest.mark.asyncio
    async def test_get_missing_menu_raises(self, session):
        restaurant = await RestaurantStore(session).create(PROFILE)

        with pytest.raises(MenuNotFoundError, match="Menu not found"):
            await MenuStore(session).get(restaurant.restaurant_id)
