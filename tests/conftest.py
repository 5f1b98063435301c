"""Shared fixtures: in-memory SQLite database and an ASGI test client."""

import os

# Must be set before the app (and its cached settings) is imported
os.environ["ENV_MODE"] = "development"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app import models  # noqa: F401
from app.database import Base, get_db
from app.main import app
from app.services.chat import MockChatService, get_chat_service
from app.services.identifiers import IdentifierRegistry
from app.services.storage import MockStorageService, get_storage_service

RESTAURANT = {
    "name": "Spice Route",
    "contactNo": "9876543210",
    "address": "12 MG Road, Bengaluru",
    "menuSummary": "South Indian breakfast and filter coffee",
    "location": {"latitude": 12.9716, "longitude": 77.5946},
}


@pytest_asyncio.fixture
async def engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def registry():
    return IdentifierRegistry()


@pytest.fixture
def storage():
    return MockStorageService(base_url="http://test/mock-storage")


@pytest_asyncio.fixture
async def client(session_maker, registry, storage):
    """HTTP client wired to the test database, registry and mock services."""

    async def override_get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage_service] = lambda: storage
    app.dependency_overrides[get_chat_service] = lambda: MockChatService()
    app.state.id_registry = registry

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


async def create_restaurant(client: AsyncClient, **overrides) -> dict:
    """POST a restaurant and return the response ``data``."""
    response = await client.post("/api/restaurants", json={**RESTAURANT, **overrides})
    assert response.status_code == 201, response.text
    return response.json()["data"]
