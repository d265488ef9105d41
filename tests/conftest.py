"""
Pytest configuration and shared fixtures.

- In-memory Motor client (mongomock-motor) installed on Database
- httpx client bound to the ASGI app
- Small factories for seeding cities
"""

import pytest
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from city_manager.cities.service import CitiesService
from city_manager.core.database import Database
from city_manager.main import app


# ==============================================================================
# DATABASE FIXTURES
# ==============================================================================

@pytest.fixture
def bare_db():
    """Fresh in-memory database with no indexes, as left by an older deployment."""
    client = AsyncMongoMockClient()
    Database.client = client
    Database.db = client["city_manager_test"]

    yield Database.db

    Database.client = None
    Database.db = None


@pytest.fixture
async def db(bare_db):
    """Fresh in-memory database with the city indexes created."""
    await CitiesService.ensure_indexes()
    return bare_db


@pytest.fixture
def cities_collection(db):
    return db[CitiesService.COLLECTION_NAME]


# ==============================================================================
# API CLIENT
# ==============================================================================

@pytest.fixture
async def client(db):
    """HTTP client talking to the app in-process (lifespan not run)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ==============================================================================
# FACTORIES
# ==============================================================================

@pytest.fixture
def make_cities(db):
    """Create cities by name; returns the created City models in order."""
    async def _make(*names, count=1):
        return [await CitiesService.create(name, count) for name in names]
    return _make
