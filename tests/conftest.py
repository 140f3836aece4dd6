"""Shared test fixtures: in-memory MongoDB and an ASGI test client.

Every test gets a fresh mongomock database with the production indexes, and
``get_db`` is overridden so routes and auth dependencies use it.
"""

import os

os.environ.setdefault("MONGO_URL", "mongodb://localhost:27017")
os.environ.setdefault("DB_NAME", "store_rating_test")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from storerate.db.session import get_db, ensure_indexes
from storerate.services.user import create_user, create_store_for_owner
from server import app
from tests.helpers import PASSWORD, auth_headers


@pytest.fixture
async def db():
    database = AsyncMongoMockClient()["store_rating_test"]
    await ensure_indexes(database)
    return database


@pytest.fixture
async def client(db):
    app.dependency_overrides[get_db] = lambda: db

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
async def admin(db):
    return await create_user(
        db,
        name="Administrator Of The Rating System",
        email="admin@example.com",
        password=PASSWORD,
        address="1 Admin Road",
        role="admin",
    )


@pytest.fixture
async def normal_user(db):
    return await create_user(
        db,
        name="Regular Customer Account Name",
        email="customer@example.com",
        password=PASSWORD,
        address="22 Customer Lane",
    )


@pytest.fixture
async def owner_and_store(db):
    owner = await create_user(
        db,
        name="Owner Of The Corner Bakery Shop",
        email="owner@example.com",
        password=PASSWORD,
        address="3 Bakery Street",
        role="storeOwner",
    )
    store = await create_store_for_owner(
        db,
        owner=owner,
        name="The Corner Bakery And Coffee House",
        email="bakery@example.com",
        address="3 Bakery Street",
    )
    return owner, store


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def user_headers(normal_user):
    return auth_headers(normal_user)
