"""Root conftest — shared test configuration and store/client fixtures.

Invariants:
    - Every test gets a fresh store file under tmp_path
    - The client talks to an app built around that store (no lifespan needed)

Design Decisions:
    - Real SQLite file over mocks: transactions and schema checks are what we test
    - Connection injected through create_app(): no module-level state to patch
"""

import os

import pytest
from httpx import ASGITransport, AsyncClient

# Never touch a developer's real store file
os.environ.setdefault("STORE_PATH", "./test-track.db")
os.environ.setdefault("LOG_FORMAT", "text")

from tracker.config import Settings  # noqa: E402
from tracker.infrastructure.store import RecordStore, open_store  # noqa: E402
from tracker.main import create_app  # noqa: E402
from tracker.resources import BEER, COFFEE  # noqa: E402


@pytest.fixture
async def store_connection(tmp_path):
    connection = open_store(str(tmp_path / "track.db"))
    yield connection
    await connection.close()


@pytest.fixture
def coffee_store(store_connection):
    return RecordStore(store_connection, COFFEE)


@pytest.fixture
def beer_store(store_connection):
    return RecordStore(store_connection, BEER)


@pytest.fixture
def test_app(store_connection):
    return create_app(Settings(), connection=store_connection)


@pytest.fixture
async def client(test_app):
    """FastAPI test client bound to the temporary store."""
    async with AsyncClient(
        transport=ASGITransport(app=test_app), base_url="http://test",
    ) as c:
        yield c
