"""
Test infrastructure for the bulletin board.

Strategy
--------
- Every test gets its own StorageGateway on ``sqlite+aiosqlite:///:memory:``.
  The gateway's StaticPool keeps one connection for the engine's lifetime,
  which is what keeps an in-memory database alive between statements.
- ``db`` is schema-only (seeding disabled); ``seeded_db`` carries the 35
  sample posts.
- The app's ``get_db`` dependency is overridden so requests use the test
  gateway.  ASGITransport does not run the lifespan, so the production
  database file is never opened.
"""
from contextlib import asynccontextmanager

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from board.database import StorageGateway, get_db
from board.main import app

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


async def _open_gateway(seed_on_empty: bool) -> StorageGateway:
    gateway = StorageGateway(TEST_DATABASE_URL, seed_on_empty=seed_on_empty)
    await gateway.initialize()
    return gateway


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture
async def db() -> StorageGateway:
    """An initialised gateway over an empty posts table."""
    gateway = await _open_gateway(seed_on_empty=False)
    yield gateway
    await gateway.shutdown()


@pytest_asyncio.fixture
async def seeded_db() -> StorageGateway:
    """An initialised gateway holding the 35 seed posts."""
    gateway = await _open_gateway(seed_on_empty=True)
    yield gateway
    await gateway.shutdown()


@asynccontextmanager
async def _client_for(gateway: StorageGateway):
    app.dependency_overrides[get_db] = lambda: gateway
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def async_client(db: StorageGateway) -> AsyncClient:
    """httpx client wired to the app, backed by the empty ``db`` gateway."""
    async with _client_for(db) as client:
        yield client


@pytest_asyncio.fixture
async def seeded_client(seeded_db: StorageGateway) -> AsyncClient:
    """httpx client wired to the app, backed by the seeded gateway."""
    async with _client_for(seeded_db) as client:
        yield client
