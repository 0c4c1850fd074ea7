"""
Shared fixtures: a seeded SQLite catalog and an HTTP client for API tests.
"""
import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from transfer_search.database import init_db, get_session


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    """A fresh SQLite catalog database per test."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}")
    await init_db(bind=engine)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    yield factory
    await engine.dispose()


@pytest_asyncio.fixture
async def seeded(session_factory):
    from transfer_search.seed_data import seed_catalog

    async with session_factory() as session:
        return await seed_catalog(session)


@pytest_asyncio.fixture
async def client(session_factory, seeded):
    """HTTP client against the app, wired to the seeded catalog with rate limiting off."""
    from transfer_search.server import app
    from transfer_search.api.routes.search import get_catalog
    from transfer_search.ratelimit import search_rate_limit
    from transfer_search.services.catalog import SqlCatalogRepository

    async def override_session():
        async with session_factory() as session:
            yield session

    async def no_rate_limit():
        return None

    app.dependency_overrides[get_catalog] = lambda: SqlCatalogRepository(session_factory)
    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[search_rate_limit] = no_rate_limit

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def search_body(seeded):
    """Valid search body for Split Center, two adults, Monday 2030-07-15 12:00 local."""
    return {
        "airportId": seeded["airport"],
        "zoneId": seeded["zones"]["split_center"],
        "direction": "FROM_AIRPORT",
        "pickupTime": "2030-07-15T10:00:00Z",
        "paxAdults": 2,
        "paxChildren": 0,
        "currency": "EUR",
    }
