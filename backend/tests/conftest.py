"""
Main pytest configuration for all backend tests.

Fixtures for unit and integration tests: a controllable clock, the
in-process distributed cache, an in-memory SQLite product store and an
HTTP client bound to the ASGI app.
"""

import os

# Set test environment variables before importing app modules
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CACHE_BACKEND"] = "memory"
os.environ["REDIS_INSTANCE_NAME"] = "RedisCachingDemo_"
os.environ["LOG_LEVEL"] = "DEBUG"
os.environ["LOG_JSON"] = "false"

from typing import AsyncGenerator, Dict, List, Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.domain.products.entities import Product
from app.infrastructure.cache.memory_cache import InMemoryDistributedCache
from app.models import Base, Product as ProductModel

SAMPLE_PRODUCTS: List[Dict[str, Any]] = [
    {"id": 1, "name": "Laptop", "category": "Electronics", "price": 999.99, "quantity": 10},
    {"id": 2, "name": "Coffee Mug", "category": "Kitchen", "price": 8.5, "quantity": 120},
    {"id": 3, "name": "Desk Chair", "category": "Furniture", "price": 149.0, "quantity": 15},
]


class FakeClock:
    """Manually advanced clock for expiration tests."""

    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    """Provide a fake clock starting at a fixed instant."""
    return FakeClock()


@pytest.fixture
def memory_cache(clock) -> InMemoryDistributedCache:
    """In-process distributed cache driven by the fake clock."""
    return InMemoryDistributedCache(clock=clock)


@pytest.fixture
def sample_products() -> List[Product]:
    """Sample products as domain snapshots."""
    return [Product(**data) for data in SAMPLE_PRODUCTS]


@pytest.fixture
async def engine():
    """Single-connection in-memory SQLite engine with the schema created."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker:
    """Session factory configured like the application's."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def seeded_store(session_factory) -> List[Dict[str, Any]]:
    """Insert the sample products into the store."""
    async with session_factory() as session:
        session.add_all([ProductModel(**data) for data in SAMPLE_PRODUCTS])
        await session.commit()
    return SAMPLE_PRODUCTS


@pytest.fixture
async def db_session(session_factory, seeded_store) -> AsyncGenerator[AsyncSession, None]:
    """Session over the seeded store."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def api_client(
    session_factory, seeded_store, memory_cache
) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTP client for the ASGI app.

    The lifespan does not run under ASGITransport; the store session and
    the cache are supplied directly.
    """
    from app.db import get_database_session
    from app.main import app

    async def override_database_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_database_session] = override_database_session
    app.state.distributed_cache = memory_cache

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
    app.state.distributed_cache = None


# Test markers and configuration
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "redis: marks tests as Redis-related")
    config.addinivalue_line("markers", "integration: marks tests as integration tests")


def pytest_collection_modifyitems(config, items):
    """Add markers based on test file location."""
    for item in items:
        if "redis" in item.nodeid:
            item.add_marker(pytest.mark.redis)
        if "integration" in item.nodeid:
            item.add_marker(pytest.mark.integration)
