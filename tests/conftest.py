"""
Test infrastructure for the Conduit API.

Strategy
--------
- SQLite in-memory via aiosqlite, so no Postgres instance is needed.
- StaticPool makes every async task share the one in-memory connection;
  an in-memory database is connection-scoped and a second connection would
  see it empty.
- ``get_db`` is overridden with the same ``session_scope`` unit of work the
  app uses, bound to the test session factory.
- Tables are created before each test and dropped after.
- Redis is disabled with ``cache._redis = None``; the CacheManager turns
  every call into a no-op, so the real database path is always exercised.
  Cache tests opt back in through the ``fake_redis`` fixture.
- bcrypt runs at its minimum cost so registration stays fast.
"""
import os

os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
import pytest_asyncio
from fakeredis import FakeAsyncRedis
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import conduit.models  # noqa: F401  (registers tables on Base.metadata)
from conduit.cache import cache
from conduit.database import Base, get_db, session_scope
from conduit.main import app
from conduit.middleware import install_query_counter

# ---------------------------------------------------------------------------
# Test database engine: SQLite in-memory with aiosqlite
# ---------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine_test = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

install_query_counter(engine_test)

async_session_test = async_sessionmaker(
    engine_test,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def override_get_db():
    async with session_scope(async_session_test) as session:
        yield session


app.dependency_overrides[get_db] = override_get_db


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after to guarantee isolation."""
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session() -> AsyncSession:
    """A live session for repository and service tests."""
    async with async_session_test() as session:
        yield session


@pytest.fixture
def session_factory() -> async_sessionmaker[AsyncSession]:
    """The test session factory, for tests that open their own ``session_scope``."""
    return async_session_test


@pytest_asyncio.fixture
async def async_client() -> AsyncClient:
    """httpx client wired to the app through ASGITransport, with Redis disabled."""
    cache._redis = None
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def register(async_client: AsyncClient):
    """
    Register a user through the API and return its ``user`` view.

    The view carries the token for the Authorization header.
    """

    async def _register(username: str, email: str | None = None, password: str = "secret-pass") -> dict:
        resp = await async_client.post("/api/users", json={
            "user": {
                "username": username,
                "email": email or f"{username}@example.com",
                "password": password,
            }
        })
        assert resp.status_code == 201, resp.text
        return resp.json()["user"]

    return _register


@pytest_asyncio.fixture
async def fake_redis(async_client: AsyncClient):
    """
    Put an in-process fakeredis client behind the cache so cache-aside reads,
    writes and invalidation run for real.

    Depends on ``async_client`` so it runs after that fixture disables Redis.
    """
    client = FakeAsyncRedis(decode_responses=True)
    cache._redis = client
    yield client
    await client.flushall()
    await client.aclose()
    cache._redis = None
