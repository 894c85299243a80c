import os
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool

from hotel_inventory.db.session import Base, get_db
from hotel_inventory.main import app
from hotel_inventory.security import SessionUser, create_access_token

# Pytest only picks up fixtures from conftest.py files; seeds live in their
# own module and are registered as a plugin.
pytest_plugins = ["tests.seeds"]

# In-memory SQLite by default; point TEST_DATABASE_URL at a Postgres test
# database (postgresql+asyncpg://...) to run against the production dialect.
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")

ADMIN = SessionUser(id="admin-1", email="admin@example.com", role="admin")
VIEWER = SessionUser(id="user-1", email="viewer@example.com", role="user")


@pytest_asyncio.fixture
async def db() -> AsyncIterator[AsyncSession]:
    """Create tables and yield a session, then drop tables after test."""
    if TEST_DATABASE_URL.startswith("sqlite"):
        # one shared connection so every session sees the same in-memory db
        engine = create_async_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    else:
        engine = create_async_engine(TEST_DATABASE_URL, poolclass=NullPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_sessionmaker(engine, expire_on_commit=False)() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncIterator[AsyncClient]:
    """HTTP client bound to the app, using the test session and an empty cache."""

    async def override_get_db() -> AsyncIterator[AsyncSession]:
        # same transaction handling as get_db, so post-commit hooks fire
        try:
            yield db
            await db.commit()
        except Exception:
            await db.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db
    app.state.hotel_cache.clear()

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()
    app.state.hotel_cache.clear()


def bearer(user: SessionUser) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return bearer(ADMIN)


@pytest.fixture
def user_headers() -> dict[str, str]:
    return bearer(VIEWER)
