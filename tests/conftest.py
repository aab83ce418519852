"""
Test fixtures.

Provides:
- Async DB session fixture (SQLite in-memory, fresh tables per test)
- Seeded reference data (locations, container types)
- FastAPI test client with get_db overridden
"""

import os

# Must be set before app.config is imported anywhere
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SEED_REFERENCE_DATA"] = "false"

from typing import AsyncGenerator, Dict

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.database_init import seed_locations, seed_container_types
from app import models  # noqa: F401 - register all models
from app.models.container_type import ContainerType
from app.models.location import Location
from app.main import app


TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def engine():
    """Test engine with all tables; StaticPool keeps one shared in-memory DB."""
    eng = create_async_engine(
        TEST_DB_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


@pytest_asyncio.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Provide a DB session per test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def reference_data(session_factory) -> Dict[str, int]:
    """Seed default locations and container types; return code -> id."""
    async with session_factory() as session:
        await seed_locations(session)
        await seed_container_types(session)

        ids = {}
        for location in (await session.execute(select(Location))).scalars():
            ids[location.code] = location.id
        for container_type in (await session.execute(select(ContainerType))).scalars():
            ids[container_type.code] = container_type.id
        return ids


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Async test client sharing the test database with the fixtures."""

    async def _override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _override_get_db
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as c:
        yield c
    app.dependency_overrides.clear()
