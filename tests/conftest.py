"""Shared pytest fixtures for all test suites."""

from collections.abc import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from backend.app.api.deps import get_trip_repository
from backend.app.db.inmemory import InMemoryTripRepository
from backend.app.db.models import Base
from backend.app.main import app


@pytest_asyncio.fixture
async def sqlite_engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite engine with all tables created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def sqlite_session(sqlite_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Async session bound to the in-memory SQLite engine."""
    async with AsyncSession(sqlite_engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
def trip_repo() -> InMemoryTripRepository:
    """Fresh in-memory trip repository."""
    return InMemoryTripRepository()


@pytest.fixture
def client(trip_repo: InMemoryTripRepository) -> Generator[TestClient, None, None]:
    """Test client with the trip repository swapped for the in-memory one."""
    app.dependency_overrides[get_trip_repository] = lambda: trip_repo
    yield TestClient(app)
    app.dependency_overrides.clear()
