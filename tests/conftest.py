"""
CityInfo API: Test Configuration (conftest.py)
==============================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.
Who:   Used by all test files in the tests/ directory.

Fixture Hierarchy (all function-scoped, created fresh for each test):
    ├── mock_db_session:   Mock AsyncSession (no real DB needed)
    ├── mock_mail_service: MagicMock standing in for the MailService
    ├── memory_store:      Freshly seeded CitiesDataStore
    ├── sqlite_engine:     In-memory SQLite engine, schema created and seeded
    ├── db_session:        Session on sqlite_engine
    ├── memory_client:     AsyncClient against a memory-backed app
    └── database_client:   AsyncClient against a database-backed app
"""

import os
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Override settings for testing BEFORE any cityinfo imports
os.environ["STORE_BACKEND"] = "memory"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test_cityinfo.db"
os.environ["DATABASE_AUTO_CREATE"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from cityinfo.database import create_schema, seed_database  # noqa: E402
from cityinfo.main import create_app  # noqa: E402
from cityinfo.services.data_store import CitiesDataStore  # noqa: E402
from cityinfo.services.mail_base import MailService  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Unit Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_save_failure(mock_db_session):
            mock_db_session.commit.side_effect = SQLAlchemyError("boom")
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def mock_mail_service():
    """A MailService whose send() calls can be asserted."""
    return MagicMock(spec=MailService)


@pytest.fixture
def memory_store():
    """Seeded in-memory store: New York City (no points) and Antwerp (ids 1 and 3)."""
    return CitiesDataStore()


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def sqlite_engine():
    """
    In-memory SQLite engine with the schema created and seeded.

    StaticPool keeps a single connection, so every session sees the same
    in-memory database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_schema(engine)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        await seed_database(session)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(sqlite_engine):
    return async_sessionmaker(sqlite_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


# ══════════════════════════════════════════════════════════════════════════
# HTTP Client Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def memory_client(memory_store, mock_mail_service):
    """
    HTTPX AsyncClient talking to a memory-backed app.

    Usage:
        async def test_cities(memory_client):
            response = await memory_client.get("/api/cities")
            assert response.status_code == 200
    """
    app = create_app(
        store_backend="memory",
        mail_service=mock_mail_service,
        cities_store=memory_store,
    )
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def database_client(session_factory, mock_mail_service):
    """HTTPX AsyncClient talking to an app backed by the seeded SQLite database."""
    app = create_app(
        store_backend="database",
        session_factory=session_factory,
        mail_service=mock_mail_service,
    )
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture(params=["memory", "database"])
async def client(request, memory_store, session_factory, mock_mail_service):
    """The same HTTP surface over either store."""
    app = create_app(
        store_backend=request.param,
        session_factory=session_factory,
        mail_service=mock_mail_service,
        cities_store=memory_store,
    )
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
