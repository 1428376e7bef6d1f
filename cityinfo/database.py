"""
CityInfo API: Database Session Management
=========================================

What:  Async SQLAlchemy engine, session factory, declarative base, schema
       provisioning and the per-request session scope.
How:   Creates an async engine from settings.database_url and a session
       scope that rolls back on error and always closes.
       Commits are explicit: the repository's save() owns them.
Who:   Used by the relational repository (through cityinfo.dependencies),
       by the application lifespan and by Alembic.
When:  Engine is created at module import; sessions are created per-request.

Connection Pooling:
    PostgreSQL (asyncpg): pool_size / max_overflow / pre_ping from settings,
                          connections recycled hourly.
    SQLite (aiosqlite):   SQLAlchemy's default pool for the URL; pool sizing
                          arguments are not accepted there.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from sqlalchemy import func, select, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from cityinfo.config import settings

logger = logging.getLogger(__name__)


def engine_options(database_url: str) -> Dict[str, Any]:
    """Keyword arguments for create_async_engine() matching the URL's dialect."""
    options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    if database_url.startswith("sqlite"):
        return options
    options.update(
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=settings.db_pool_pre_ping,
        pool_recycle=3600,
    )
    return options


# ── Engine Configuration ──────────────────────────────────────────────────
engine = create_async_engine(settings.database_url, **engine_options(settings.database_url))

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: entities stay readable after save() so handlers can
# map them to response bodies without another round trip
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Registers every model with one shared metadata object, which Alembic and
    create_schema() read.
    """
    pass


# ── Session Scope ─────────────────────────────────────────────────────────
@asynccontextmanager
async def session_scope(
    factory: Optional[async_sessionmaker[AsyncSession]] = None,
) -> AsyncGenerator[AsyncSession, None]:
    """
    Provide one database session for the duration of a request.

    How it works:
        1. Creates a new session from the factory (the module factory by default)
        2. Yields it to the repository (queries and staged mutations)
        3. On error: rolls back the transaction (discards staged changes)
        4. Always: closes the session (returns connection to pool)

    Nothing is committed here. Handlers call repository.save() explicitly,
    and staged changes that were never saved are discarded on close.

    Example usage in a dependency:
        async def get_repository(request: Request):
            async with session_scope(request.app.state.session_factory) as session:
                yield SqlAlchemyCityInfoRepository(session)
    """
    async with (factory or async_session_factory)() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Schema Provisioning ───────────────────────────────────────────────────
async def create_schema(target: AsyncEngine = engine) -> None:
    """Create every table registered on Base.metadata that does not exist yet."""
    # Import models so they register with Base before create_all runs
    from cityinfo.models import city  # noqa: F401

    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ensured")


async def seed_database(session: AsyncSession) -> bool:
    """
    Insert the seed cities and points of interest when the cities table is empty.

    Returns:
        True when rows were inserted, False when the table already had data.
    """
    from cityinfo.models.city import City
    from cityinfo.services.data_store import build_seed_cities

    count = (await session.execute(select(func.count(City.id)))).scalar() or 0
    if count:
        return False

    session.add_all(build_seed_cities())
    await session.flush()
    await _sync_identity_sequences(session)
    await session.commit()
    logger.info("Seeded database with initial cities")
    return True


async def _sync_identity_sequences(session: AsyncSession) -> None:
    """
    Move PostgreSQL id sequences past the explicitly seeded ids.

    SQLite derives the next rowid from MAX(id), so only PostgreSQL needs this.
    """
    if session.get_bind().dialect.name != "postgresql":
        return
    for table in ("cities", "points_of_interest"):
        await session.execute(
            text(
                f"SELECT setval(pg_get_serial_sequence('{table}', 'id'), "
                f"(SELECT MAX(id) FROM {table}))"
            )
        )


async def init_database() -> None:
    """Create the schema and seed it. Called from the application lifespan."""
    await create_schema()
    async with async_session_factory() as session:
        await seed_database(session)


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def dispose_engine() -> None:
    """Gracefully closes all connections in the pool on application shutdown."""
    await engine.dispose()
