"""
Async database access for the Resume Builder API.

The relational database plays the role of the document store: every document
(CV, resume, task config, knowledge entry, activity log) is a row whose nested
parts live in JSON columns. SQLite (aiosqlite) is the development default and
PostgreSQL (asyncpg) the production target; the partial unique index on active
task configs is declared for both.
"""

import logging
import time
from typing import Any, AsyncGenerator, Dict, Optional

from sqlalchemy import event, func, inspect, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from resume_builder.core.config import get_settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base shared by every model."""


def engine_options(url: str) -> Dict[str, Any]:
    """Engine keyword arguments for a database URL."""
    settings = get_settings()
    options: Dict[str, Any] = {"echo": settings.database_echo}

    if url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url:
            # one shared connection keeps the in-memory database alive
            options["poolclass"] = StaticPool
        return options

    options.update(
        pool_pre_ping=True,
        pool_recycle=settings.database_pool_recycle,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_timeout=settings.database_pool_timeout,
    )
    return options


def _enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    # ON DELETE SET NULL on activity logs and knowledge authors needs this
    @event.listens_for(engine.sync_engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


class DatabaseManager:
    """Owns the engine and the session factory for the process."""

    def __init__(self):
        self._engine: Optional[AsyncEngine] = None
        self._sessionmaker: Optional[async_sessionmaker] = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database not initialized. Call initialize() first.")
        return self._engine

    @property
    def sessionmaker(self) -> async_sessionmaker:
        """Session factory; request sessions and activity-log writes both come from here."""
        if self._sessionmaker is None:
            raise RuntimeError("Database not initialized. Call initialize() first.")
        return self._sessionmaker

    async def initialize(self, database_url: Optional[str] = None) -> None:
        """
        Create the engine and verify the connection.

        Raises:
            SQLAlchemyError: if the database cannot be reached
        """
        if self._engine is not None:
            logger.warning("Database already initialized")
            return

        url = database_url or get_settings().database_url
        engine = create_async_engine(url, **engine_options(url))
        if url.startswith("sqlite"):
            _enable_sqlite_foreign_keys(engine)

        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            await engine.dispose()
            logger.error(f"Failed to connect to the database: {e}")
            raise

        self._engine = engine
        self._sessionmaker = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
        logger.info(f"Database initialized ({engine.dialect.name})")

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._sessionmaker = None
            logger.info("Database connections closed")

    async def create_all_tables(self) -> None:
        """Create missing tables, including the active-config partial index."""
        import resume_builder.models  # noqa: F401  registers every table on Base.metadata

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info(f"Database schema ready ({len(Base.metadata.tables)} tables)")

    async def check_health(self) -> Dict[str, Any]:
        """Round-trip time and any expected tables that are missing."""
        start_time = time.time()
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
                existing = await conn.run_sync(lambda sync_conn: set(inspect(sync_conn).get_table_names()))
        except (RuntimeError, SQLAlchemyError) as e:
            return {"status": "unhealthy", "error": str(e), "response_time": time.time() - start_time}

        missing = sorted(set(Base.metadata.tables) - existing)
        return {
            "status": "degraded" if missing else "healthy",
            "dialect": self.engine.dialect.name,
            "missing_tables": missing,
            "response_time": time.time() - start_time,
        }


db_manager = DatabaseManager()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session; rolled back if a database error escapes the handler."""
    async with db_manager.sessionmaker() as session:
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Database session error: {e}")
            raise


async def init_db() -> None:
    await db_manager.initialize()
    await db_manager.create_all_tables()


async def close_db() -> None:
    await db_manager.close()


async def check_db_health() -> Dict[str, Any]:
    return await db_manager.check_health()


def paginate_query(query, page: int = 1, page_size: int = 20):
    """Apply 1-based page / page size to a select statement."""
    return query.offset((page - 1) * page_size).limit(page_size)


async def count_query_results(session: AsyncSession, query) -> int:
    """Count total rows a select statement would return."""
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    result = await session.execute(count_query)
    return result.scalar_one()
