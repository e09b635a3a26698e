"""
Database engine and session management.

Provides the async SQLAlchemy engine and session factory shared by the
HTTP app, the MCP tools and the import job.
"""

import logging
from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from manabox_mcp.config import settings
from manabox_mcp.models.db import Base

logger = logging.getLogger(__name__)


def create_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Create an async engine.

    SQLite connections switch to write-ahead logging so readers never see
    a half-applied import while the replace transaction is open.
    """
    new_engine = create_async_engine(database_url, echo=echo, pool_pre_ping=True)

    if new_engine.dialect.name == "sqlite":
        event.listen(new_engine.sync_engine, "connect", _enable_sqlite_wal)

    return new_engine


def _enable_sqlite_wal(dbapi_connection: Any, _connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


def create_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to an engine."""
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


# Create async engine
engine = create_engine(settings.database_url, echo=settings.debug)

# Session factory
async_session_factory = create_session_factory(engine)


def configure_database(database_url: str) -> None:
    """
    Point the shared engine and session factory at another database.

    Called once by the command line entry point before anything opens a
    session, when --db or --in-memory override the configured URL.
    """
    global engine, async_session_factory
    engine = create_engine(database_url, echo=settings.debug)
    async_session_factory = create_session_factory(engine)
    logger.info("Using database %s", engine.url.render_as_string(hide_password=True))


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Current shared session factory."""
    return async_session_factory


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency that provides a database session.

    Usage in FastAPI:
        @app.get("/items")
        async def get_items(session: AsyncSession = Depends(get_session)):
            ...
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except SQLAlchemyError:
            await session.rollback()
            raise


async def init_db() -> None:
    """
    Initialize database tables.

    Creates all tables defined in the ORM models.
    Should be called once at application startup.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
