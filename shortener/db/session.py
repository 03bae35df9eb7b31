"""
Database Session Management

This module handles async database connections using SQLAlchemy's async engine.
Uses a database abstraction layer to support different database backends.

Engines are built from a connection string at application startup rather
than at import time, so the same code serves the configured database, a
test database, or a migration run.
"""

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession

from shortener.db.interface import DatabaseAdapter
from shortener.db.postgres_adapter import PostgreSQLAdapter
from shortener.db.sqlite_adapter import SQLiteAdapter


def get_database_adapter(database_url: str) -> DatabaseAdapter:
    """
    Factory function to get the database adapter for a connection string.

    Returns:
        PostgreSQLAdapter for postgresql URLs, SQLiteAdapter otherwise
    """
    if database_url.startswith("postgresql"):
        return PostgreSQLAdapter()
    return SQLiteAdapter()


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker:
    """
    Create the async session factory for an engine.

    expire_on_commit=False keeps returned model instances readable after the
    transaction that loaded them has committed.
    """
    return async_sessionmaker(
        engine,
        class_=SQLModelAsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """Create all missing tables. Production schemas are managed by Alembic."""
    # Register table metadata
    from shortener.db import models  # noqa: F401

    async with engine.begin() as connection:
        await connection.run_sync(SQLModel.metadata.create_all)
