"""
SQLite Database Adapter

This module implements the DatabaseAdapter interface for SQLite.
All SQLite-specific configuration and behavior is encapsulated here.

SQLite is a file-based database that's perfect for:
- Local development
- Testing
- Single-instance deployments

Key characteristics:
- File-based (single .db file)
- No server required
- Foreign keys are off unless enabled per connection
- Constraint failures are only distinguishable by message text
"""

from typing import Any
from sqlalchemy import event
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool

from shortener.db.interface import DatabaseAdapter


def _enable_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class SQLiteAdapter(DatabaseAdapter):
    """
    SQLite database adapter implementation.

    This adapter handles all SQLite-specific configuration and operations.
    SQLite uses file-based storage and has different characteristics than
    server-based databases like PostgreSQL.
    """

    def create_engine(self, database_url: str, **kwargs) -> AsyncEngine:
        """
        Create SQLite async engine with appropriate configuration.

        SQLite-specific configuration:
        - NullPool: Single connection (file-based, no pooling needed)
        - check_same_thread=False: Required for async SQLite operations
        - PRAGMA foreign_keys=ON on every new connection, so visits cannot
          reference a short URL that does not exist

        Args:
            database_url: SQLite connection string (sqlite+aiosqlite:///...)
            **kwargs: Additional engine options (merged with SQLite defaults)

        Returns:
            Configured AsyncEngine for SQLite
        """
        engine_kwargs = self.get_engine_kwargs()
        engine_kwargs.update(kwargs)

        engine = create_async_engine(
            database_url,
            poolclass=self.get_pool_class(),
            connect_args=self.get_connect_args(),
            **engine_kwargs
        )
        event.listen(engine.sync_engine, "connect", _enable_foreign_keys)
        return engine

    def get_pool_class(self) -> type[NullPool]:
        """
        Get the connection pool class for SQLite.

        Returns:
            NullPool class
        """
        return NullPool

    def get_connect_args(self) -> dict[str, Any]:
        return {
            "check_same_thread": False
        }

    def get_engine_kwargs(self) -> dict[str, Any]:
        return {
            "echo": False  # Set to True only for SQL debugging in development
        }

    def is_unique_violation(self, error: IntegrityError) -> bool:
        # Primary key conflicts are reported with the same message
        return "UNIQUE constraint failed" in str(error.orig)

    def is_foreign_key_violation(self, error: IntegrityError) -> bool:
        return "FOREIGN KEY constraint failed" in str(error.orig)

    def get_dialect_name(self) -> str:
        return "sqlite"
