"""
PostgreSQL Database Adapter

Production backend using the asyncpg driver. Unlike SQLite, PostgreSQL
reports constraint failures with SQLSTATE codes, so errors are classified
by code rather than by message.
"""

from typing import Any, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from shortener.db.interface import DatabaseAdapter

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


def _sqlstate(error: IntegrityError) -> Optional[str]:
    original = error.orig
    return getattr(original, "sqlstate", None) or getattr(original, "pgcode", None)


class PostgreSQLAdapter(DatabaseAdapter):
    """PostgreSQL adapter with a regular connection pool."""

    def create_engine(self, database_url: str, **kwargs) -> AsyncEngine:
        engine_kwargs = self.get_engine_kwargs()
        engine_kwargs.update(kwargs)

        return create_async_engine(
            database_url,
            connect_args=self.get_connect_args(),
            **engine_kwargs
        )

    def get_pool_class(self) -> None:
        # SQLAlchemy's default (AsyncAdaptedQueuePool)
        return None

    def get_connect_args(self) -> dict[str, Any]:
        return {}

    def get_engine_kwargs(self) -> dict[str, Any]:
        return {
            "echo": False,
            "pool_size": 10,
            "max_overflow": 20,
            "pool_pre_ping": True,
        }

    def is_unique_violation(self, error: IntegrityError) -> bool:
        return _sqlstate(error) == UNIQUE_VIOLATION

    def is_foreign_key_violation(self, error: IntegrityError) -> bool:
        return _sqlstate(error) == FOREIGN_KEY_VIOLATION

    def get_dialect_name(self) -> str:
        return "postgresql"
