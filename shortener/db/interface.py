"""
Database Abstraction Interface

This module defines the database abstraction layer that allows switching between
different database backends (SQLite, PostgreSQL, etc.) without changing the
rest of the codebase.

Besides engine configuration, adapters translate driver errors: the storage
gateway needs to tell a unique-key collision (retried by the shortening
loop) apart from a foreign key failure (unknown short code) and from
everything else (propagated). Each driver reports these differently, so the
check lives here.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.pool import Pool


class DatabaseAdapter(ABC):
    """
    Abstract base class for database adapters.

    This interface defines the contract that all database implementations
    must follow. By using this abstraction, we can switch between SQLite,
    PostgreSQL, or any other database without modifying the rest of the codebase.

    To add a new database backend:
    1. Create a new class inheriting from DatabaseAdapter
    2. Implement all abstract methods
    3. Register it in get_database_adapter()
    """

    @abstractmethod
    def create_engine(self, database_url: str, **kwargs) -> AsyncEngine:
        """
        Create and configure the async database engine.

        Args:
            database_url: Connection string for the database
            **kwargs: Additional engine configuration options

        Returns:
            Configured AsyncEngine instance
        """
        pass

    @abstractmethod
    def get_pool_class(self) -> Optional[type[Pool]]:
        """
        Get the connection pool class for this database type.

        Returns:
            Pool class (e.g., NullPool for SQLite) or None to use default
        """
        pass

    @abstractmethod
    def get_connect_args(self) -> dict[str, Any]:
        """Get connection arguments specific to this database type."""
        pass

    @abstractmethod
    def get_engine_kwargs(self) -> dict[str, Any]:
        """Get additional engine configuration specific to this database type."""
        pass

    @abstractmethod
    def is_unique_violation(self, error: IntegrityError) -> bool:
        """
        Check whether an integrity error was caused by a unique/primary key conflict.

        Args:
            error: The IntegrityError raised by SQLAlchemy

        Returns:
            True for unique constraint violations, False for anything else
        """
        pass

    @abstractmethod
    def is_foreign_key_violation(self, error: IntegrityError) -> bool:
        """Check whether an integrity error was caused by an unresolved foreign key."""
        pass

    @abstractmethod
    def get_dialect_name(self) -> str:
        """
        Get the SQLAlchemy dialect name for this database.

        Returns:
            Dialect name (e.g., 'sqlite', 'postgresql')
        """
        pass
