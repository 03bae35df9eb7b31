"""
Database module with abstraction layer.

This module provides:
- DatabaseAdapter interface: Abstract base class for database implementations
- SQLiteAdapter / PostgreSQLAdapter: Backend-specific implementations
- StorageGateway: Transactional operations used by the services
- Session management: Engine and session factory construction

To add a new database backend:
1. Create a new adapter class inheriting from DatabaseAdapter
2. Implement all abstract methods
3. Return it from get_database_adapter() in session.py
"""

from shortener.db.gateway import StorageGateway
from shortener.db.interface import DatabaseAdapter
from shortener.db.session import create_session_maker, create_tables, get_database_adapter

__all__ = [
    "DatabaseAdapter",
    "StorageGateway",
    "create_session_maker",
    "create_tables",
    "get_database_adapter",
]
