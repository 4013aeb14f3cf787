"""
Database module with abstraction layer.

This module provides:
- DatabaseAdapter interface: Abstract base class for database implementations
- SQLiteAdapter / PostgreSQLAdapter: Backend-specific implementations
- Session management: Database session creation and management

To add a new database backend:
1. Create a new adapter class inheriting from DatabaseAdapter
2. Implement all abstract methods
3. Register its URL prefix in get_database_adapter() in adapters.py
"""

from shortener.db.interface import DatabaseAdapter
from shortener.db.session import get_session, async_session_maker, engine

__all__ = [
    "DatabaseAdapter",
    "get_session",
    "async_session_maker",
    "engine",
]
