"""
Database Adapters

This module implements the DatabaseAdapter interface for the supported
backends. All backend-specific configuration is encapsulated here.

SQLite (default) is a file-based database that's perfect for:
- Local development
- Testing
- Single-instance deployments

PostgreSQL is the production choice once several processes share the
mapping table.
"""

from typing import Any, Optional

from sqlalchemy.pool import NullPool

from shortener.db.interface import DatabaseAdapter


class SQLiteAdapter(DatabaseAdapter):
    """
    SQLite database adapter implementation.

    SQLite allows one writer at a time; concurrent click increments queue
    on the file lock for up to `timeout` seconds instead of failing.
    """

    def get_pool_class(self) -> type[NullPool]:
        """
        SQLite uses NullPool because a file-based database doesn't
        benefit from connection pooling.
        """
        return NullPool

    def get_connect_args(self) -> dict[str, Any]:
        """
        Get SQLite-specific connection arguments.

        - check_same_thread=False: Required for async SQLite operations
        - timeout: Busy timeout while another connection holds the write lock
        """
        return {
            "check_same_thread": False,
            "timeout": self.timeout,
        }

    def get_engine_kwargs(self) -> dict[str, Any]:
        return {
            "echo": False  # Set to True only for SQL debugging in development
        }


class PostgreSQLAdapter(DatabaseAdapter):
    """PostgreSQL adapter (asyncpg driver) with a regular connection pool."""

    def get_pool_class(self) -> Optional[type]:
        # Default QueuePool-style async pool
        return None

    def get_connect_args(self) -> dict[str, Any]:
        return {
            "command_timeout": self.timeout,
        }

    def get_engine_kwargs(self) -> dict[str, Any]:
        return {
            "echo": False,
            "pool_size": 10,
            "max_overflow": 20,
            "pool_pre_ping": True,
        }


def get_database_adapter(database_url: str, timeout: float = 5.0) -> DatabaseAdapter:
    """
    Factory function to get the database adapter for a connection string.

    Args:
        database_url: SQLAlchemy async URL
        timeout: Per-statement timeout handed to the driver

    Returns:
        DatabaseAdapter instance (SQLite unless the URL names PostgreSQL)
    """
    if database_url.startswith("postgresql"):
        return PostgreSQLAdapter(timeout=timeout)
    return SQLiteAdapter(timeout=timeout)
