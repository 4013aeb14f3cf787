"""
Database Abstraction Interface

This module defines the database abstraction layer that allows switching between
different database backends (SQLite, PostgreSQL, etc.) without changing the
rest of the codebase.

The interface defines common database operations and behaviors that all database
adapters must implement. This makes it easy to swap database backends by
simply implementing a new adapter class.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
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
    3. Register its URL prefix in get_database_adapter()
    """

    def __init__(self, timeout: float = 5.0):
        """
        Args:
            timeout: Seconds a single statement may wait (lock or network)
                before the driver gives up
        """
        self.timeout = timeout

    def create_engine(self, database_url: str, **kwargs) -> AsyncEngine:
        """
        Create and configure the async database engine.

        Args:
            database_url: Connection string for the database
            **kwargs: Additional engine options (merged with adapter defaults)

        Returns:
            Configured AsyncEngine instance
        """
        engine_kwargs = self.get_engine_kwargs()
        engine_kwargs.update(kwargs)

        pool_class = self.get_pool_class()
        if pool_class is not None:
            engine_kwargs["poolclass"] = pool_class

        return create_async_engine(
            database_url,
            connect_args=self.get_connect_args(),
            **engine_kwargs
        )

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
        """
        Get connection arguments specific to this database type.

        Returns:
            Dictionary of connection arguments
        """
        pass

    @abstractmethod
    def get_engine_kwargs(self) -> dict[str, Any]:
        """
        Get additional engine configuration specific to this database type.

        Returns:
            Dictionary of engine configuration options
        """
        pass
