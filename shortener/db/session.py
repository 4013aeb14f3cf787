"""
Database Session Management with Connection Pooling

This module handles async database connections using SQLAlchemy's async engine.
Uses a database abstraction layer to support different database backends.

Key Features:
- Database abstraction: Easy to switch between SQLite, PostgreSQL, etc.
- Connection pooling: Configured per database type
- Async session management: Proper async context management
- Error handling: Automatic rollback on exceptions
"""

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession

from shortener.core.setting import settings
from shortener.db.adapters import get_database_adapter

# The adapter handles all database-specific configuration
db_adapter = get_database_adapter(settings.DATABASE_URL, timeout=settings.DATABASE_TIMEOUT)

engine = db_adapter.create_engine(settings.DATABASE_URL)


def make_session_maker(bind: AsyncEngine) -> async_sessionmaker:
    """
    Build a session factory bound to an engine.

    expire_on_commit=False keeps returned objects usable after the
    service layer commits.
    """
    return async_sessionmaker(
        bind,
        class_=SQLModelAsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async_session_maker = make_session_maker(engine)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency function for FastAPI to get database session.

    This function:
    - Creates a new async session from the pool
    - Yields it to the endpoint
    - Automatically commits on success
    - Rolls back on exception
    - Closes session automatically (context manager handles it)

    Usage in FastAPI:
        @router.get("/endpoint")
        async def endpoint(session: AsyncSession = Depends(get_session)):
            # Use session here
            pass
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()  # Commit transaction on successful completion
        except Exception:
            await session.rollback()  # Rollback on any exception
            raise
        # Session is automatically closed by the context manager
