"""
Shared fixtures.

Every test gets its own SQLite file under tmp_path, so tests never share
state and concurrent sessions behave like separate requests.
"""

import os

os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlmodel import SQLModel

from shortener.db import models  # noqa: F401  registers tables on SQLModel.metadata
from shortener.db.adapters import get_database_adapter
from shortener.db.session import get_session, make_session_maker
from shortener.main import app
from shortener.services.user_service import UserService


class ScriptedGenerator:
    """Code generator that returns a fixed sequence and counts calls."""

    def __init__(self, codes):
        self._codes = iter(codes)
        self.calls = 0

    def generate(self) -> str:
        self.calls += 1
        return next(self._codes)


@pytest.fixture
async def engine(tmp_path):
    database_url = f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"
    engine = get_database_adapter(database_url, timeout=30).create_engine(database_url)
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return make_session_maker(engine)


@pytest.fixture
async def session(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
async def default_user(session):
    return await UserService(session).get_or_create_default_user()


@pytest.fixture
async def registered_user(session):
    return await UserService(session).register("alice@example.com", "correct-horse")


@pytest.fixture
async def client(session_maker):
    async def override_get_session():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac
    app.dependency_overrides.clear()
