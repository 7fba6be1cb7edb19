from __future__ import annotations

import os
from collections.abc import Callable
from typing import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Set test environment variables before importing app
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"

# Nothing listens on port 1, connects are refused immediately
UNREACHABLE_DATABASE_URL = "postgresql+asyncpg://user:pw@127.0.0.1:1/prompts"

from app.database.base import Base
from app.database.database import get_db
from app.main import app


def make_test_engine() -> AsyncEngine:
    # One shared in-memory connection so every session sees the same tables
    return create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )


def override_get_db_with(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[], AsyncGenerator[AsyncSession, None]]:
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    return override_get_db


@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    engine = make_test_engine()
    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Drop tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def async_client(test_engine: AsyncEngine) -> AsyncGenerator[AsyncClient, None]:
    session_factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    app.dependency_overrides[get_db] = override_get_db_with(session_factory)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def broken_client() -> AsyncGenerator[AsyncClient, None]:
    """Client backed by a database where the prompts table was never provisioned."""
    engine = make_test_engine()
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    app.dependency_overrides[get_db] = override_get_db_with(session_factory)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def broken_session() -> AsyncGenerator[AsyncSession, None]:
    engine = make_test_engine()
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session
    await engine.dispose()


@pytest_asyncio.fixture
async def unreachable_engine() -> AsyncGenerator[AsyncEngine, None]:
    engine = create_async_engine(UNREACHABLE_DATABASE_URL)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def unreachable_session(unreachable_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(unreachable_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def unreachable_client(unreachable_engine: AsyncEngine) -> AsyncGenerator[AsyncClient, None]:
    """Client whose database server cannot be reached at all."""
    session_factory = async_sessionmaker(unreachable_engine, class_=AsyncSession, expire_on_commit=False)
    app.dependency_overrides[get_db] = override_get_db_with(session_factory)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()
