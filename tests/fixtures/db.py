"""Database test fixtures."""

from pathlib import Path
from typing import AsyncGenerator

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from sitecms.core.db import create_engine, create_session_factory
from sitecms.database.store import SQLContentStore


@pytest_asyncio.fixture(scope="function")
async def db_engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """Get a SQLite engine backed by a per-test database file.

    Yields:
        AsyncEngine for the test database
    """
    engine = create_engine(f"sqlite:///{tmp_path / 'content.db'}")
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session_factory(
    db_engine: AsyncEngine,
) -> async_sessionmaker[AsyncSession]:
    """Get session factory for testing."""
    return create_session_factory(db_engine)


@pytest_asyncio.fixture(scope="function")
async def sql_store(
    db_session_factory: async_sessionmaker[AsyncSession],
) -> SQLContentStore:
    """Get a content store client over a freshly created schema."""
    store = SQLContentStore(db_session_factory)
    await store.create_schema()
    return store
