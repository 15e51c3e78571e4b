"""Tests for database engine helpers."""

import pytest

from sitecms.core.db import create_engine, to_async_url


@pytest.mark.parametrize(
    "url, expected",
    [
        ("postgresql://u:p@db/cms", "postgresql+asyncpg://u:p@db/cms"),
        ("postgres://u:p@db/cms", "postgresql+asyncpg://u:p@db/cms"),
        ("postgresql+psycopg2://u:p@db/cms", "postgresql+asyncpg://u:p@db/cms"),
        ("sqlite:///content.db", "sqlite+aiosqlite:///content.db"),
        ("postgresql+asyncpg://u:p@db/cms", "postgresql+asyncpg://u:p@db/cms"),
    ],
)
def test_to_async_url(url: str, expected: str) -> None:
    assert to_async_url(url) == expected


async def test_create_engine_for_sqlite(tmp_path) -> None:
    engine = create_engine(f"sqlite:///{tmp_path / 'content.db'}")
    try:
        assert engine.url.drivername == "sqlite+aiosqlite"
    finally:
        await engine.dispose()
