"""Database connection and session management."""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from sitecms.core.config import settings


def to_async_url(database_url: str) -> str:
    """Rewrite a plain database URL to use an asyncio driver."""
    if database_url.startswith("postgresql+psycopg2://"):
        return database_url.replace(
            "postgresql+psycopg2://", "postgresql+asyncpg://", 1
        )
    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if database_url.startswith("postgres://"):
        return database_url.replace("postgres://", "postgresql+asyncpg://", 1)
    if database_url.startswith("sqlite://"):
        return database_url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return database_url


def create_engine(database_url: str | None = None) -> AsyncEngine:
    """Create an async engine for the configured content store."""
    url = to_async_url(database_url or settings.DATABASE_URL)
    if url.startswith("sqlite"):
        # SQLite pools do not take size arguments
        return create_async_engine(url, echo=False)
    return create_async_engine(
        url,
        pool_size=settings.MAX_CONNECTIONS,
        max_overflow=0,
        echo=False,
    )


def create_session_factory(
    bind: AsyncEngine,
) -> async_sessionmaker[AsyncSession]:
    """Create the session factory used by the content store client."""
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
