"""Application startup and shutdown events."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

import httpx
from fastapi import FastAPI
from redis.asyncio import Redis
from redis.exceptions import ConnectionError, TimeoutError
from sqlalchemy.ext.asyncio import AsyncEngine

from sitecms.core.config import Settings, settings
from sitecms.core.db import create_engine, create_session_factory
from sitecms.core.logging import get_logger
from sitecms.database.client import ContentStoreClient
from sitecms.database.store import SQLContentStore
from sitecms.integrity.probe import ReferenceProbe
from sitecms.integrity.reorganizer import (
    DEFAULT_FOLDER_MAPPING,
    FolderMapping,
    StorageReorganizer,
)
from sitecms.integrity.scanner import IntegrityScanner
from sitecms.revalidation.cache import RenderCache, create_render_cache
from sitecms.revalidation.config import DEFAULT_REVALIDATION_CONFIG
from sitecms.revalidation.dispatcher import RevalidationDispatcher
from sitecms.storage.base import ObjectStoreClient
from sitecms.storage.config import create_object_store

logger = get_logger(__name__)


@dataclass
class Services:
    """Everything a request handler or CLI command works against."""

    store: ContentStoreClient
    object_store: ObjectStoreClient
    render_cache: RenderCache
    http_client: httpx.AsyncClient
    dispatcher: RevalidationDispatcher
    scanner: IntegrityScanner
    reorganizer: StorageReorganizer
    redis: Redis | None = None
    engine: AsyncEngine | None = None

    async def health_check(self) -> dict[str, Any]:
        """Check Redis connectivity.

        Returns:
            Dict containing the Redis status and, when reachable, its
            connected client count
        """
        if self.redis is None:
            return {"status": "unavailable", "error": "Redis not configured"}
        try:
            await self.redis.ping()
            info = await self.redis.info("clients")
        except (ConnectionError, TimeoutError, OSError) as e:
            logger.error("redis_health_check_failed", error=str(e))
            return {"status": "unhealthy", "error": str(e)}
        return {
            "status": "healthy",
            "connected_clients": info.get("connected_clients", 0),
        }

    async def close(self) -> None:
        """Close every owned client; later ones still close if one fails."""
        closers = [
            ("render_cache", self.render_cache.close),
            ("object_store", self.object_store.close),
            ("http_client", self.http_client.aclose),
        ]
        if self.redis is not None:
            closers.append(("redis", self.redis.aclose))
        if self.engine is not None:
            closers.append(("database", self.engine.dispose))
        for name, close in closers:
            try:
                await close()
            except Exception as e:
                logger.error("service_close_failed", service=name, error=str(e))


def build_services(
    config: Settings,
    store: ContentStoreClient,
    object_store: ObjectStoreClient,
    render_cache: RenderCache,
    http_client: httpx.AsyncClient | None = None,
    mapping: FolderMapping = DEFAULT_FOLDER_MAPPING,
) -> Services:
    """Wire the dispatcher, scanner and reorganizer over the given clients."""
    http_client = http_client or httpx.AsyncClient(timeout=config.PROBE_TIMEOUT)
    probe = ReferenceProbe(
        http_client,
        object_store,
        concurrency=config.PROBE_CONCURRENCY,
        timeout=config.PROBE_TIMEOUT,
    )
    return Services(
        store=store,
        object_store=object_store,
        render_cache=render_cache,
        http_client=http_client,
        dispatcher=RevalidationDispatcher(render_cache, DEFAULT_REVALIDATION_CONFIG),
        scanner=IntegrityScanner(store, probe),
        reorganizer=StorageReorganizer(
            store,
            object_store,
            mapping=mapping,
            rewrite_retries=config.REWRITE_RETRIES,
        ),
    )


async def create_services(config: Settings = settings) -> Services:
    """Create the production clients from settings and wire them together."""
    engine = create_engine(config.DATABASE_URL)
    store = SQLContentStore(create_session_factory(engine))
    await store.create_schema()

    services = build_services(
        config,
        store=store,
        object_store=create_object_store(config),
        render_cache=create_render_cache(config),
    )
    services.engine = engine
    services.redis = Redis.from_url(
        config.REDIS_URL,
        encoding="utf-8",
        decode_responses=False,
        health_check_interval=15,
    )
    logger.info(
        "services_started",
        storage_backend=config.STORAGE_BACKEND,
        render_cache_backend=config.RENDER_CACHE_BACKEND,
    )
    return services


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create services on startup and close them on shutdown.

    Services already placed on ``app.state`` (as tests do) are left alone.
    """
    owned = getattr(app.state, "services", None) is None
    if owned:
        app.state.services = await create_services()
    try:
        yield
    finally:
        if owned:
            await app.state.services.close()
            app.state.services = None
            logger.info("application_shutdown_complete")
