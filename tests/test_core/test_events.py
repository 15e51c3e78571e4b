"""Tests for application startup and shutdown events."""

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from redis.asyncio.client import Redis
from redis.exceptions import ConnectionError

from sitecms.core.events import Services, lifespan


@pytest.fixture
def mock_redis() -> AsyncMock:
    """Mock Redis client."""
    redis = AsyncMock(spec=Redis)
    redis.ping = AsyncMock(return_value=True)
    redis.info = AsyncMock(return_value={"connected_clients": 5})
    redis.aclose = AsyncMock()
    return redis


async def test_health_check_without_redis(services: Services) -> None:
    health = await services.health_check()
    assert health == {"status": "unavailable", "error": "Redis not configured"}


async def test_health_check_success(services: Services, mock_redis: AsyncMock) -> None:
    services.redis = mock_redis

    health = await services.health_check()

    assert health == {"status": "healthy", "connected_clients": 5}
    mock_redis.ping.assert_awaited_once()


async def test_health_check_failure(services: Services, mock_redis: AsyncMock) -> None:
    mock_redis.ping.side_effect = ConnectionError("Connection refused")
    services.redis = mock_redis

    health = await services.health_check()

    assert health["status"] == "unhealthy"
    assert "Connection refused" in health["error"]


async def test_close_continues_after_failure(
    services: Services, render_cache, mock_redis: AsyncMock, mocker
) -> None:
    mocker.patch.object(
        services.object_store, "close", AsyncMock(side_effect=OSError("busy"))
    )
    services.redis = mock_redis

    await services.close()

    assert render_cache.closed is True
    assert services.http_client.is_closed
    mock_redis.aclose.assert_awaited_once()


async def test_lifespan_creates_and_closes_services(mocker) -> None:
    created = mocker.MagicMock(spec=Services)
    created.close = AsyncMock()
    factory = mocker.patch(
        "sitecms.core.events.create_services", AsyncMock(return_value=created)
    )
    app = FastAPI()

    async with lifespan(app):
        assert app.state.services is created

    factory.assert_awaited_once()
    created.close.assert_awaited_once()
    assert app.state.services is None


async def test_lifespan_leaves_preset_services_alone(
    services: Services, mocker
) -> None:
    factory = mocker.patch("sitecms.core.events.create_services")
    close = mocker.patch.object(services, "close", AsyncMock())
    app = FastAPI()
    app.state.services = services

    async with lifespan(app):
        pass

    factory.assert_not_called()
    close.assert_not_awaited()
    assert app.state.services is services
