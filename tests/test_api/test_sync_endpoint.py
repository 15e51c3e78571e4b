"""Tests for the content sync endpoint."""

from datetime import datetime, timezone

from httpx import AsyncClient


async def test_returns_freshness_token(
    test_app_async_client: AsyncClient, content_store
):
    stamp = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    content_store.add_content("home", "hero", "title", "a", stamp)

    response = await test_app_async_client.post(
        "/api/sync/content", json={"page": "home"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["page"] == "home"
    assert body["lastUpdated"] == int(stamp.timestamp() * 1000)
    assert body["contentCount"] == 1
    assert datetime.fromisoformat(body["timestamp"]).tzinfo is not None


async def test_empty_page(test_app_async_client: AsyncClient):
    response = await test_app_async_client.post(
        "/api/sync/content", json={"page": "about"}
    )

    body = response.json()
    assert body["lastUpdated"] == 0
    assert body["contentCount"] == 0


async def test_is_never_cached(test_app_async_client: AsyncClient):
    response = await test_app_async_client.post(
        "/api/sync/content", json={"page": "home"}
    )

    assert "no-store" in response.headers["Cache-Control"]
    assert response.headers["Pragma"] == "no-cache"
    assert response.headers["Expires"] == "0"


async def test_page_is_required(test_app_async_client: AsyncClient):
    response = await test_app_async_client.post("/api/sync/content", json={})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Page required"


async def test_store_failure_is_a_server_error(
    test_app_async_client: AsyncClient, content_store
):
    content_store.fail_on.add("get_page_content")

    response = await test_app_async_client.post(
        "/api/sync/content", json={"page": "home"}
    )

    assert response.status_code == 500
    assert response.json()["success"] is False
