"""Tests for the render cache clients."""

import json
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from sitecms.core.config import Settings
from sitecms.core.exceptions import RenderCacheError
from sitecms.revalidation.cache import (
    HttpRenderCache,
    RedisRenderCache,
    RenderCache,
    create_render_cache,
)


def _http_cache(handler) -> HttpRenderCache:
    client = httpx.AsyncClient(
        base_url="http://renderer.test",
        headers={"x-revalidate-secret": "s3cret"},
        transport=httpx.MockTransport(handler),
    )
    return HttpRenderCache("http://renderer.test", client=client)


class TestHttpRenderCache:
    async def test_posts_path_and_tag_payloads(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append((request.url.path, json.loads(request.content), request))
            return httpx.Response(200, json={"revalidated": True})

        cache = _http_cache(handler)
        await cache.revalidate_path("/about")
        await cache.revalidate_path("/", layout=True)
        await cache.revalidate_tag("content")

        assert [body for _, body, _ in seen] == [
            {"path": "/about", "type": "page"},
            {"path": "/", "type": "layout"},
            {"tag": "content"},
        ]
        assert all(path == "/api/revalidate" for path, _, _ in seen)
        assert seen[0][2].headers["x-revalidate-secret"] == "s3cret"

    async def test_error_status_raises(self):
        cache = _http_cache(lambda request: httpx.Response(500))

        with pytest.raises(RenderCacheError, match="HTTP 500"):
            await cache.revalidate_tag("content")

    async def test_network_error_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        cache = _http_cache(handler)

        with pytest.raises(RenderCacheError, match="unreachable"):
            await cache.revalidate_path("/about")

    async def test_close_leaves_injected_client_open(self):
        cache = _http_cache(lambda request: httpx.Response(200))
        await cache.close()
        assert not cache._client.is_closed


class TestRedisRenderCache:
    @pytest.fixture
    def redis(self):
        redis = MagicMock()
        redis.delete = AsyncMock()
        redis.smembers = AsyncMock(return_value={b"render:path:/products"})
        redis.aclose = AsyncMock()
        return redis

    async def test_path_deletes_one_key(self, redis):
        cache = RedisRenderCache(redis)
        await cache.revalidate_path("/about")
        redis.delete.assert_awaited_once_with("render:path:/about")

    async def test_layout_deletes_every_key_below(self, redis):
        async def scan_iter(match):
            assert match == "render:path:*"
            for key in (b"render:path:/", b"render:path:/about"):
                yield key

        redis.scan_iter = scan_iter
        cache = RedisRenderCache(redis)

        await cache.revalidate_path("/", layout=True)

        redis.delete.assert_awaited_once_with(
            b"render:path:/", b"render:path:/about"
        )

    async def test_tag_deletes_members_and_tag(self, redis):
        cache = RedisRenderCache(redis, prefix="site:")
        await cache.revalidate_tag("products")

        redis.smembers.assert_awaited_once_with("site:tag:products")
        redis.delete.assert_awaited_once_with(
            "site:tag:products", b"render:path:/products"
        )


class TestCreateRenderCache:
    def test_http_backend(self):
        cache = create_render_cache(Settings(RENDER_CACHE_BACKEND="http"))
        assert isinstance(cache, HttpRenderCache)
        assert isinstance(cache, RenderCache)

    def test_redis_backend(self):
        cache = create_render_cache(Settings(RENDER_CACHE_BACKEND="redis"))
        assert isinstance(cache, RedisRenderCache)

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="Unknown render cache backend"):
            create_render_cache(Settings(RENDER_CACHE_BACKEND="memcached"))
