"""Clients for the rendering layer's page cache."""

from typing import Protocol, runtime_checkable

import httpx
from redis.asyncio import Redis

from sitecms.core.config import Settings
from sitecms.core.exceptions import RenderCacheError


@runtime_checkable
class RenderCache(Protocol):
    """Invalidation surface of the rendering layer.

    Each call either completes or raises; the dispatcher owns error
    collection.
    """

    async def revalidate_path(self, path: str, layout: bool = False) -> None: ...

    async def revalidate_tag(self, tag: str) -> None: ...

    async def close(self) -> None: ...


class HttpRenderCache:
    """Calls the renderer's on-demand revalidation webhook."""

    def __init__(
        self,
        base_url: str,
        secret: str | None = None,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        headers = {"x-revalidate-secret": secret} if secret else {}
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"), headers=headers, timeout=timeout
        )

    async def _post(self, payload: dict[str, str]) -> None:
        try:
            response = await self._client.post("/api/revalidate", json=payload)
        except httpx.HTTPError as e:
            raise RenderCacheError(f"Renderer unreachable: {e}") from e
        if response.status_code >= 400:
            raise RenderCacheError(f"Renderer answered HTTP {response.status_code}")

    async def revalidate_path(self, path: str, layout: bool = False) -> None:
        await self._post({"path": path, "type": "layout" if layout else "page"})

    async def revalidate_tag(self, tag: str) -> None:
        await self._post({"tag": tag})

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()


class RedisRenderCache:
    """Evicts rendered pages the renderer keeps in Redis.

    Layout:
        ``<prefix>path:<path>``  rendered output of one path
        ``<prefix>tag:<tag>``    set of path keys carrying the tag
    """

    def __init__(self, redis: Redis, prefix: str = "render:") -> None:
        self.redis = redis
        self.prefix = prefix

    def path_key(self, path: str) -> str:
        return f"{self.prefix}path:{path}"

    def tag_key(self, tag: str) -> str:
        return f"{self.prefix}tag:{tag}"

    async def revalidate_path(self, path: str, layout: bool = False) -> None:
        if not layout:
            await self.redis.delete(self.path_key(path))
            return
        # A layout change invalidates every path rendered beneath it
        pattern = self.path_key(path.rstrip("/")) + "*"
        keys = [key async for key in self.redis.scan_iter(match=pattern)]
        if keys:
            await self.redis.delete(*keys)

    async def revalidate_tag(self, tag: str) -> None:
        tag_key = self.tag_key(tag)
        members = await self.redis.smembers(tag_key)
        await self.redis.delete(tag_key, *members)

    async def close(self) -> None:
        await self.redis.aclose()


def create_render_cache(settings: Settings) -> RenderCache:
    """Create the render cache client selected by ``RENDER_CACHE_BACKEND``.

    Raises:
        ValueError: If the backend is unknown
    """
    backend = settings.RENDER_CACHE_BACKEND.lower()
    if backend == "http":
        return HttpRenderCache(
            settings.RENDERER_URL,
            secret=settings.RENDERER_REVALIDATE_SECRET,
            timeout=settings.PROBE_TIMEOUT,
        )
    if backend == "redis":
        return RedisRenderCache(
            Redis.from_url(settings.REDIS_URL), prefix=settings.RENDER_CACHE_PREFIX
        )
    raise ValueError(f"Unknown render cache backend: {settings.RENDER_CACHE_BACKEND}")
