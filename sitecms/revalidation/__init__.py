"""Render cache revalidation after content mutations."""

from .cache import HttpRenderCache, RedisRenderCache, RenderCache, create_render_cache
from .config import (
    DEFAULT_REVALIDATION_CONFIG,
    CacheTag,
    ContentType,
    RevalidationConfig,
    RevalidationRule,
)
from .dispatcher import RevalidationDispatcher

__all__ = [
    "HttpRenderCache",
    "RedisRenderCache",
    "RenderCache",
    "create_render_cache",
    "DEFAULT_REVALIDATION_CONFIG",
    "CacheTag",
    "ContentType",
    "RevalidationConfig",
    "RevalidationRule",
    "RevalidationDispatcher",
]
