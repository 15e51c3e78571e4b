"""Configuration for the object store."""

from pathlib import Path

from sitecms.core.config import Settings

from .base import ObjectStoreClient
from .local import LocalObjectStore
from .supabase import SupabaseObjectStore

LOCAL_PUBLIC_URL = "http://localhost:8000/media/"


def create_object_store(settings: Settings) -> ObjectStoreClient:
    """Create the object store selected by ``STORAGE_BACKEND``.

    Raises:
        ValueError: If the backend is unknown or missing credentials
    """
    backend = settings.STORAGE_BACKEND.lower()

    if backend == "local":
        return LocalObjectStore(
            root=Path(settings.STORAGE_ROOT),
            public_base_url=settings.STORAGE_PUBLIC_URL or LOCAL_PUBLIC_URL,
        )

    if backend == "supabase":
        if not settings.STORAGE_URL or not settings.STORAGE_SERVICE_KEY:
            raise ValueError(
                "STORAGE_URL and STORAGE_SERVICE_KEY are required for the "
                "supabase storage backend"
            )
        return SupabaseObjectStore(
            url=settings.STORAGE_URL,
            bucket=settings.STORAGE_BUCKET,
            service_key=settings.STORAGE_SERVICE_KEY,
            public_base_url=settings.STORAGE_PUBLIC_URL,
            timeout=settings.PROBE_TIMEOUT,
        )

    raise ValueError(f"Unknown storage backend: {settings.STORAGE_BACKEND}")
