"""Object store clients."""

from .base import ObjectStoreClient, StoredObject
from .config import create_object_store
from .local import LocalObjectStore
from .supabase import SupabaseObjectStore

__all__ = [
    "ObjectStoreClient",
    "StoredObject",
    "create_object_store",
    "LocalObjectStore",
    "SupabaseObjectStore",
]
