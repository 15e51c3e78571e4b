"""Fixtures for the integrity subsystem: stores, origins and probes."""

from collections.abc import AsyncGenerator
from pathlib import Path

import httpx
import pytest
import pytest_asyncio

from sitecms.integrity.probe import ReferenceProbe
from sitecms.integrity.reorganizer import StorageReorganizer
from sitecms.integrity.scanner import IntegrityScanner
from sitecms.revalidation.config import DEFAULT_REVALIDATION_CONFIG
from sitecms.revalidation.dispatcher import RevalidationDispatcher
from sitecms.storage.local import LocalObjectStore

from .fakes import InMemoryContentStore, RecordingRenderCache

MEDIA_BASE_URL = "http://media.test/storage/site-media/"


class RemoteOrigin:
    """Status codes served by the mocked HTTP origin, keyed by URL."""

    def __init__(self) -> None:
        self.statuses: dict[str, int] = {}
        self.failures: dict[str, Exception] = {}
        self.requests: list[httpx.Request] = []

    def serve(self, url: str, status_code: int = 200) -> str:
        self.statuses[url] = status_code
        return url

    def fail(self, url: str, error: Exception) -> str:
        self.failures[url] = error
        return url

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)
        if url in self.failures:
            raise self.failures[url]
        return httpx.Response(self.statuses.get(url, 404))


@pytest.fixture
def content_store() -> InMemoryContentStore:
    return InMemoryContentStore()


@pytest.fixture
def render_cache() -> RecordingRenderCache:
    return RecordingRenderCache()


@pytest.fixture
def dispatcher(render_cache: RecordingRenderCache) -> RevalidationDispatcher:
    return RevalidationDispatcher(render_cache, DEFAULT_REVALIDATION_CONFIG)


@pytest.fixture
def object_store(tmp_path: Path) -> LocalObjectStore:
    return LocalObjectStore(tmp_path / "media", MEDIA_BASE_URL)


@pytest.fixture
def origin() -> RemoteOrigin:
    return RemoteOrigin()


@pytest_asyncio.fixture
async def http_client(origin: RemoteOrigin) -> AsyncGenerator[httpx.AsyncClient, None]:
    async with httpx.AsyncClient(
        transport=httpx.MockTransport(origin.handler)
    ) as client:
        yield client


@pytest.fixture
def probe(
    http_client: httpx.AsyncClient, object_store: LocalObjectStore
) -> ReferenceProbe:
    return ReferenceProbe(http_client, object_store, concurrency=4, timeout=2.0)


@pytest.fixture
def scanner(
    content_store: InMemoryContentStore, probe: ReferenceProbe
) -> IntegrityScanner:
    return IntegrityScanner(content_store, probe)


@pytest.fixture
def reorganizer(
    content_store: InMemoryContentStore, object_store: LocalObjectStore
) -> StorageReorganizer:
    return StorageReorganizer(content_store, object_store, retry_base_delay=0)
