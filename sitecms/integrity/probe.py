"""Existence probes for media references."""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Optional, TypeVar

import httpx

from sitecms.core.exceptions import StorageError
from sitecms.storage.base import ObjectStoreClient

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of one probe.

    A failed probe is a transient, item-level finding: it is reported,
    never raised.
    """

    ok: bool
    error: Optional[str] = None

    @classmethod
    def success(cls) -> "ProbeResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, error: str) -> "ProbeResult":
        return cls(ok=False, error=error)


def looks_like_url(value: str | None) -> bool:
    """True for absolute http(s) URLs."""
    if not value:
        return False
    return value.strip().lower().startswith(("http://", "https://"))


class ReferenceProbe:
    """Checks that media references resolve, with bounded concurrency."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        object_store: ObjectStoreClient,
        concurrency: int = 8,
        timeout: float = 10.0,
    ) -> None:
        self.client = client
        self.object_store = object_store
        self.timeout = timeout
        self._semaphore = asyncio.Semaphore(concurrency)

    async def probe_url(self, url: str) -> ProbeResult:
        """HEAD a URL; any 2xx after redirects counts as resolvable."""
        try:
            response = await self.client.head(
                url, follow_redirects=True, timeout=self.timeout
            )
            if response.status_code == 405:
                # Some origins reject HEAD; ask for the body but never read it
                async with self.client.stream(
                    "GET", url, follow_redirects=True, timeout=self.timeout
                ) as streamed:
                    response = streamed
        except httpx.TimeoutException:
            return ProbeResult.failure("Timeout")
        except httpx.HTTPError as e:
            return ProbeResult.failure(f"Network error: {e.__class__.__name__}")
        if not response.is_success:
            return ProbeResult.failure(f"HTTP {response.status_code}")
        return ProbeResult.success()

    async def probe_object(self, reference: str) -> ProbeResult:
        """Ask the object store whether the object behind a reference exists."""
        path = self.object_store.path_from_url(reference)
        try:
            found = await asyncio.wait_for(
                self.object_store.exists(path), timeout=self.timeout
            )
        except asyncio.TimeoutError:
            return ProbeResult.failure("Timeout")
        except StorageError as e:
            return ProbeResult.failure(f"Storage access error: {e}")
        if not found:
            return ProbeResult.failure("File not found")
        return ProbeResult.success()

    async def map(
        self, items: Sequence[T], probe: Callable[[T], Awaitable[R]]
    ) -> list[R]:
        """Run ``probe`` over ``items``; results keep the order of ``items``."""

        async def bounded(item: T) -> R:
            async with self._semaphore:
                return await probe(item)

        return list(await asyncio.gather(*(bounded(item) for item in items)))
