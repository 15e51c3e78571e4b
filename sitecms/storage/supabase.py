"""Supabase Storage REST client."""

from typing import Any
from urllib.parse import quote

import httpx

from sitecms.core.exceptions import ObjectNotFoundError, StorageError

from .base import ObjectStoreClient, StoredObject

LIST_PAGE_SIZE = 1000


class SupabaseObjectStore(ObjectStoreClient):
    """Object store client for a Supabase Storage bucket.

    Talks to the storage REST API with the service role key. The public
    URL of an object is ``<url>/storage/v1/object/public/<bucket>/<path>``
    unless an explicit public base URL is configured.
    """

    def __init__(
        self,
        url: str,
        bucket: str,
        service_key: str,
        public_base_url: str | None = None,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        base = url.rstrip("/")
        super().__init__(
            public_base_url or f"{base}/storage/v1/object/public/{bucket}/"
        )
        self.bucket = bucket
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=f"{base}/storage/v1",
            headers={
                "Authorization": f"Bearer {service_key}",
                "apikey": service_key,
            },
            timeout=timeout,
        )

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise StorageError(f"{method} {url} failed: {e}") from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return f"HTTP {response.status_code}"
        if isinstance(body, dict):
            return str(body.get("message") or body.get("error") or body)
        return str(body)

    async def list_folder(self, folder: str) -> list[StoredObject]:
        objects: list[StoredObject] = []
        offset = 0
        while True:
            response = await self._request(
                "POST",
                f"/object/list/{self.bucket}",
                json={
                    "prefix": folder.strip("/"),
                    "limit": LIST_PAGE_SIZE,
                    "offset": offset,
                    "sortBy": {"column": "name", "order": "asc"},
                },
            )
            if response.status_code >= 400:
                raise StorageError(
                    f"Could not list {folder}: {self._error_message(response)}"
                )
            page = response.json()
            for entry in page:
                # Folders come back without an object id
                is_folder = entry.get("id") is None
                metadata = entry.get("metadata") or {}
                objects.append(
                    StoredObject(
                        name=entry["name"],
                        size=metadata.get("size"),
                        is_folder=is_folder,
                    )
                )
            if len(page) < LIST_PAGE_SIZE:
                return objects
            offset += LIST_PAGE_SIZE

    async def exists(self, path: str) -> bool:
        response = await self._request(
            "HEAD", f"/object/authenticated/{self.bucket}/{quote(path.lstrip('/'))}"
        )
        if response.status_code in (400, 404):
            return False
        if response.status_code >= 400:
            raise StorageError(f"Could not check {path}: HTTP {response.status_code}")
        return True

    async def move(self, source: str, destination: str) -> None:
        response = await self._request(
            "POST",
            "/object/move",
            json={
                "bucketId": self.bucket,
                "sourceKey": source,
                "destinationKey": destination,
            },
        )
        if response.status_code == 404:
            raise ObjectNotFoundError(f"Object not found: {source}")
        if response.status_code >= 400:
            raise StorageError(
                f"Move failed {source} -> {destination}: "
                f"{self._error_message(response)}"
            )

    async def delete(self, paths: list[str]) -> None:
        response = await self._request(
            "DELETE", f"/object/{self.bucket}", json={"prefixes": paths}
        )
        if response.status_code >= 400:
            raise StorageError(
                f"Delete failed for {paths}: {self._error_message(response)}"
            )

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
