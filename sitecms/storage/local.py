"""Filesystem-backed object store for development and tests."""

import shutil
from pathlib import Path

from sitecms.core.exceptions import ObjectNotFoundError, StorageError

from .base import ObjectStoreClient, StoredObject


class LocalObjectStore(ObjectStoreClient):
    """Stores objects as files under a root directory.

    Storage path ``logos/acme.png`` maps to ``<root>/logos/acme.png``.
    """

    def __init__(self, root: Path, public_base_url: str) -> None:
        super().__init__(public_base_url)
        self.root = root.resolve()
        self.root.mkdir(parents=True, exist_ok=True)

    def _resolve(self, path: str) -> Path:
        """Map a storage path to a file path inside the root."""
        target = (self.root / path.lstrip("/")).resolve()
        if target != self.root and self.root not in target.parents:
            raise StorageError(f"Path escapes storage root: {path}")
        return target

    async def list_folder(self, folder: str) -> list[StoredObject]:
        directory = self._resolve(folder)
        if not directory.exists():
            return []
        if not directory.is_dir():
            raise StorageError(f"Not a folder: {folder}")
        return [
            StoredObject(
                name=entry.name,
                size=None if entry.is_dir() else entry.stat().st_size,
                is_folder=entry.is_dir(),
            )
            for entry in sorted(directory.iterdir())
        ]

    async def exists(self, path: str) -> bool:
        return self._resolve(path).is_file()

    async def move(self, source: str, destination: str) -> None:
        src = self._resolve(source)
        dst = self._resolve(destination)
        if not src.is_file():
            raise ObjectNotFoundError(f"Object not found: {source}")
        if dst.exists():
            raise StorageError(f"Destination already exists: {destination}")
        dst.parent.mkdir(parents=True, exist_ok=True)
        try:
            shutil.move(str(src), str(dst))
        except OSError as e:
            raise StorageError(f"Move failed {source} -> {destination}: {e}") from e

    async def delete(self, paths: list[str]) -> None:
        for path in paths:
            target = self._resolve(path)
            if target == self.root:
                raise StorageError("Refusing to delete storage root")
            try:
                if target.is_dir():
                    target.rmdir()  # Only empty folders
                elif target.exists():
                    target.unlink()
            except OSError as e:
                raise StorageError(f"Delete failed for {path}: {e}") from e

    def put(self, path: str, data: bytes) -> None:
        """Write an object; used to seed development stores."""
        target = self._resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
