"""Object store client interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from urllib.parse import quote, unquote


@dataclass(frozen=True)
class StoredObject:
    """One entry returned by a folder listing."""

    name: str
    size: int | None = None
    is_folder: bool = False


class ObjectStoreClient(ABC):
    """Base class for object stores holding site media.

    Objects are addressed by slash-separated storage paths such as
    ``logos/acme.png``. Records in the content store keep the public URL
    of an object instead; ``public_url`` and ``path_from_url`` convert
    between the two.
    """

    def __init__(self, public_base_url: str) -> None:
        if not public_base_url.endswith("/"):
            public_base_url += "/"
        self.public_base_url = public_base_url

    def public_url(self, path: str) -> str:
        """Resolve a storage path to a fetchable URL."""
        return self.public_base_url + quote(path.lstrip("/"))

    def path_from_url(self, url: str) -> str:
        """Turn a stored reference back into a storage path.

        References that do not start with the public base URL are treated
        as storage paths already.
        """
        if url.startswith(self.public_base_url):
            url = url[len(self.public_base_url) :]
        return unquote(url.split("?", 1)[0]).lstrip("/")

    @abstractmethod
    async def list_folder(self, folder: str) -> list[StoredObject]:
        """List the direct children of ``folder``.

        Raises:
            StorageError: If the folder cannot be listed
        """
        raise NotImplementedError

    @abstractmethod
    async def exists(self, path: str) -> bool:
        """Check whether an object exists.

        Raises:
            StorageError: If the store cannot answer
        """
        raise NotImplementedError

    @abstractmethod
    async def move(self, source: str, destination: str) -> None:
        """Move one object.

        Raises:
            ObjectNotFoundError: If ``source`` does not exist
            StorageError: If the move fails
        """
        raise NotImplementedError

    @abstractmethod
    async def delete(self, paths: list[str]) -> None:
        """Delete objects or empty folders.

        Raises:
            StorageError: If the deletion fails
        """
        raise NotImplementedError

    async def close(self) -> None:
        """Release any held connections."""
        return None
