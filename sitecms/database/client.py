"""Content store client interface."""

from collections.abc import Callable, Iterable
from typing import Protocol, runtime_checkable

from sitecms.models.content import (
    ContentItem,
    MediaFile,
    RecordImageField,
    RecordReference,
)


@runtime_checkable
class ContentStoreClient(Protocol):
    """Key-based content access plus row-level access to media records.

    Implementations raise on connectivity failures; the integrity
    subsystem turns those into per-section report failures.
    """

    async def get_page_content(
        self, page: str, section: str | None = None
    ) -> list[ContentItem]: ...

    async def set_content(
        self, page: str, section: str, content_key: str, content_value: str | None
    ) -> ContentItem: ...

    async def list_media_files(self) -> list[MediaFile]: ...

    async def delete_media_file(self, media_id: int) -> bool: ...

    async def list_image_content(self, keys: Iterable[str]) -> list[ContentItem]: ...

    async def clear_content_value(self, item_id: int) -> bool: ...

    async def list_record_images(
        self, field: RecordImageField
    ) -> list[RecordReference]: ...

    async def clear_record_image(
        self, field: RecordImageField, record_id: str
    ) -> bool: ...

    async def rewrite_media_references(
        self,
        old_path: str,
        new_url: str,
        new_filename: str,
        path_of: Callable[[str], str],
    ) -> int: ...
