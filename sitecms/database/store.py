"""SQLAlchemy-backed content store client."""

from collections.abc import Iterable

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from sitecms.core.logging import get_logger
from sitecms.models.content import (
    RECORD_IMAGE_FIELDS,
    ContentItem,
    MediaFile,
    RecordImageField,
    RecordReference,
)

from .base import Base
from .repositories import (
    MediaFileRepository,
    PathResolver,
    RecordImageRepository,
    SiteContentRepository,
)

logger = get_logger(__name__)

# Media columns rewritten on relocation but not probed by the scanner
EXTRA_REWRITE_COLUMNS: tuple[tuple[str, str], ...] = (("projects", "image_url"),)


class SQLContentStore:
    """Content store client over an async SQLAlchemy session factory.

    Each call runs in its own session and commits before returning, so a
    failure in one call never leaves another call's work uncommitted.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        record_fields: tuple[RecordImageField, ...] = RECORD_IMAGE_FIELDS,
    ) -> None:
        self._session_factory = session_factory
        self._record_fields = record_fields

    async def create_schema(self) -> None:
        """Create any missing tables."""
        async with self._session_factory() as session:
            connection = await session.connection()
            await connection.run_sync(Base.metadata.create_all)
            await session.commit()

    async def get_page_content(
        self, page: str, section: str | None = None
    ) -> list[ContentItem]:
        async with self._session_factory() as session:
            rows = await SiteContentRepository(session).get_by_page(page, section)
            return [ContentItem.model_validate(row) for row in rows]

    async def set_content(
        self, page: str, section: str, content_key: str, content_value: str | None
    ) -> ContentItem:
        async with self._session_factory() as session:
            row = await SiteContentRepository(session).upsert(
                page, section, content_key, content_value
            )
            item = ContentItem.model_validate(row)
            await session.commit()
        logger.info(
            "content_saved", page=page, section=section, content_key=content_key
        )
        return item

    async def list_media_files(self) -> list[MediaFile]:
        async with self._session_factory() as session:
            rows = await MediaFileRepository(session).get_all_newest_first()
            return [MediaFile.model_validate(row) for row in rows]

    async def delete_media_file(self, media_id: int) -> bool:
        async with self._session_factory() as session:
            deleted = await MediaFileRepository(session).delete(media_id)
            await session.commit()
            return deleted

    async def list_image_content(self, keys: Iterable[str]) -> list[ContentItem]:
        async with self._session_factory() as session:
            rows = await SiteContentRepository(session).get_by_keys(keys)
            return [ContentItem.model_validate(row) for row in rows]

    async def clear_content_value(self, item_id: int) -> bool:
        async with self._session_factory() as session:
            row = await SiteContentRepository(session).update(
                item_id, content_value=""
            )
            await session.commit()
            return row is not None

    async def list_record_images(
        self, field: RecordImageField
    ) -> list[RecordReference]:
        async with self._session_factory() as session:
            rows = await RecordImageRepository(
                session, field.table, field.field
            ).get_with_value()
            return [
                RecordReference(
                    table=field.table,
                    field=field.field,
                    id=str(row.id),
                    name=getattr(row, field.label_field, None),
                    url=getattr(row, field.field),
                )
                for row in rows
            ]

    async def clear_record_image(
        self, field: RecordImageField, record_id: str
    ) -> bool:
        async with self._session_factory() as session:
            cleared = await RecordImageRepository(
                session, field.table, field.field
            ).clear(record_id)
            await session.commit()
            return cleared

    async def rewrite_media_references(
        self,
        old_path: str,
        new_url: str,
        new_filename: str,
        path_of: PathResolver,
    ) -> int:
        """Repoint every stored reference to the object at ``old_path``.

        A value refers to the object when ``path_of`` resolves it to
        ``old_path``, whatever its URL spelling. Everything is rewritten in
        one transaction, and a second run with the same arguments is a
        no-op, which is what lets the reorganizer retry it safely.
        """
        async with self._session_factory() as session:
            updated = await MediaFileRepository(session).rewrite_reference(
                old_path, new_url, new_filename, path_of
            )
            updated += await SiteContentRepository(session).replace_reference(
                old_path, new_url, path_of
            )
            columns = [(f.table, f.field) for f in self._record_fields]
            for table, column in [*columns, *EXTRA_REWRITE_COLUMNS]:
                updated += await RecordImageRepository(
                    session, table, column
                ).replace_reference(old_path, new_url, path_of)
            await session.commit()
        return updated
