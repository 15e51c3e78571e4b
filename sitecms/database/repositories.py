"""Repository pattern for content store operations."""

from collections.abc import Callable, Iterable
from typing import Any, Generic, Optional, Sequence, TypeVar
from urllib.parse import quote

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .models import (
    MediaFileModel,
    ProductCategoryModel,
    ProductModel,
    ProjectCategoryModel,
    ProjectModel,
    SiteContentModel,
    utcnow,
)

ModelType = TypeVar("ModelType")

# Maps a stored reference (public URL or bare path) to its storage path
PathResolver = Callable[[str], str]

# Table name -> model for tables holding media reference fields
RECORD_MODELS: dict[str, type] = {
    "products": ProductModel,
    "product_categories": ProductCategoryModel,
    "projects": ProjectModel,
    "project_categories": ProjectCategoryModel,
}


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


async def find_references(
    session: AsyncSession,
    model: type,
    column: Any,
    storage_path: str,
    path_of: PathResolver,
) -> list[Any]:
    """Rows whose ``column`` refers to the object at ``storage_path``.

    Candidates are narrowed in SQL to values containing the file name,
    raw or URL-encoded, then kept only when their reference resolves to
    exactly ``storage_path``.
    """
    name = storage_path.rsplit("/", 1)[-1]
    patterns = [f"%{_escape_like(n)}%" for n in dict.fromkeys((name, quote(name)))]
    query = (
        select(model)
        .filter(or_(*(column.like(p, escape="\\") for p in patterns)))
        .order_by(model.id)
    )
    result = await session.execute(query)
    return [
        row
        for row in result.scalars().all()
        if path_of(getattr(row, column.key)) == storage_path
    ]

class BaseRepository(Generic[ModelType]):
    """Base repository for common database operations."""

    def __init__(self, session: AsyncSession, model: type[ModelType]):
        self.session = session
        self.model = model

    async def get_by_id(self, id: Any) -> Optional[ModelType]:
        """Get entity by ID."""
        return await self.session.get(self.model, id)

    async def create(self, **kwargs: Any) -> ModelType:
        """Create new entity."""
        instance = self.model(**kwargs)
        self.session.add(instance)
        await self.session.flush()
        return instance

    async def update(self, id: Any, **kwargs: Any) -> Optional[ModelType]:
        """Update entity by ID."""
        instance = await self.get_by_id(id)
        if instance:
            for key, value in kwargs.items():
                if hasattr(instance, key):
                    setattr(instance, key, value)
            await self.session.flush()
        return instance

    async def delete(self, id: Any) -> bool:
        """Delete entity by ID."""
        instance = await self.get_by_id(id)
        if instance:
            await self.session.delete(instance)
            await self.session.flush()
            return True
        return False


class SiteContentRepository(BaseRepository[SiteContentModel]):
    """Repository for editable page content."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, SiteContentModel)

    async def get_by_page(
        self, page: str, section: str | None = None
    ) -> Sequence[SiteContentModel]:
        """Get all content items on a page, optionally within one section."""
        query = select(self.model).filter(self.model.page == page)
        if section is not None:
            query = query.filter(self.model.section == section)
        query = query.order_by(self.model.section, self.model.content_key)
        result = await self.session.execute(query)
        return result.scalars().all()

    async def get_by_key(
        self, page: str, section: str, content_key: str
    ) -> Optional[SiteContentModel]:
        """Get the live value for one composite key."""
        query = select(self.model).filter(
            self.model.page == page,
            self.model.section == section,
            self.model.content_key == content_key,
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def upsert(
        self, page: str, section: str, content_key: str, content_value: str | None
    ) -> SiteContentModel:
        """Insert or replace the value stored under a composite key."""
        instance = await self.get_by_key(page, section, content_key)
        if instance is None:
            return await self.create(
                page=page,
                section=section,
                content_key=content_key,
                content_value=content_value,
                updated_at=utcnow(),
            )
        instance.content_value = content_value
        instance.updated_at = utcnow()
        await self.session.flush()
        return instance

    async def get_by_keys(self, keys: Iterable[str]) -> Sequence[SiteContentModel]:
        """Get content items whose key is one of ``keys``."""
        query = (
            select(self.model)
            .filter(self.model.content_key.in_(list(keys)))
            .order_by(self.model.id)
        )
        result = await self.session.execute(query)
        return result.scalars().all()

    async def replace_reference(
        self, storage_path: str, new_value: str, path_of: PathResolver
    ) -> int:
        """Point every content value referring to ``storage_path`` at ``new_value``."""
        rows = await find_references(
            self.session, self.model, self.model.content_value, storage_path, path_of
        )
        for row in rows:
            row.content_value = new_value
            row.updated_at = utcnow()
        await self.session.flush()
        return len(rows)


class MediaFileRepository(BaseRepository[MediaFileModel]):
    """Repository for the media index."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, MediaFileModel)

    async def get_all_newest_first(self) -> Sequence[MediaFileModel]:
        """Get every media row, most recent upload first."""
        query = select(self.model).order_by(
            self.model.uploaded_at.desc(), self.model.id.desc()
        )
        result = await self.session.execute(query)
        return result.scalars().all()

    async def rewrite_reference(
        self, storage_path: str, new_url: str, filename: str, path_of: PathResolver
    ) -> int:
        """Point every row indexing ``storage_path`` at ``new_url``."""
        rows = await find_references(
            self.session, self.model, self.model.file_path, storage_path, path_of
        )
        for row in rows:
            row.file_path = new_url
            row.filename = filename
        await self.session.flush()
        return len(rows)


class RecordImageRepository:
    """Reads and clears one media reference column on one table."""

    def __init__(self, session: AsyncSession, table: str, field: str):
        if table not in RECORD_MODELS:
            raise KeyError(table)
        self.session = session
        self.model = RECORD_MODELS[table]
        if not hasattr(self.model, field):
            raise KeyError(f"{table}.{field}")
        self.column = getattr(self.model, field)

    async def get_with_value(self) -> Sequence[Any]:
        """Get every record whose field is not null."""
        query = (
            select(self.model).filter(self.column.is_not(None)).order_by(self.model.id)
        )
        result = await self.session.execute(query)
        return result.scalars().all()

    async def clear(self, record_id: str) -> bool:
        """Null the field on one record."""
        key = self.model.id.type.python_type(record_id)
        result = await self.session.execute(
            update(self.model)
            .where(self.model.id == key)
            .values({self.column.key: None})
        )
        return bool(result.rowcount)

    async def replace_reference(
        self, storage_path: str, new_value: str, path_of: PathResolver
    ) -> int:
        """Point every field value referring to ``storage_path`` at ``new_value``."""
        rows = await find_references(
            self.session, self.model, self.column, storage_path, path_of
        )
        for row in rows:
            setattr(row, self.column.key, new_value)
        await self.session.flush()
        return len(rows)
