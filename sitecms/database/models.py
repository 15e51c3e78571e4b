"""SQLAlchemy models for site content and media records."""

from datetime import datetime, timezone

from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    Integer,
    Text,
    UniqueConstraint,
)

from .base import Base


def utcnow() -> datetime:
    """Timezone-aware current time used for record timestamps."""
    return datetime.now(timezone.utc)


class SiteContentModel(Base):
    """Editable content value addressed by (page, section, content_key)."""

    __tablename__ = "site_content"
    __table_args__ = (
        UniqueConstraint(
            "page", "section", "content_key", name="uq_site_content_key"
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    page = Column(Text, nullable=False, index=True)
    section = Column(Text, nullable=False)
    content_key = Column(Text, nullable=False)
    content_value = Column(Text, nullable=True)
    content_type = Column(Text, nullable=True, default="text")
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=True)


class MediaFileModel(Base):
    """Index row for one object in the object store."""

    __tablename__ = "media_files"

    id = Column(Integer, primary_key=True, autoincrement=True)
    filename = Column(Text, nullable=False)
    original_name = Column(Text, nullable=True)
    file_path = Column(Text, nullable=False, index=True)
    file_size = Column(BigInteger, nullable=True)
    mime_type = Column(Text, nullable=True)
    alt_text = Column(Text, nullable=True)
    uploaded_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)


class ProductModel(Base):
    """Product record; ``image_url`` is a media reference."""

    __tablename__ = "products"

    id = Column(Text, primary_key=True)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    category_id = Column(Text, nullable=True)
    image_url = Column(Text, nullable=True)
    updated_at = Column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=True
    )


class ProductCategoryModel(Base):
    """Product category; ``image_url`` is a media reference."""

    __tablename__ = "product_categories"

    id = Column(Text, primary_key=True)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    image_url = Column(Text, nullable=True)
    sort_order = Column(Integer, nullable=True, default=999)


class ProjectModel(Base):
    """Project record."""

    __tablename__ = "projects"

    id = Column(Text, primary_key=True)
    title = Column(Text, nullable=False)
    category = Column(Text, nullable=True)
    image_url = Column(Text, nullable=True)
    updated_at = Column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=True
    )


class ProjectCategoryModel(Base):
    """Project category; ``icon_url`` is a media reference."""

    __tablename__ = "project_categories"

    id = Column(Text, primary_key=True)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    icon_url = Column(Text, nullable=True)
    sort_order = Column(Integer, nullable=True, default=999)
