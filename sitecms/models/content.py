"""Content store records as seen by the integrity subsystem."""

from dataclasses import dataclass
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

# Content keys whose values are expected to be media URLs
IMAGE_CONTENT_KEYS: frozenset[str] = frozenset(
    {"image_url", "image_id", "logo", "background_image"}
)


class ContentItem(BaseModel):
    """One editable value addressed by (page, section, content_key)."""

    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    page: str
    section: str
    content_key: str
    content_value: Optional[str] = None
    updated_at: Optional[datetime | str] = None


class MediaFile(BaseModel):
    """One object store entry as known to the content store."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    filename: str
    original_name: Optional[str] = None
    file_path: str = Field(..., description="Full resolvable URL of the object")
    file_size: Optional[int] = None
    mime_type: Optional[str] = None
    alt_text: Optional[str] = None
    uploaded_at: Optional[datetime] = None


@dataclass(frozen=True)
class RecordImageField:
    """A structured-record column that holds a media URL."""

    table: str
    field: str
    label_field: str
    report_group: Literal["product", "category"]


# Record columns the integrity scanner validates
RECORD_IMAGE_FIELDS: tuple[RecordImageField, ...] = (
    RecordImageField("products", "image_url", "name", "product"),
    RecordImageField("project_categories", "icon_url", "name", "category"),
    RecordImageField("product_categories", "image_url", "name", "category"),
)


class RecordReference(BaseModel):
    """The value of one registered image field on one record."""

    table: str
    field: str
    id: str
    name: Optional[str] = None
    url: str
