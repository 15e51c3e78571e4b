"""Result models returned by the integrity subsystem.

All models serialize with camelCase keys to match the admin UI contract.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serializing field names as camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_response(self) -> dict:
        """Dump using camelCase keys, the shape served over HTTP."""
        return self.model_dump(by_alias=True, mode="json")


class RevalidationResult(CamelModel):
    """Outcome of one revalidation fan-out."""

    success: bool = True
    content_type: str
    paths: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    layout: bool = False
    errors: List[str] = Field(default_factory=list)


class FreshnessToken(CamelModel):
    """Cheap, comparable marker of a page's latest content change."""

    success: bool = True
    page: str
    last_updated: int = Field(0, description="Epoch milliseconds")
    content_count: int = 0


class BrokenMediaFile(CamelModel):
    """Media index row whose object is missing from the object store."""

    id: int
    filename: str
    path: str
    error: str


class BrokenContentReference(CamelModel):
    """Content item whose image URL does not resolve."""

    id: int
    page: str
    section: str
    content_key: str
    content_value: str
    error: str


class BrokenRecordImage(CamelModel):
    """Structured record whose image field does not resolve."""

    id: str
    table: str
    field: str
    name: Optional[str] = None
    url: str
    error: str


class FailedSection(CamelModel):
    """Scanner section whose enumeration could not complete."""

    section: str
    error: str


class RepairedItem(CamelModel):
    """One reference repaired by a non-dry-run scan."""

    kind: Literal["media_file", "content", "record"]
    id: str
    table: str


class ScanReport(CamelModel):
    """Findings of one scan pass; the only input repair accepts."""

    dry_run: bool = True
    broken_media_files: List[BrokenMediaFile] = Field(default_factory=list)
    broken_content_references: List[BrokenContentReference] = Field(
        default_factory=list
    )
    broken_product_images: List[BrokenRecordImage] = Field(default_factory=list)
    broken_category_images: List[BrokenRecordImage] = Field(default_factory=list)
    validated_files: int = 0
    failed_sections: List[FailedSection] = Field(default_factory=list)

    @property
    def total_broken_items(self) -> int:
        """Sum of all four broken-item lists."""
        return (
            len(self.broken_media_files)
            + len(self.broken_content_references)
            + len(self.broken_product_images)
            + len(self.broken_category_images)
        )


class CleanupSummary(CamelModel):
    total_broken_items: int
    validated_files: int
    cleaned_references: int


class CleanupReport(ScanReport):
    """Scan findings plus the repairs applied from them."""

    cleaned_references: int = 0
    repaired: List[RepairedItem] = Field(default_factory=list)
    repair_errors: List[str] = Field(default_factory=list)
    summary: Optional[CleanupSummary] = None


class ChangeLogEntry(CamelModel):
    """One object relocated by the storage reorganizer."""

    old_path: str
    new_path: str
    old_folder: str
    new_folder: str
    file_name: str
    storage_moved: bool
    records_updated: int = 0


class FolderCount(CamelModel):
    folder: str
    count: int


class ReorganizationReport(CamelModel):
    """Counters and change log of one reorganization pass."""

    folders_processed: int = 0
    folders_deleted: int = 0
    processed: int = 0
    files_moved: int = 0
    updated: int = 0
    errors: int = 0
    skipped: int = 0
    unreferenced: int = 0
    change_log: List[ChangeLogEntry] = Field(default_factory=list)
    new_folder_structure: List[FolderCount] = Field(default_factory=list)
