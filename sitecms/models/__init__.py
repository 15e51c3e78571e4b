"""Content records and report models."""

from .content import (
    IMAGE_CONTENT_KEYS,
    RECORD_IMAGE_FIELDS,
    ContentItem,
    MediaFile,
    RecordImageField,
    RecordReference,
)
from .reports import (
    BrokenContentReference,
    BrokenMediaFile,
    BrokenRecordImage,
    ChangeLogEntry,
    CleanupReport,
    CleanupSummary,
    FailedSection,
    FolderCount,
    FreshnessToken,
    RepairedItem,
    ReorganizationReport,
    RevalidationResult,
    ScanReport,
)

__all__ = [
    "IMAGE_CONTENT_KEYS",
    "RECORD_IMAGE_FIELDS",
    "ContentItem",
    "MediaFile",
    "RecordImageField",
    "RecordReference",
    "BrokenContentReference",
    "BrokenMediaFile",
    "BrokenRecordImage",
    "ChangeLogEntry",
    "CleanupReport",
    "CleanupSummary",
    "FailedSection",
    "FolderCount",
    "FreshnessToken",
    "RepairedItem",
    "ReorganizationReport",
    "RevalidationResult",
    "ScanReport",
]
