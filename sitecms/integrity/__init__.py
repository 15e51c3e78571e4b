"""Media reference integrity: scanning, repair and storage reorganization."""

from .probe import ProbeResult, ReferenceProbe
from .reorganizer import (
    CANONICAL_FOLDERS,
    DEFAULT_FOLDER_MAPPING,
    FolderMapping,
    StorageReorganizer,
)
from .scanner import IntegrityScanner

__all__ = [
    "CANONICAL_FOLDERS",
    "DEFAULT_FOLDER_MAPPING",
    "FolderMapping",
    "IntegrityScanner",
    "ProbeResult",
    "ReferenceProbe",
    "StorageReorganizer",
]
