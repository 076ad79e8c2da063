"""Domain model for directory inventories.

This package contains the non-rendering primitives:
- walked-entry, per-file record and report datatypes
- the lazy link-following tree walk
"""

from __future__ import annotations

from .types import (
    REPORT_HEADER,
    FileMetadata,
    FileRecord,
    InventoryReport,
    WalkEntry,
    display_path,
    format_size_kib,
)
from .walk import walk_files

__all__ = [
    "REPORT_HEADER",
    "WalkEntry",
    "FileMetadata",
    "FileRecord",
    "InventoryReport",
    "display_path",
    "format_size_kib",
    "walk_files",
]
