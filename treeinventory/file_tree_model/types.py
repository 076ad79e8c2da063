"""Domain datatypes for walked entries, per-file records and the report."""

from __future__ import annotations

import os
import stat as stat_module
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar

REPORT_HEADER = ("Path", "Size (KiB)", "Date Created", "Date Modified", "MD5 Hash")


@dataclass(frozen=True)
class WalkEntry:
    """One entry discovered by the tree walk, with its link-followed stat."""

    path: Path
    stat: os.stat_result

    @property
    def is_dir(self) -> bool:
        return stat_module.S_ISDIR(self.stat.st_mode)


@dataclass(frozen=True)
class FileMetadata:
    """Raw size and epoch timestamps as reported by the filesystem."""

    size_bytes: int
    created_at: float
    modified_at: float


def display_path(path: Path) -> str:
    """Render ``path`` as printable text.

    Bytes that are not valid UTF-8 (surrogate-escaped by the OS decoding)
    become U+FFFD so the report can always be encoded.
    """
    return os.fsencode(path).decode("utf-8", "replace")


def format_size_kib(size_bytes: int) -> str:
    """Render a byte count as KiB with exactly two decimals."""
    return f"{size_bytes / 1024.0:.2f}"


@dataclass(frozen=True)
class FileRecord:
    """One successfully processed file.

    Timestamps are already rendered in the local offset valid at each file's
    own event time. ``created_at`` is the birth time where the platform
    records one and the inode change time otherwise. ``digest`` is ``None`` when hashing was disabled or, under
    the relaxed hash-failure policy, when the file could not be hashed.
    """

    path: Path
    size_bytes: int
    created_at: str
    modified_at: str
    digest: str | None = None

    @property
    def size_kib(self) -> str:
        return format_size_kib(self.size_bytes)

    def cells(self) -> tuple[str, str, str, str, str]:
        return (
            display_path(self.path),
            self.size_kib,
            self.created_at,
            self.modified_at,
            self.digest or "",
        )


@dataclass(frozen=True)
class InventoryReport:
    """Records in traversal order plus the count of omitted files."""

    header: ClassVar[tuple[str, ...]] = REPORT_HEADER

    records: tuple[FileRecord, ...] = ()
    skipped: int = 0

    def rows(self) -> Iterator[tuple[str, str, str, str, str]]:
        for record in self.records:
            yield record.cells()

    def __len__(self) -> int:
        return len(self.records)


__all__ = [
    "REPORT_HEADER",
    "WalkEntry",
    "FileMetadata",
    "FileRecord",
    "InventoryReport",
    "display_path",
    "format_size_kib",
]
