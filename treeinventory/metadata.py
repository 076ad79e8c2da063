"""Per-file size and timestamp lookup."""

from __future__ import annotations

import os
from pathlib import Path

from .errors import MetadataUnavailable
from .file_tree_model import FileMetadata
from .timestamps import LocalOffsetResolver, normalize_timestamp


def created_timestamp(st: os.stat_result) -> float:
    """Return the creation time from ``st``.

    Uses ``st_birthtime`` where the platform reports it and falls back to
    ``st_ctime`` (inode change time on POSIX) otherwise.
    """
    birthtime = getattr(st, "st_birthtime", None)
    if birthtime is not None:
        return float(birthtime)
    return float(st.st_ctime)


def read_metadata(path: Path) -> FileMetadata:
    """Stat ``path`` (following links) and return its raw metadata.

    The file is stat'ed again rather than reusing the walk's result so a file
    removed or locked after listing is reported as unavailable.
    """
    try:
        st = path.stat()
    except OSError as exc:
        raise MetadataUnavailable(path, exc) from exc
    return FileMetadata(
        size_bytes=int(st.st_size),
        created_at=created_timestamp(st),
        modified_at=float(st.st_mtime),
    )


def format_metadata_timestamps(
    path: Path,
    metadata: FileMetadata,
    resolver: LocalOffsetResolver,
) -> tuple[str, str]:
    """Return ``(created, modified)`` rendered in their local offsets.

    Either timestamp failing raises, so a record is never half formatted.
    """
    created = normalize_timestamp(metadata.created_at, resolver, path)
    modified = normalize_timestamp(metadata.modified_at, resolver, path)
    return created, modified


__all__ = ["created_timestamp", "read_metadata", "format_metadata_timestamps"]
