"""Inventory collection pass.

Walks the tree, reads metadata and (optionally) content digests for each file,
and folds the results into an ``InventoryReport``. Per-file failures omit that
file and the pass continues; nothing is retried.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable, Iterable, Iterator
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from .config import HASH_FAILURE_EMPTY, InventoryOptions
from .errors import HashComputationFailed, MetadataUnavailable
from .file_tree_model import FileRecord, InventoryReport, WalkEntry, walk_files
from .hashing import hash_file
from .metadata import format_metadata_timestamps, read_metadata
from .timestamps import LocalOffsetResolver, SystemLocalOffset

logger = logging.getLogger(__name__)


def log_progress(path: Path) -> None:
    logger.info("Parsing: %s", path)


@dataclass(frozen=True)
class _PendingRecord:
    """A file whose metadata is known and whose digest may still be needed."""

    path: Path
    size_bytes: int
    created_at: str
    modified_at: str

    def to_record(self, digest: str | None = None) -> FileRecord:
        return FileRecord(
            path=self.path,
            size_bytes=self.size_bytes,
            created_at=self.created_at,
            modified_at=self.modified_at,
            digest=digest,
        )


class InventoryCollector:
    """Drive the walk and assemble one record per readable file.

    Collaborators are injectable: ``walk`` produces entries, ``offset_resolver``
    maps instants to local offsets, ``hasher`` digests a path and ``progress``
    is told about each file before it is processed.
    """

    def __init__(
        self,
        options: InventoryOptions,
        *,
        walk: Callable[[Path], Iterable[WalkEntry]] = walk_files,
        offset_resolver: LocalOffsetResolver | None = None,
        hasher: Callable[[Path, int], str] = hash_file,
        progress: Callable[[Path], None] | None = log_progress,
    ) -> None:
        self.options = options
        self._walk = walk
        self._offset_resolver = offset_resolver if offset_resolver is not None else SystemLocalOffset()
        self._hasher = hasher
        self._progress = progress
        self._skipped = 0

    def collect(self) -> InventoryReport:
        """Run the whole pass and return records in traversal order."""
        self._skipped = 0
        records = tuple(self.iter_records())
        logger.info("Collected %d records, skipped %d files", len(records), self._skipped)
        return InventoryReport(records=records, skipped=self._skipped)

    def iter_records(self) -> Iterator[FileRecord]:
        pending = self._iter_pending()
        if not self.options.md5:
            for item in pending:
                yield item.to_record()
            return
        if self.options.jobs > 1:
            yield from self._hash_parallel(pending)
            return
        for item in pending:
            record = self._hash_one(item)
            if record is not None:
                yield record

    def _iter_pending(self) -> Iterator[_PendingRecord]:
        for entry in self._walk(self.options.root):
            if entry.is_dir:
                continue
            if self._progress is not None:
                self._progress(entry.path)
            try:
                metadata = read_metadata(entry.path)
                created, modified = format_metadata_timestamps(
                    entry.path,
                    metadata,
                    self._offset_resolver,
                )
            except MetadataUnavailable as exc:
                self._skipped += 1
                logger.warning("Skipping %s", exc)
                continue
            yield _PendingRecord(
                path=entry.path,
                size_bytes=metadata.size_bytes,
                created_at=created,
                modified_at=modified,
            )

    def _hash_one(self, item: _PendingRecord) -> FileRecord | None:
        try:
            digest = self._hasher(item.path, self.options.chunk_size)
        except HashComputationFailed as exc:
            return self._on_hash_failure(item, exc)
        return item.to_record(digest)

    def _on_hash_failure(self, item: _PendingRecord, exc: HashComputationFailed) -> FileRecord | None:
        if self.options.hash_failure_policy == HASH_FAILURE_EMPTY:
            logger.warning("Recording without digest: %s", exc)
            return item.to_record()
        self._skipped += 1
        logger.warning("Skipping %s", exc)
        return None

    def _hash_parallel(self, pending: Iterator[_PendingRecord]) -> Iterator[FileRecord]:
        """Hash on a thread pool, yielding in submission order.

        At most ``jobs * 2`` digests are in flight so the walk stays lazy.
        """
        jobs = self.options.jobs
        window: deque[tuple[_PendingRecord, Future[str]]] = deque()
        with ThreadPoolExecutor(max_workers=jobs, thread_name_prefix="treeinventory-hash") as executor:
            for item in pending:
                window.append((item, executor.submit(self._hasher, item.path, self.options.chunk_size)))
                if len(window) >= jobs * 2:
                    record = self._resolve(*window.popleft())
                    if record is not None:
                        yield record
            while window:
                record = self._resolve(*window.popleft())
                if record is not None:
                    yield record

    def _resolve(self, item: _PendingRecord, future: Future[str]) -> FileRecord | None:
        try:
            digest = future.result()
        except HashComputationFailed as exc:
            return self._on_hash_failure(item, exc)
        return item.to_record(digest)


def collect_inventory(options: InventoryOptions, **kwargs) -> InventoryReport:
    """Convenience wrapper: build a collector for ``options`` and run it."""
    return InventoryCollector(options, **kwargs).collect()


__all__ = ["InventoryCollector", "collect_inventory", "log_progress"]
