"""Error taxonomy for inventory runs.

Per-file errors (metadata, timestamps, hashing) are local: the collector turns
them into omitted records. Output errors are global and end the run.
"""

from __future__ import annotations

from pathlib import Path


class InventoryError(Exception):
    """Base error carrying the filesystem path the failure concerns."""

    message = "Inventory failure"

    def __init__(self, path: Path | str, cause: BaseException | None = None) -> None:
        self.path = Path(path)
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"{self.message}: {self.path}{detail}")


class TraversalEntryUnreadable(InventoryError):
    message = "Cannot stat entry"


class MetadataUnavailable(InventoryError):
    message = "Cannot read metadata"


class TimestampFormatFailure(MetadataUnavailable):
    message = "Cannot format timestamp"


class LocalOffsetResolutionFailure(MetadataUnavailable):
    message = "Cannot resolve local UTC offset"


class HashComputationFailed(InventoryError):
    message = "Cannot hash file"


class OutputDirectoryCreationFailed(InventoryError):
    message = "Cannot create output directory"


class OutputWriteFailed(InventoryError):
    message = "Cannot write output file"


__all__ = [
    "InventoryError",
    "TraversalEntryUnreadable",
    "MetadataUnavailable",
    "TimestampFormatFailure",
    "LocalOffsetResolutionFailure",
    "HashComputationFailed",
    "OutputDirectoryCreationFailed",
    "OutputWriteFailed",
]
