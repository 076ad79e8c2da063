"""Timestamp normalization for report columns.

Each timestamp is shifted by the local UTC offset valid at that instant, not
the offset at program start, so files on either side of a daylight-saving
change both render in their own wall-clock time. Output is a fixed
``YYYY-MM-DD hh:mm:ss AM/PM`` 12-hour format that ignores the host locale.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Protocol

from .errors import LocalOffsetResolutionFailure, TimestampFormatFailure


class LocalOffsetResolver(Protocol):
    def utcoffset_at(self, instant: datetime) -> timedelta:
        """Return the local UTC offset in effect at aware ``instant``."""
        ...


class SystemLocalOffset:
    """Resolve offsets from the host time zone database."""

    def utcoffset_at(self, instant: datetime) -> timedelta:
        offset = instant.astimezone().utcoffset()
        if offset is None:
            raise ValueError("local time zone has no UTC offset")
        return offset


@dataclass(frozen=True)
class FixedLocalOffset:
    """Constant offset, for tests and for hosts pinned to one zone."""

    offset: timedelta = timedelta(0)

    def utcoffset_at(self, instant: datetime) -> timedelta:
        return self.offset


def format_timestamp(moment: datetime) -> str:
    """Render ``moment`` as ``YYYY-MM-DD hh:mm:ss AM/PM``.

    ``strftime("%p")`` is locale dependent, so the period is computed here.
    """
    hour = moment.hour % 12 or 12
    period = "AM" if moment.hour < 12 else "PM"
    return (
        f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d} "
        f"{hour:02d}:{moment.minute:02d}:{moment.second:02d} {period}"
    )


def to_local(timestamp: float, resolver: LocalOffsetResolver, path: Path) -> datetime:
    """Convert an epoch timestamp to an aware datetime in its local offset."""
    try:
        instant = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as exc:
        raise TimestampFormatFailure(path, exc) from exc
    try:
        offset = resolver.utcoffset_at(instant)
        return instant.astimezone(timezone(offset))
    except (OverflowError, OSError, ValueError) as exc:
        raise LocalOffsetResolutionFailure(path, exc) from exc


def normalize_timestamp(timestamp: float, resolver: LocalOffsetResolver, path: Path) -> str:
    """Resolve and render one raw timestamp belonging to ``path``."""
    moment = to_local(timestamp, resolver, path)
    try:
        return format_timestamp(moment)
    except ValueError as exc:
        raise TimestampFormatFailure(path, exc) from exc


__all__ = [
    "LocalOffsetResolver",
    "SystemLocalOffset",
    "FixedLocalOffset",
    "format_timestamp",
    "to_local",
    "normalize_timestamp",
]
