"""Streaming MD5 content digests.

Files are read into one reusable fixed-size buffer, so peak memory does not
depend on file size.
"""

from __future__ import annotations

import hashlib
from pathlib import Path

from .errors import HashComputationFailed

DEFAULT_CHUNK_SIZE = 64 * 1024


class StreamingHasher:
    """Incremental digest accumulator with a terminal ``finalize`` step."""

    def __init__(self) -> None:
        self._digest = hashlib.md5(usedforsecurity=False)
        self._result: str | None = None

    def consume(self, chunk: bytes | bytearray | memoryview) -> None:
        if self._result is not None:
            raise RuntimeError("hasher already finalized")
        self._digest.update(chunk)

    def finalize(self) -> str:
        """Return the lowercase hex digest; later calls return the same value."""
        if self._result is None:
            self._result = self._digest.hexdigest()
        return self._result


def hash_file(path: Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    """Digest the full contents of ``path``.

    Raises ``HashComputationFailed`` if the file cannot be opened or a read
    fails part way; no partial digest is ever returned.
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be >= 1")

    hasher = StreamingHasher()
    buffer = bytearray(chunk_size)
    view = memoryview(buffer)
    try:
        with open(path, "rb") as handle:
            while True:
                count = handle.readinto(buffer)
                if not count:
                    break
                hasher.consume(view[:count])
    except OSError as exc:
        raise HashComputationFailed(path, exc) from exc
    return hasher.finalize()


__all__ = ["DEFAULT_CHUNK_SIZE", "StreamingHasher", "hash_file"]
