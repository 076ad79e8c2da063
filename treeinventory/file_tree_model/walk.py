"""Lazy recursive directory walk that follows symbolic links.

Only non-directory entries are yielded. Entries that cannot be stat'ed are
dropped silently (logged at debug level) and the walk continues.
"""

from __future__ import annotations

import logging
import os
import stat as stat_module
from collections.abc import Iterator
from pathlib import Path

from ..errors import TraversalEntryUnreadable
from .types import WalkEntry

logger = logging.getLogger(__name__)

_DirectoryKey = tuple[int, int]


def _skip(path: Path, exc: OSError) -> None:
    logger.debug("%s", TraversalEntryUnreadable(path, exc))


def _directory_key(st: os.stat_result) -> _DirectoryKey:
    return (int(st.st_dev), int(st.st_ino))


def _list_children(directory: Path) -> list[Path] | None:
    """Return child paths in listing order, or ``None`` if unlistable."""
    try:
        with os.scandir(directory) as entries:
            return [Path(child.path) for child in entries]
    except OSError as exc:
        _skip(directory, exc)
        return None


def _walk_directory(root: Path, root_key: _DirectoryKey) -> Iterator[WalkEntry]:
    """Depth-first descent below ``root`` using an explicit stack.

    Each stack frame holds the remaining children of one open directory and
    that directory's device/inode key. ``ancestors`` mirrors the keys on the
    stack; a linked directory pointing back at one of them is not entered
    again.
    """
    children = _list_children(root)
    if children is None:
        return

    stack: list[tuple[Iterator[Path], _DirectoryKey]] = [(iter(children), root_key)]
    ancestors: set[_DirectoryKey] = {root_key}
    while stack:
        remaining, key = stack[-1]
        child_path = next(remaining, None)
        if child_path is None:
            stack.pop()
            ancestors.discard(key)
            continue

        try:
            st = child_path.stat()
        except OSError as exc:
            _skip(child_path, exc)
            continue

        if not stat_module.S_ISDIR(st.st_mode):
            yield WalkEntry(path=child_path, stat=st)
            continue

        child_key = _directory_key(st)
        if child_key in ancestors:
            logger.debug("Skipping filesystem loop: %s", child_path)
            continue
        grandchildren = _list_children(child_path)
        if grandchildren is None:
            continue
        stack.append((iter(grandchildren), child_key))
        ancestors.add(child_key)


def walk_files(root: Path | str) -> Iterator[WalkEntry]:
    """Yield every non-directory entry reachable from ``root``.

    Symbolic links are followed, so a link to a file reports the target's
    metadata and a link to a directory is descended into. A non-directory
    ``root`` yields itself. Order is the natural depth-first listing order,
    and nesting depth is not bounded by the interpreter's recursion limit.
    """
    root = Path(root)
    try:
        root_stat = root.stat()
    except OSError as exc:
        _skip(root, exc)
        return

    if not stat_module.S_ISDIR(root_stat.st_mode):
        yield WalkEntry(path=root, stat=root_stat)
        return
    yield from _walk_directory(root, _directory_key(root_stat))


__all__ = ["walk_files"]
