"""Table rendering and report sinks.

The table is unbordered: cells are left-aligned and separated by ``|`` with a
``-`` rule under the header. Sinks are stdout or a single output file.
"""

from __future__ import annotations

import sys
from collections.abc import Sequence
from pathlib import Path
from typing import TextIO

from .errors import OutputDirectoryCreationFailed, OutputWriteFailed
from .file_tree_model import InventoryReport
from .text import display_width, pad_to_width

STDOUT_LABEL = "<stdout>"


def _format_row(cells: Sequence[str], widths: Sequence[int]) -> str:
    return "|".join(f" {pad_to_width(cell, width)} " for cell, width in zip(cells, widths)).rstrip()


def render_table(report: InventoryReport) -> str:
    """Render ``report`` as aligned text rows, header first."""
    header = tuple(report.header)
    rows = list(report.rows())
    widths = [display_width(title) for title in header]
    for row in rows:
        for idx, cell in enumerate(row):
            widths[idx] = max(widths[idx], display_width(cell))

    lines = [_format_row(header, widths)]
    lines.append("+".join("-" * (width + 2) for width in widths))
    lines.extend(_format_row(row, widths) for row in rows)
    return "\n".join(lines)


def ensure_output_parent(output: Path) -> None:
    """Create the parent directory of ``output`` before any traversal work.

    An output path without a file name (such as a filesystem root) cannot be
    written and is rejected up front.
    """
    if not output.name:
        raise OutputDirectoryCreationFailed(output)
    parent = output.parent
    try:
        parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OutputDirectoryCreationFailed(parent, exc) from exc


def write_report(text: str, output: Path | None = None, stream: TextIO | None = None) -> None:
    """Write rendered report ``text`` to ``output`` or to ``stream``/stdout.

    The file is only opened once the text has been encoded, so an encoding
    failure never leaves an empty or partial report behind.
    """
    if output is None:
        target = stream if stream is not None else sys.stdout
        try:
            target.write(text + "\n")
        except (OSError, UnicodeError) as exc:
            raise OutputWriteFailed(STDOUT_LABEL, exc) from exc
        return
    try:
        payload = (text + "\n").encode("utf-8")
    except UnicodeError as exc:
        raise OutputWriteFailed(output, exc) from exc
    try:
        output.write_bytes(payload)
    except OSError as exc:
        raise OutputWriteFailed(output, exc) from exc


__all__ = ["STDOUT_LABEL", "render_table", "ensure_output_parent", "write_report"]
