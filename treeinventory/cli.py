"""Command-line front door for treeinventory.

Parses CLI options over persisted defaults, prepares the output location,
runs the collection pass and writes the rendered table.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from . import __version__
from .collector import InventoryCollector
from .config import HASH_FAILURE_POLICIES, InventoryOptions, load_defaults, save_defaults
from .errors import OutputDirectoryCreationFailed, OutputWriteFailed
from .report import ensure_output_parent, render_table, write_report


CREATED_COLUMN_NOTE = (
    "Date Created is the file birth time where the platform records one "
    "(macOS, BSD, Windows); elsewhere, such as on Linux, it is the inode "
    "change time (st_ctime)."
)


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="treeinventory",
        description="List every file under a directory with size, timestamps and optional MD5 hash.",
        epilog=CREATED_COLUMN_NOTE,
    )
    parser.add_argument("path", help="Directory to scan for files.")
    parser.add_argument("-o", "--output", metavar="PATH", help="File to write the report to instead of stdout.")
    hashing = parser.add_mutually_exclusive_group()
    hashing.add_argument("-m", "--md5", dest="md5", action="store_true", default=None, help="Compute MD5 hashes.")
    hashing.add_argument("--no-md5", dest="md5", action="store_false", help="Disable MD5 hashes set on by defaults.")
    parser.add_argument(
        "--hash-failure",
        choices=HASH_FAILURE_POLICIES,
        default=None,
        help="On unreadable files: skip the file (default) or record it with an empty hash.",
    )
    parser.add_argument("--chunk-size", type=_positive_int, default=None, help="Read buffer size in bytes for hashing.")
    parser.add_argument("-j", "--jobs", type=_positive_int, default=None, help="Worker threads for hashing.")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only report warnings and errors.")
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Also report skipped traversal entries.")
    parser.add_argument("--save-defaults", action="store_true", help="Persist hashing options as future defaults.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.set_defaults(md5=None)
    return parser


def _configure_logging(quiet: bool, verbose: bool) -> None:
    level = logging.INFO
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(message)s")


def options_from_args(args: argparse.Namespace, defaults: dict[str, object]) -> InventoryOptions:
    """Merge parsed flags over persisted ``defaults``; flags always win."""
    values: dict[str, object] = dict(defaults)
    for key, value in (
        ("md5", args.md5),
        ("hash_failure_policy", args.hash_failure),
        ("chunk_size", args.chunk_size),
        ("jobs", args.jobs),
    ):
        if value is not None:
            values[key] = value
    output = Path(args.output) if args.output else None
    return InventoryOptions(root=Path(args.path), output=output, **values)


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and write an inventory report.

    Output errors end the process with a message naming the failed path;
    unreadable files only shrink the report.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.quiet, args.verbose)

    root = Path(args.path)
    if not root.exists():
        raise SystemExit(f"Path not found: {root}")

    options = options_from_args(args, load_defaults())
    if args.save_defaults:
        save_defaults(options)

    try:
        if options.output is not None:
            ensure_output_parent(options.output)
        report = InventoryCollector(options).collect()
        write_report(render_table(report), options.output)
    except (OutputDirectoryCreationFailed, OutputWriteFailed) as exc:
        raise SystemExit(str(exc)) from exc


if __name__ == "__main__":
    main()
