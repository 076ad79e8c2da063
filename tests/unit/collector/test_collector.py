"""Tests for the inventory collection pass."""

from __future__ import annotations

import hashlib
import os
import tempfile
import unittest
from datetime import timedelta
from pathlib import Path

from treeinventory.collector import InventoryCollector, collect_inventory
from treeinventory.config import HASH_FAILURE_EMPTY, InventoryOptions
from treeinventory.errors import HashComputationFailed
from treeinventory.file_tree_model import WalkEntry, walk_files
from treeinventory.hashing import hash_file
from treeinventory.timestamps import FixedLocalOffset

UTC = FixedLocalOffset(timedelta(0))


def _make_tree(root: Path) -> dict[Path, bytes]:
    contents = {
        root / "kib.bin": b"k" * 1024,
        root / "half.bin": b"h" * 1536,
        root / "empty.bin": b"",
        root / "nested" / "deeper" / "note.txt": b"hello\n",
    }
    for path, payload in contents.items():
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(payload)
    (root / "lonely-dir").mkdir()
    return contents


class InventoryCollectorTests(unittest.TestCase):
    def test_one_record_per_file_without_hashes(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            contents = _make_tree(root)

            report = InventoryCollector(InventoryOptions(root=root), offset_resolver=UTC, progress=None).collect()

            by_path = {record.path: record for record in report.records}
            self.assertEqual(set(by_path), set(contents))
            self.assertEqual(by_path[root / "kib.bin"].size_kib, "1.00")
            self.assertEqual(by_path[root / "half.bin"].size_kib, "1.50")
            self.assertEqual(by_path[root / "empty.bin"].size_kib, "0.00")
            self.assertTrue(all(record.digest is None for record in report.records))
            self.assertEqual(report.skipped, 0)

    def test_hashes_match_content_and_are_stable_across_runs(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            contents = _make_tree(root)
            options = InventoryOptions(root=root, md5=True)

            first = collect_inventory(options, offset_resolver=UTC, progress=None)
            second = collect_inventory(options, offset_resolver=UTC, progress=None)

            for record in first.records:
                self.assertEqual(record.digest, hashlib.md5(contents[record.path]).hexdigest())
            self.assertEqual(
                [(r.path, r.digest) for r in first.records],
                [(r.path, r.digest) for r in second.records],
            )

    def test_records_follow_walk_order(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            _make_tree(root)
            expected = [entry.path for entry in walk_files(root)]

            report = InventoryCollector(InventoryOptions(root=root), offset_resolver=UTC, progress=None).collect()

            self.assertEqual([record.path for record in report.records], expected)

    def test_progress_is_announced_for_each_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            contents = _make_tree(root)
            announced: list[Path] = []

            InventoryCollector(InventoryOptions(root=root), offset_resolver=UTC, progress=announced.append).collect()

            self.assertEqual(sorted(announced), sorted(contents))

    def test_progress_is_logged_by_default(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            (root / "one.txt").write_text("1", encoding="utf-8")

            with self.assertLogs("treeinventory.collector", level="INFO") as logs:
                InventoryCollector(InventoryOptions(root=root), offset_resolver=UTC).collect()

            self.assertTrue(any(f"Parsing: {root / 'one.txt'}" in line for line in logs.output))

    def test_directory_entries_from_walk_are_ignored(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            target = root / "file.txt"
            target.write_text("f", encoding="utf-8")

            def walk(_root: Path):
                yield WalkEntry(path=root, stat=root.stat())
                yield WalkEntry(path=target, stat=target.stat())

            report = InventoryCollector(
                InventoryOptions(root=root),
                walk=walk,
                offset_resolver=UTC,
                progress=None,
            ).collect()

            self.assertEqual([record.path for record in report.records], [target])

    def test_file_vanishing_before_metadata_read_is_omitted(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            kept = root / "kept.txt"
            kept.write_text("k", encoding="utf-8")
            vanished = root / "vanished.txt"

            def walk(_root: Path):
                yield WalkEntry(path=vanished, stat=kept.stat())
                yield WalkEntry(path=kept, stat=kept.stat())

            with self.assertLogs("treeinventory.collector", level="WARNING"):
                report = InventoryCollector(
                    InventoryOptions(root=root),
                    walk=walk,
                    offset_resolver=UTC,
                    progress=None,
                ).collect()

            self.assertEqual([record.path for record in report.records], [kept])
            self.assertEqual(report.skipped, 1)

    def test_hash_failure_drops_only_that_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            contents = _make_tree(root)
            broken = root / "half.bin"

            def hasher(path: Path, chunk_size: int) -> str:
                if path == broken:
                    raise HashComputationFailed(path, PermissionError("denied"))
                return hash_file(path, chunk_size)

            report = InventoryCollector(
                InventoryOptions(root=root, md5=True),
                offset_resolver=UTC,
                hasher=hasher,
                progress=None,
            ).collect()

            self.assertEqual({record.path for record in report.records}, set(contents) - {broken})
            self.assertTrue(all(record.digest for record in report.records))
            self.assertEqual(report.skipped, 1)

    def test_relaxed_policy_keeps_record_without_digest(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            target = root / "locked.bin"
            target.write_bytes(b"data")

            def hasher(path: Path, chunk_size: int) -> str:
                raise HashComputationFailed(path)

            report = InventoryCollector(
                InventoryOptions(root=root, md5=True, hash_failure_policy=HASH_FAILURE_EMPTY),
                offset_resolver=UTC,
                hasher=hasher,
                progress=None,
            ).collect()

            self.assertEqual(len(report.records), 1)
            self.assertIsNone(report.records[0].digest)
            self.assertEqual(report.skipped, 0)

    @unittest.skipIf(os.name == "nt" or os.geteuid() == 0, "needs POSIX permissions as non-root")
    def test_unreadable_file_does_not_abort_run(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            contents = _make_tree(root)
            locked = root / "kib.bin"
            locked.chmod(0)
            try:
                report = InventoryCollector(
                    InventoryOptions(root=root, md5=True),
                    offset_resolver=UTC,
                    progress=None,
                ).collect()
            finally:
                locked.chmod(0o644)

            self.assertEqual({record.path for record in report.records}, set(contents) - {locked})

    def test_parallel_hashing_preserves_order_and_digests(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            for idx in range(12):
                (root / f"file-{idx:02d}.bin").write_bytes(os.urandom(idx * 997))

            sequential = collect_inventory(InventoryOptions(root=root, md5=True), offset_resolver=UTC, progress=None)
            parallel = collect_inventory(
                InventoryOptions(root=root, md5=True, jobs=3),
                offset_resolver=UTC,
                progress=None,
            )

            self.assertEqual(
                [(r.path, r.digest) for r in parallel.records],
                [(r.path, r.digest) for r in sequential.records],
            )

    def test_parallel_hash_failure_follows_policy(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            for name in ("a", "b", "c", "d"):
                (root / name).write_text(name, encoding="utf-8")

            def hasher(path: Path, chunk_size: int) -> str:
                if path.name == "b":
                    raise HashComputationFailed(path)
                return hash_file(path, chunk_size)

            report = InventoryCollector(
                InventoryOptions(root=root, md5=True, jobs=2),
                offset_resolver=UTC,
                hasher=hasher,
                progress=None,
            ).collect()

            self.assertEqual(sorted(record.path.name for record in report.records), ["a", "c", "d"])
            self.assertEqual(report.skipped, 1)


if __name__ == "__main__":
    unittest.main()
