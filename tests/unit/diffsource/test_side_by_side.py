"""Full-file pane rows built from hunks."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from twinpane.diffsource import build_side_by_side, parse_unified_diff, rows_for_paths, rows_from_texts
from twinpane.errors import BinaryFileError


def _kinds(rows) -> list[str]:
    return [row.line_type for row in rows]


class BuildSideBySideTests(unittest.TestCase):
    def test_changed_lines_go_to_their_own_pane(self) -> None:
        old_rows, new_rows = rows_from_texts("a\nb\nc\n", "a\nB\nc\nd\n")

        self.assertEqual(_kinds(old_rows), ["context", "removed", "context"])
        self.assertEqual(_kinds(new_rows), ["context", "added", "context", "added"])
        self.assertEqual([row.content for row in new_rows], ["a", "B", "c", "d"])

    def test_rows_carry_only_their_own_line_number(self) -> None:
        old_rows, new_rows = rows_from_texts("a\nb\nc\n", "z\na\nb\nc\n")

        self.assertEqual([(row.old_lineno, row.new_lineno) for row in old_rows], [(1, None), (2, None), (3, None)])
        self.assertEqual([row.new_lineno for row in new_rows], [1, 2, 3, 4])
        self.assertTrue(all(row.old_lineno is None for row in new_rows))

    def test_unchanged_lines_outside_hunks_are_included(self) -> None:
        old_text = "".join(f"line {idx}\n" for idx in range(1, 21))
        new_text = old_text.replace("line 10\n", "line ten\n")

        old_rows, new_rows = rows_from_texts(old_text, new_text, context=1)

        self.assertEqual(len(old_rows), 20)
        self.assertEqual(len(new_rows), 20)
        self.assertEqual(old_rows[0].content, "line 1")
        self.assertEqual(old_rows[-1].old_lineno, 20)
        self.assertEqual(old_rows[9].line_type, "removed")
        self.assertEqual(new_rows[9].content, "line ten")

    def test_parsed_hunks_expand_to_whole_files(self) -> None:
        old_lines = [f"l{idx}" for idx in range(1, 13)]
        new_lines = list(old_lines)
        new_lines[4] = "L5"
        hunks = parse_unified_diff("@@ -5 +5 @@\n-l5\n+L5\n")

        old_rows, new_rows = build_side_by_side(old_lines, new_lines, hunks)

        self.assertEqual(len(old_rows), 12)
        self.assertEqual(len(new_rows), 12)
        self.assertEqual(old_rows[4].line_type, "removed")
        self.assertEqual(new_rows[4].line_type, "added")
        self.assertEqual([row.content for row in old_rows[5:]], old_lines[5:])

    def test_uneven_gap_before_hunk_is_logged_and_kept_one_sided(self) -> None:
        lines = [f"l{idx}" for idx in range(1, 7)]
        hunks = parse_unified_diff("@@ -3 +5 @@\n-l3\n+l5\n")

        with self.assertLogs("twinpane.diffsource.side_by_side", level="DEBUG"):
            old_rows, new_rows = build_side_by_side(lines, lines, hunks)

        self.assertEqual(len(old_rows), 6)
        self.assertEqual(len(new_rows), 6)

    def test_empty_old_file_is_all_additions(self) -> None:
        old_rows, new_rows = rows_from_texts("", "x\ny\n")
        self.assertEqual(old_rows, [])
        self.assertEqual(_kinds(new_rows), ["added", "added"])


class RowsForPathsTests(unittest.TestCase):
    def test_reads_and_diffs_files_on_disk(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            old_path = root / "old.py"
            new_path = root / "new.py"
            old_path.write_text("x = 1\ny = 2\n", encoding="utf-8")
            new_path.write_text("x = 1\ny = 3\n", encoding="utf-8")

            old_rows, new_rows = rows_for_paths(old_path, new_path)

        self.assertEqual(_kinds(old_rows), ["context", "removed"])
        self.assertEqual(_kinds(new_rows), ["context", "added"])

    def test_binary_file_is_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            old_path = root / "a.bin"
            new_path = root / "b.txt"
            old_path.write_bytes(b"\x89PNG\x00\x00data")
            new_path.write_text("text\n", encoding="utf-8")

            with self.assertRaises(BinaryFileError) as ctx:
                rows_for_paths(old_path, new_path)

        self.assertIn("a.bin", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
