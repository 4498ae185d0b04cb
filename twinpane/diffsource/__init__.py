"""Producers of classified pane rows for a file pair."""

from __future__ import annotations

from pathlib import Path

from ..rows import Row
from .files import load_text_lines
from .git import diff_against_head, read_head_lines
from .hunks import DiffHunk, compute_hunks, parse_unified_diff
from .side_by_side import build_side_by_side, rows_from_texts


def rows_for_paths(old_path: Path, new_path: Path, context: int = 3) -> tuple[list[Row], list[Row]]:
    """Diff two files on disk."""
    old_lines = load_text_lines(old_path)
    new_lines = load_text_lines(new_path)
    return build_side_by_side(old_lines, new_lines, compute_hunks(old_lines, new_lines, context))


def rows_for_git_path(path: Path) -> tuple[list[Row], list[Row]]:
    """Diff a working-tree file against its ``HEAD`` version using ``git diff``."""
    old_lines = read_head_lines(path)
    new_lines = load_text_lines(path)
    hunks = parse_unified_diff(diff_against_head(path))
    if not hunks and old_lines != new_lines:
        # Untracked files and repos without commits have no diff against HEAD.
        hunks = compute_hunks(old_lines, new_lines)
    return build_side_by_side(old_lines, new_lines, hunks)


__all__ = [
    "DiffHunk",
    "build_side_by_side",
    "compute_hunks",
    "parse_unified_diff",
    "rows_for_git_path",
    "rows_for_paths",
    "rows_from_texts",
]
