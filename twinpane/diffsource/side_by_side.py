"""Expand hunks into full-file row sequences for the two panes.

Lines outside every hunk are unchanged and appear as context on both sides.
Hunk lines are placed in order: removed lines go to the old pane, added lines
to the new pane, context lines to both. Each pane row carries only the line
number of its own side.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ..rows import LINE_ADDED, LINE_CONTEXT, LINE_REMOVED, DiffLine, Row
from .files import split_lines
from .hunks import DiffHunk, compute_hunks

logger = logging.getLogger(__name__)


def _old_context(lines: Sequence[str], idx: int) -> DiffLine:
    return DiffLine(LINE_CONTEXT, lines[idx], old_lineno=idx + 1)


def _new_context(lines: Sequence[str], idx: int) -> DiffLine:
    return DiffLine(LINE_CONTEXT, lines[idx], new_lineno=idx + 1)


def build_side_by_side(
    old_lines: Sequence[str],
    new_lines: Sequence[str],
    hunks: Sequence[DiffHunk],
) -> tuple[list[Row], list[Row]]:
    """Return ``(old_rows, new_rows)`` covering both files completely."""
    old_rows: list[Row] = []
    new_rows: list[Row] = []
    old_idx = 0
    new_idx = 0

    for hunk in hunks:
        hunk_old_first = hunk.old_start if hunk.old_count else hunk.old_start + 1
        hunk_new_first = hunk.new_start if hunk.new_count else hunk.new_start + 1

        while old_idx + 1 < hunk_old_first and new_idx + 1 < hunk_new_first:
            old_rows.append(_old_context(old_lines, old_idx))
            new_rows.append(_new_context(new_lines, new_idx))
            old_idx += 1
            new_idx += 1

        # Only reachable when the gap before this hunk differs in length.
        if old_idx + 1 < hunk_old_first or new_idx + 1 < hunk_new_first:
            logger.debug(
                "unchanged gap before hunk @@ -%d +%d @@ differs between sides",
                hunk.old_start,
                hunk.new_start,
            )
        while old_idx + 1 < hunk_old_first and old_idx < len(old_lines):
            old_rows.append(_old_context(old_lines, old_idx))
            old_idx += 1
        while new_idx + 1 < hunk_new_first and new_idx < len(new_lines):
            new_rows.append(_new_context(new_lines, new_idx))
            new_idx += 1

        for line in hunk.lines:
            if line.line_type == LINE_REMOVED:
                old_rows.append(DiffLine(LINE_REMOVED, line.content, old_lineno=line.old_lineno))
            elif line.line_type == LINE_ADDED:
                new_rows.append(DiffLine(LINE_ADDED, line.content, new_lineno=line.new_lineno))
            else:
                old_rows.append(DiffLine(LINE_CONTEXT, line.content, old_lineno=line.old_lineno))
                new_rows.append(DiffLine(LINE_CONTEXT, line.content, new_lineno=line.new_lineno))

        old_idx = max(old_idx, hunk_old_first - 1 + hunk.old_count)
        new_idx = max(new_idx, hunk_new_first - 1 + hunk.new_count)

    while old_idx < len(old_lines) and new_idx < len(new_lines):
        old_rows.append(_old_context(old_lines, old_idx))
        new_rows.append(_new_context(new_lines, new_idx))
        old_idx += 1
        new_idx += 1

    # One side longer than the other after the last hunk.
    while old_idx < len(old_lines):
        old_rows.append(_old_context(old_lines, old_idx))
        old_idx += 1
    while new_idx < len(new_lines):
        new_rows.append(_new_context(new_lines, new_idx))
        new_idx += 1

    return old_rows, new_rows


def rows_from_texts(old_text: str, new_text: str, context: int = 3) -> tuple[list[Row], list[Row]]:
    """Diff two texts and return full-file pane rows."""
    old_lines = split_lines(old_text)
    new_lines = split_lines(new_text)
    return build_side_by_side(old_lines, new_lines, compute_hunks(old_lines, new_lines, context))
