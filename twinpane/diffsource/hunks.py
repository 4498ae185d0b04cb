"""Hunk records from unified diff text or from two in-memory texts.

Unified diffs come from ``git diff``; in-memory texts are compared with
``difflib``. Either way the result is a list of ``DiffHunk`` whose lines are
already classified as context, added or removed.
"""

from __future__ import annotations

import difflib
import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from ..errors import DiffParseError
from ..rows import LINE_ADDED, LINE_CONTEXT, LINE_REMOVED, DiffLine
from .files import split_lines

_HUNK_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@(.*)$")


@dataclass
class DiffHunk:
    """One hunk: 1-based start lines, line counts and classified lines."""

    old_start: int
    old_count: int
    new_start: int
    new_count: int
    header: str = ""
    lines: list[DiffLine] = field(default_factory=list)

    def counts(self) -> tuple[int, int]:
        """Return ``(old_lines, new_lines)`` actually present in ``lines``."""
        old_seen = sum(1 for line in self.lines if line.line_type != LINE_ADDED)
        new_seen = sum(1 for line in self.lines if line.line_type != LINE_REMOVED)
        return old_seen, new_seen


def _check_hunk(hunk: DiffHunk) -> None:
    old_seen, new_seen = hunk.counts()
    if (old_seen, new_seen) != (hunk.old_count, hunk.new_count):
        raise DiffParseError(
            f"hunk @@ -{hunk.old_start},{hunk.old_count} +{hunk.new_start},{hunk.new_count} @@ "
            f"has {old_seen} old and {new_seen} new line(s)"
        )


def parse_unified_diff(diff_text: str) -> list[DiffHunk]:
    """Parse unified diff text into classified hunks.

    File headers, ``diff --git`` preambles and ``\\ No newline at end of file``
    markers are skipped. Raises ``DiffParseError`` when a hunk body does not
    match the line counts in its header.
    """
    hunks: list[DiffHunk] = []
    current: DiffHunk | None = None
    old_lineno = 0
    new_lineno = 0

    for raw_line in split_lines(diff_text):
        match = _HUNK_RE.match(raw_line)
        if match:
            if current is not None:
                _check_hunk(current)
                hunks.append(current)
            current = DiffHunk(
                old_start=int(match.group(1)),
                old_count=int(match.group(2) or "1"),
                new_start=int(match.group(3)),
                new_count=int(match.group(4) or "1"),
                header=match.group(5).strip(),
            )
            # A zero-length side starts *after* the given line.
            old_lineno = current.old_start if current.old_count else current.old_start + 1
            new_lineno = current.new_start if current.new_count else current.new_start + 1
            continue

        if current is None or raw_line.startswith("\\"):
            continue

        old_seen, new_seen = current.counts()
        if old_seen >= current.old_count and new_seen >= current.new_count:
            # Past the end of the hunk body: next file header or trailing text.
            continue

        marker, content = raw_line[:1], raw_line[1:]
        if marker == "-":
            current.lines.append(DiffLine(LINE_REMOVED, content, old_lineno=old_lineno))
            old_lineno += 1
        elif marker == "+":
            current.lines.append(DiffLine(LINE_ADDED, content, new_lineno=new_lineno))
            new_lineno += 1
        elif marker == " " or raw_line == "":
            current.lines.append(DiffLine(LINE_CONTEXT, content, old_lineno=old_lineno, new_lineno=new_lineno))
            old_lineno += 1
            new_lineno += 1

    if current is not None:
        _check_hunk(current)
        hunks.append(current)
    return hunks


def compute_hunks(old_lines: Sequence[str], new_lines: Sequence[str], context: int = 3) -> list[DiffHunk]:
    """Diff two line lists with ``difflib`` and return classified hunks."""
    matcher = difflib.SequenceMatcher(a=list(old_lines), b=list(new_lines), autojunk=False)
    hunks: list[DiffHunk] = []
    for group in matcher.get_grouped_opcodes(context):
        first, last = group[0], group[-1]
        i1, i2 = first[1], last[2]
        j1, j2 = first[3], last[4]
        hunk = DiffHunk(
            old_start=i1 + 1 if i2 > i1 else i1,
            old_count=i2 - i1,
            new_start=j1 + 1 if j2 > j1 else j1,
            new_count=j2 - j1,
        )
        for tag, a1, a2, b1, b2 in group:
            if tag == "equal":
                for offset in range(a2 - a1):
                    hunk.lines.append(
                        DiffLine(
                            LINE_CONTEXT,
                            old_lines[a1 + offset],
                            old_lineno=a1 + offset + 1,
                            new_lineno=b1 + offset + 1,
                        )
                    )
                continue
            for idx in range(a1, a2):
                hunk.lines.append(DiffLine(LINE_REMOVED, old_lines[idx], old_lineno=idx + 1))
            for idx in range(b1, b2):
                hunk.lines.append(DiffLine(LINE_ADDED, new_lines[idx], new_lineno=idx + 1))
        hunks.append(hunk)
    return hunks
