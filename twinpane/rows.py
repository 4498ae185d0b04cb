"""Row vocabulary shared by both panes of a side-by-side diff.

A pane is an ordered sequence of rows: classified ``DiffLine`` entries and
``Collapse`` placeholders standing in for folded runs of context lines.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Literal, Union

LineType = Literal["context", "added", "removed"]
Side = Literal["left", "right"]

LINE_CONTEXT: LineType = "context"
LINE_ADDED: LineType = "added"
LINE_REMOVED: LineType = "removed"


@dataclass(frozen=True)
class DiffLine:
    """One classified source line as shown in a pane."""

    line_type: LineType
    content: str
    old_lineno: int | None = None
    new_lineno: int | None = None

    @property
    def line_number(self) -> int | None:
        """Line number relevant to the pane this row lives in."""
        if self.old_lineno is not None:
            return self.old_lineno
        return self.new_lineno

    @property
    def is_context(self) -> bool:
        return self.line_type == LINE_CONTEXT


@dataclass(frozen=True)
class Collapse:
    """Placeholder for a folded run of context lines.

    Renders as a count only. The folded rows travel with the placeholder so
    expansion needs nothing but the marker itself.
    """

    fold_id: int
    hidden: tuple[DiffLine, ...] = field(repr=False)

    def __post_init__(self) -> None:
        if not self.hidden:
            raise ValueError("a collapse must hide at least one row")

    @property
    def hidden_count(self) -> int:
        return len(self.hidden)


Row = Union[DiffLine, Collapse]


def is_context_line(row: Row) -> bool:
    return isinstance(row, DiffLine) and row.line_type == LINE_CONTEXT


def pane_line_count(rows: Sequence[Row]) -> int:
    """Count logical lines in a pane, including lines hidden behind folds."""
    total = 0
    for row in rows:
        total += row.hidden_count if isinstance(row, Collapse) else 1
    return total


def other_side(side: Side) -> Side:
    return "right" if side == "left" else "left"
