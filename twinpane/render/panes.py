"""Draw a ``DiffViewSession`` as two side-by-side terminal panes.

Every row occupies exactly one terminal line, which is how the terminal
adapter honors the fixed row height the scroll controller assumes. Folds
render as a single "N lines hidden" line on both sides.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from ..rows import LINE_ADDED, LINE_REMOVED, Collapse, DiffLine, Row, Side
from ..session import DiffViewSession
from .ansi import fit_cell
from .diff_style import COLLAPSE_SGR, apply_line_background, apply_sgr, background_for
from .highlight import DEFAULT_STYLE, highlight_lines, sanitize_terminal_text

PANE_SEPARATOR = "│"
HELP_TEXT = "tab: switch pane  j/k: scroll  h/l: pan  space/b: page  e: expand fold  q: quit"

_MARKERS = {LINE_ADDED: "+", LINE_REMOVED: "-"}


@dataclass
class PaneText:
    """Display text per line number for one pane."""

    lines: dict[int, str] = field(default_factory=dict)

    def text_for(self, line: DiffLine) -> str:
        lineno = line.line_number
        if lineno is not None and lineno in self.lines:
            return self.lines[lineno]
        return sanitize_terminal_text(line.content)


def _pane_source(rows: Sequence[Row]) -> list[DiffLine]:
    """Every line of the pane in order, including lines hidden behind folds."""
    out: list[DiffLine] = []
    for row in rows:
        if isinstance(row, Collapse):
            out.extend(row.hidden)
        else:
            out.append(row)
    return out


def build_pane_text(rows: Sequence[Row], filename: str, *, colorize: bool, style: str = DEFAULT_STYLE) -> PaneText:
    """Prepare display text for a pane, syntax-colored when ``colorize`` is set."""
    source = [line for line in _pane_source(rows) if line.line_number is not None]
    contents = [line.content for line in source]
    rendered = highlight_lines(contents, filename, style) if colorize else [sanitize_terminal_text(text) for text in contents]
    return PaneText({line.line_number: text for line, text in zip(source, rendered) if line.line_number is not None})


def gutter_width(rows: Sequence[Row]) -> int:
    """Columns for the line-number gutter plus marker and spacing."""
    widest = 1
    for line in _pane_source(rows):
        if line.line_number is not None:
            widest = max(widest, len(str(line.line_number)))
    return widest + 3


def render_row(row: Row | None, pane_text: PaneText, width: int, text_x: int, num_width: int, *, colorize: bool) -> str:
    """Render one pane cell of exactly ``width`` columns."""
    if width <= 0:
        return ""
    if row is None:
        return " " * width

    if isinstance(row, Collapse):
        noun = "line" if row.hidden_count == 1 else "lines"
        label = f"{'⋯':>{num_width - 2}}  {row.hidden_count} unchanged {noun} hidden"
        cell = fit_cell(label, 0, width)
        return apply_sgr(cell, COLLAPSE_SGR) if colorize else cell

    lineno = "" if row.line_number is None else str(row.line_number)
    marker = _MARKERS.get(row.line_type, " ")
    gutter = f"{lineno:>{num_width - 3}} {marker} "
    body = fit_cell(pane_text.text_for(row), text_x, max(0, width - len(gutter)))
    cell = fit_cell(gutter + body, 0, width)
    if not colorize:
        return cell
    background = background_for(row.line_type)
    if background is None:
        return cell
    return apply_line_background(cell, background)


@dataclass
class FrameTexts:
    """Cached per-session display text; rebuilt when the session changes."""

    session: DiffViewSession
    left: PaneText
    right: PaneText
    left_gutter: int
    right_gutter: int

    @classmethod
    def for_session(cls, session: DiffViewSession, filename: str, *, colorize: bool, style: str) -> FrameTexts:
        return cls(
            session=session,
            left=build_pane_text(session.raw_old_rows, filename, colorize=colorize, style=style),
            right=build_pane_text(session.raw_new_rows, filename, colorize=colorize, style=style),
            left_gutter=gutter_width(session.raw_old_rows),
            right_gutter=gutter_width(session.raw_new_rows),
        )


def pane_widths(total_width: int) -> tuple[int, int]:
    """Split ``total_width`` into two pane widths around the separator."""
    usable = max(2, total_width - len(PANE_SEPARATOR))
    left = usable // 2
    return left, usable - left


def _title_cell(text: str, width: int, focused: bool, colorize: bool) -> str:
    cell = fit_cell(f" {text}", 0, width)
    if colorize:
        return apply_sgr(cell, "1;7" if focused else "7")
    return cell


def render_frame(
    session: DiffViewSession,
    texts: FrameTexts,
    width: int,
    height: int,
    *,
    colorize: bool,
    focus: Side | None = None,
    status: str = "",
) -> list[str]:
    """Render the whole screen: a title row, ``height - 2`` body rows and a status row."""
    left_width, right_width = pane_widths(width)
    body_height = max(1, height - 2)
    session.left.resize(visible_rows=body_height, visible_cols=max(1, left_width - texts.left_gutter))
    session.right.resize(visible_rows=body_height, visible_cols=max(1, right_width - texts.right_gutter))

    lines = [
        _title_cell(session.old_label, left_width, focus == "left", colorize)
        + PANE_SEPARATOR
        + _title_cell(session.new_label, right_width, focus == "right", colorize)
    ]

    left_first = session.left.first_row
    right_first = session.right.first_row
    for offset in range(body_height):
        left_idx = left_first + offset
        right_idx = right_first + offset
        left_row = session.old_rows[left_idx] if left_idx < len(session.old_rows) else None
        right_row = session.new_rows[right_idx] if right_idx < len(session.new_rows) else None
        lines.append(
            render_row(left_row, texts.left, left_width, session.left.scroll_left, texts.left_gutter, colorize=colorize)
            + PANE_SEPARATOR
            + render_row(right_row, texts.right, right_width, session.right.scroll_left, texts.right_gutter, colorize=colorize)
        )

    lines.append(fit_cell(status or HELP_TEXT, 0, width))
    return lines


def render_plain(session: DiffViewSession, texts: FrameTexts, width: int, *, colorize: bool) -> list[str]:
    """Render every row of both panes, top-aligned by the anchors, for non-interactive output.

    Rows are paired through the anchor maps: between two anchors each side's
    unmatched rows are printed next to blanks so context lines line up.
    """
    left_width, right_width = pane_widths(width)
    out: list[str] = []

    def emit(left_row: Row | None, right_row: Row | None) -> None:
        out.append(
            render_row(left_row, texts.left, left_width, 0, texts.left_gutter, colorize=colorize)
            + PANE_SEPARATOR
            + render_row(right_row, texts.right, right_width, 0, texts.right_gutter, colorize=colorize)
        )

    old_rows = session.old_rows
    new_rows = session.new_rows
    old_idx = 0
    new_idx = 0
    for anchor_old, anchor_new in [*session.anchor_maps.pairs(), (len(old_rows), len(new_rows))]:
        pending_old = list(old_rows[old_idx:anchor_old])
        pending_new = list(new_rows[new_idx:anchor_new])
        for pos in range(max(len(pending_old), len(pending_new))):
            emit(
                pending_old[pos] if pos < len(pending_old) else None,
                pending_new[pos] if pos < len(pending_new) else None,
            )
        if anchor_old < len(old_rows) and anchor_new < len(new_rows):
            emit(old_rows[anchor_old], new_rows[anchor_new])
        old_idx = anchor_old + 1
        new_idx = anchor_new + 1
    return out
