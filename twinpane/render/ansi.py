"""ANSI-aware width measurement and horizontal slicing for pane cells.

Escape sequences never count toward width, tabs expand to 8-column stops,
and wide characters take two columns, so both panes stay column-aligned.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
TAB_STOP = 8


def char_display_width(ch: str, col: int) -> int:
    """Return terminal column width for one character at visual column ``col``."""
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def display_width(text: str) -> int:
    """Display width of ``text`` after dropping escape sequences."""
    col = 0
    for ch in ANSI_ESCAPE_RE.sub("", text):
        col += char_display_width(ch, col)
    return col


def slice_ansi_line(text: str, start_cols: int, max_cols: int) -> str:
    """Return the ``[start_cols, start_cols + max_cols)`` column window of a styled line.

    When the window starts after a style sequence, the latest one is replayed
    so the visible text keeps its color.
    """
    if max_cols <= 0 or not text:
        return ""
    start_cols = max(0, start_cols)

    out: list[str] = []
    col = 0
    shown = 0
    i = 0
    pending_sgr = ""
    injected_style = False
    while i < len(text) and shown < max_cols:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                seq = match.group(0)
                is_sgr = seq.endswith("m")
                if is_sgr:
                    pending_sgr = seq
                if col >= start_cols:
                    out.append(seq)
                    injected_style = injected_style or is_sgr
                i = match.end()
                continue
        ch = text[i]
        w = char_display_width(ch, col)
        if col + w <= start_cols:
            col += w
            i += 1
            continue
        if not injected_style and pending_sgr:
            out.append(pending_sgr)
            injected_style = True
        if ch == "\t" or col < start_cols:
            # Tabs, and wide chars cut by the left edge, become spaces.
            visible = min(col + w - max(col, start_cols), max_cols - shown)
            out.append(" " * visible)
            shown += visible
            col += w
            i += 1
            continue
        if shown + w > max_cols:
            break
        out.append(ch)
        shown += w
        col += w
        i += 1

    return "".join(out)


def fit_cell(text: str, start_cols: int, width: int) -> str:
    """Slice a styled line to ``width`` columns and pad it with spaces to exactly that width."""
    sliced = slice_ansi_line(text, start_cols, width)
    padding = width - display_width(sliced)
    if "\x1b" in sliced:
        return f"{sliced}\033[0m{' ' * max(0, padding)}"
    return sliced + " " * max(0, padding)
