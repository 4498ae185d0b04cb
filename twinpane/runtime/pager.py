"""Interactive two-pane pager loop.

Keys scroll the focused pane; the session's scroll listeners then drive the
sync controller, which moves the other pane. Each loop iteration draws at
most one frame and then ends it on the scheduler, which is what releases the
controller's SYNCING state.
"""

from __future__ import annotations

import logging
import shutil
import sys
from dataclasses import dataclass

from ..render.panes import FrameTexts, pane_widths, render_frame
from ..rows import Side, other_side
from ..session import DiffViewSession
from .input import KeyReader
from .terminal import TerminalController

logger = logging.getLogger(__name__)

IDLE_POLL_MS = 250
WHEEL_ROWS = 3
PAN_COLUMNS = 4


@dataclass
class PagerState:
    session: DiffViewSession
    texts: FrameTexts
    focus: Side = "left"
    status: str = ""
    dirty: bool = True
    screen_width: int = 80


def _scroll(state: PagerState, side: Side, rows: int) -> None:
    state.session.viewport_for(side).scroll_rows(rows)
    state.dirty = True


def handle_key(state: PagerState, key: str) -> bool:
    """Apply one key token; return ``False`` when the pager should exit."""
    session = state.session
    viewport = session.viewport_for(state.focus)
    page = max(1, viewport.visible_rows - 1)
    state.status = ""

    if key in {"q", "Q", "ESC"}:
        return False
    if key == "TAB":
        state.focus = other_side(state.focus)
        state.dirty = True
    elif key in {"j", "DOWN", "ENTER"}:
        _scroll(state, state.focus, 1)
    elif key in {"k", "UP"}:
        _scroll(state, state.focus, -1)
    elif key in {" ", "PAGE_DOWN", "CTRL_D", "f"}:
        _scroll(state, state.focus, page)
    elif key in {"b", "PAGE_UP", "CTRL_U"}:
        _scroll(state, state.focus, -page)
    elif key == "g":
        _scroll(state, state.focus, -len(session.rows_for(state.focus)))
    elif key == "G":
        _scroll(state, state.focus, len(session.rows_for(state.focus)))
    elif key in {"h", "LEFT"}:
        viewport.scroll_left -= PAN_COLUMNS
        state.dirty = True
    elif key in {"l", "RIGHT"}:
        viewport.scroll_left += PAN_COLUMNS
        state.dirty = True
    elif key == "e":
        row_index = session.first_visible_fold(state.focus)
        if row_index is None or not session.expand_at(state.focus, row_index):
            state.status = "no folded lines in view"
        state.dirty = True
    elif key.startswith("MOUSE_WHEEL_"):
        _handle_wheel(state, key)
    return True


def _handle_wheel(state: PagerState, key: str) -> None:
    direction, col_s, _row_s = key[len("MOUSE_WHEEL_") :].split(":")
    left_width, _right_width = pane_widths(state.screen_width)
    side: Side = "left" if int(col_s) <= left_width else "right"
    state.focus = side
    if direction == "UP":
        _scroll(state, side, -WHEEL_ROWS)
    elif direction == "DOWN":
        _scroll(state, side, WHEEL_ROWS)
    else:
        delta = -PAN_COLUMNS if direction == "LEFT" else PAN_COLUMNS
        state.session.viewport_for(side).scroll_left += delta
        state.dirty = True


def run_pager(session: DiffViewSession, texts: FrameTexts, *, colorize: bool) -> None:
    """Run the interactive viewer until the user quits; closes ``session`` on exit."""
    terminal = TerminalController(sys.stdin.fileno(), sys.stdout.fileno())
    reader = KeyReader(sys.stdin.fileno())
    state = PagerState(session=session, texts=texts)
    last_size: tuple[int, int] | None = None

    try:
        with terminal.raw_mode():
            while True:
                term = shutil.get_terminal_size((80, 24))
                if (term.columns, term.lines) != last_size:
                    last_size = (term.columns, term.lines)
                    state.screen_width = term.columns
                    state.dirty = True
                if state.dirty:
                    terminal.write_frame(
                        render_frame(
                            session,
                            texts,
                            term.columns,
                            term.lines,
                            colorize=colorize,
                            focus=state.focus,
                            status=state.status,
                        )
                    )
                    state.dirty = False
                session.scheduler.end_frame()

                deadline = session.scheduler.next_deadline()
                timeout_ms = IDLE_POLL_MS if deadline is None else min(IDLE_POLL_MS, int(deadline * 1000) + 1)
                key = reader.read_key(timeout_ms=timeout_ms)
                if not key:
                    continue
                if not handle_key(state, key):
                    break
    finally:
        session.close()
        logger.debug("pager closed")
