"""Anchor-based scroll synchronization between the two diff panes.

A scroll on one pane is translated into a row index, mapped through the
nearest anchor at or before it, and applied to the other pane with the
sub-row remainder preserved. Assigning the other pane's offset makes that
pane report a scroll of its own; the controller recognizes that echo and
ignores it.

The controller is a two-state machine. ``sync`` moves it from IDLE to
SYNCING. After the current frame it returns to IDLE. The side that started
the sync stays recorded for ``ECHO_SUPPRESSION_SECONDS`` more, so late echoes
from the other pane are still dropped.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Mapping, Sequence
from typing import Protocol

from .alignment import AnchorMaps, build_anchor_maps, find_nearest_anchor
from .rows import Row, Side
from .scheduler import FrameScheduler, TaskHandle

logger = logging.getLogger(__name__)

# Must match the height layout gives every row, or alignment drifts.
ROW_HEIGHT = 20
ECHO_SUPPRESSION_SECONDS = 0.05
SCROLL_TOLERANCE_PX = 1


class ScrollViewport(Protocol):
    scroll_top: int
    scroll_left: int


class SyncState(enum.Enum):
    IDLE = "idle"
    SYNCING = "syncing"


def calculate_target_scroll(
    source_scroll_top: int,
    anchor_map: Mapping[int, int],
    target_content_length: int,
) -> int:
    """Map a source pane offset to the equivalent target pane offset.

    With no anchor at or before the source row the target goes to the top.
    """
    source_row = int(source_scroll_top // ROW_HEIGHT)
    row_offset = source_scroll_top - source_row * ROW_HEIGHT

    anchor = find_nearest_anchor(source_row, anchor_map)
    if anchor is None:
        return 0

    source_idx, target_idx = anchor
    target_row = target_idx + (source_row - source_idx)
    target_row = max(0, min(target_row, target_content_length - 1))
    return target_row * ROW_HEIGHT + row_offset


class ScrollSync:
    """Per-file-pair scroll synchronization controller."""

    def __init__(
        self,
        scheduler: FrameScheduler,
        *,
        echo_suppression_seconds: float = ECHO_SUPPRESSION_SECONDS,
    ) -> None:
        self.scheduler = scheduler
        self.echo_suppression_seconds = echo_suppression_seconds
        self.state = SyncState.IDLE
        self.last_scroll_source: Side | None = None
        self._anchor_rows: tuple[Sequence[Row], Sequence[Row]] | None = None
        self._anchor_maps: AnchorMaps | None = None
        self._frame_handle: TaskHandle | None = None
        self._release_handle: TaskHandle | None = None
        self._disposed = False

    def set_anchor_maps(self, old_rows: Sequence[Row], new_rows: Sequence[Row], anchor_maps: AnchorMaps) -> None:
        """Adopt prebuilt maps for exactly these row sequences."""
        self._anchor_rows = (old_rows, new_rows)
        self._anchor_maps = anchor_maps

    def anchor_maps_for(self, old_rows: Sequence[Row], new_rows: Sequence[Row]) -> AnchorMaps:
        """Return maps for the given sequences, rebuilding when either one changed."""
        cached_rows = self._anchor_rows
        if (
            self._anchor_maps is not None
            and cached_rows is not None
            and cached_rows[0] is old_rows
            and cached_rows[1] is new_rows
        ):
            return self._anchor_maps
        anchor_maps = build_anchor_maps(old_rows, new_rows)
        self.set_anchor_maps(old_rows, new_rows, anchor_maps)
        return anchor_maps

    def sync(
        self,
        source: ScrollViewport,
        target: ScrollViewport | None,
        side: Side,
        old_rows: Sequence[Row],
        new_rows: Sequence[Row],
    ) -> bool:
        """Propagate ``source``'s scroll position to ``target``.

        ``side`` names the pane that scrolled. Returns whether the target
        actually moved; echoes and reentrant calls return ``False``.
        """
        if self._disposed or target is None:
            return False
        if self.state is SyncState.SYNCING:
            return False
        if self.last_scroll_source is not None and self.last_scroll_source != side:
            return False

        self.state = SyncState.SYNCING
        self.last_scroll_source = side

        anchor_maps = self.anchor_maps_for(old_rows, new_rows)
        if side == "left":
            anchor_map = anchor_maps.old_to_new
            target_length = len(new_rows)
        else:
            anchor_map = anchor_maps.new_to_old
            target_length = len(old_rows)

        target_scroll_top = calculate_target_scroll(source.scroll_top, anchor_map, target_length)

        # Viewports may clamp assignments, so compare against what they report back.
        previous_top = target.scroll_top
        previous_left = target.scroll_left
        if abs(previous_top - target_scroll_top) > SCROLL_TOLERANCE_PX:
            target.scroll_top = target_scroll_top
        target.scroll_left = source.scroll_left
        moved = target.scroll_top != previous_top or target.scroll_left != previous_left

        self._schedule_release()
        return moved

    def _schedule_release(self) -> None:
        """Leave SYNCING after this frame, then forget the source after a short delay."""
        self._cancel_pending()

        def clear_source() -> None:
            self.last_scroll_source = None

        def end_syncing() -> None:
            self.state = SyncState.IDLE
            self._release_handle = self.scheduler.call_later(self.echo_suppression_seconds, clear_source)

        self._frame_handle = self.scheduler.after_frame(end_syncing)

    def _cancel_pending(self) -> None:
        for handle in (self._frame_handle, self._release_handle):
            if handle is not None:
                handle.cancel()
        self._frame_handle = None
        self._release_handle = None

    def dispose(self) -> None:
        """Cancel pending deferrals; the controller ignores every later call."""
        self._cancel_pending()
        self._disposed = True
        self.state = SyncState.IDLE
        self.last_scroll_source = None
        self._anchor_rows = None
        self._anchor_maps = None
        logger.debug("scroll sync controller disposed")
