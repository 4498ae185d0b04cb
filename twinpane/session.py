"""View session for one file pair.

The session owns everything derived from the pair's rows: the folded rows,
the anchor maps, the two pane viewports and the scroll sync controller.
Changing content replaces all of it; switching to another file pair means
closing this session and creating a new one.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .alignment import AnchorMaps, build_anchor_maps, rebuild_anchor_maps_for_region
from .folding import expand_in, find_fold, fold_pair
from .rows import Collapse, Row, Side, other_side
from .scheduler import FrameScheduler
from .scroll_sync import ScrollSync
from .viewport import PaneViewport

logger = logging.getLogger(__name__)

DEFAULT_FOLD_THRESHOLD = 8
DEFAULT_KEEP_CONTEXT = 3


class DiffViewSession:
    """Rows, anchors, viewports and scroll sync for one displayed file pair."""

    def __init__(
        self,
        old_rows: Sequence[Row],
        new_rows: Sequence[Row],
        *,
        scheduler: FrameScheduler | None = None,
        fold_threshold: int | None = DEFAULT_FOLD_THRESHOLD,
        keep_context: int = DEFAULT_KEEP_CONTEXT,
        old_label: str = "old",
        new_label: str = "new",
    ) -> None:
        self.scheduler = scheduler if scheduler is not None else FrameScheduler()
        self.fold_threshold = fold_threshold
        self.keep_context = keep_context
        self.old_label = old_label
        self.new_label = new_label
        self.left = PaneViewport()
        self.right = PaneViewport()
        self.scroll_sync = ScrollSync(self.scheduler)
        self.raw_old_rows: tuple[Row, ...] = ()
        self.raw_new_rows: tuple[Row, ...] = ()
        self.old_rows: tuple[Row, ...] = ()
        self.new_rows: tuple[Row, ...] = ()
        self.anchor_maps = AnchorMaps()
        self.closed = False
        self.replace_content(old_rows, new_rows)
        self.left.add_scroll_listener(lambda: self.on_scroll("left"))
        self.right.add_scroll_listener(lambda: self.on_scroll("right"))

    def replace_content(self, old_rows: Sequence[Row], new_rows: Sequence[Row]) -> None:
        """Re-fold and rebuild anchors for new pane content."""
        self.raw_old_rows = tuple(old_rows)
        self.raw_new_rows = tuple(new_rows)
        if self.fold_threshold is None:
            folded_old: Sequence[Row] = self.raw_old_rows
            folded_new: Sequence[Row] = self.raw_new_rows
        else:
            folded_old, folded_new = fold_pair(
                self.raw_old_rows,
                self.raw_new_rows,
                self.fold_threshold,
                keep_context=self.keep_context,
            )
        self._install(folded_old, folded_new, build_anchor_maps(folded_old, folded_new))

    def _install(self, old_rows: Sequence[Row], new_rows: Sequence[Row], anchor_maps: AnchorMaps) -> None:
        self.old_rows = tuple(old_rows)
        self.new_rows = tuple(new_rows)
        self.anchor_maps = anchor_maps
        self.scroll_sync.set_anchor_maps(self.old_rows, self.new_rows, anchor_maps)
        self.left.resize(content_rows=len(self.old_rows), content_cols=_max_content_width(self.old_rows))
        self.right.resize(content_rows=len(self.new_rows), content_cols=_max_content_width(self.new_rows))

    def rows_for(self, side: Side) -> tuple[Row, ...]:
        return self.old_rows if side == "left" else self.new_rows

    def viewport_for(self, side: Side) -> PaneViewport:
        return self.left if side == "left" else self.right

    def on_scroll(self, side: Side) -> bool:
        """Scroll-event entry point for either pane."""
        if self.closed:
            return False
        return self.scroll_sync.sync(
            self.viewport_for(side),
            self.viewport_for(other_side(side)),
            side,
            self.old_rows,
            self.new_rows,
        )

    def expand(self, fold_id: int) -> bool:
        """Expand one fold in both panes and rebuild anchors around it."""
        old_idx = find_fold(self.old_rows, fold_id)
        new_idx = find_fold(self.new_rows, fold_id)
        if old_idx is None and new_idx is None:
            return False

        old_rows = expand_in(self.old_rows, fold_id)
        new_rows = expand_in(self.new_rows, fold_id)
        if old_idx is None or new_idx is None:
            anchor_maps = build_anchor_maps(old_rows, new_rows)
        else:
            old_fold = self.old_rows[old_idx]
            new_fold = self.new_rows[new_idx]
            assert isinstance(old_fold, Collapse) and isinstance(new_fold, Collapse)
            anchor_maps = rebuild_anchor_maps_for_region(
                self.anchor_maps,
                old_rows,
                new_rows,
                (old_idx, old_idx + old_fold.hidden_count),
                (new_idx, new_idx + new_fold.hidden_count),
                old_fold.hidden_count - 1,
                new_fold.hidden_count - 1,
            )
        logger.debug("expanded fold %d (%d anchors)", fold_id, len(anchor_maps))
        self._install(old_rows, new_rows, anchor_maps)
        return True

    def expand_at(self, side: Side, row_index: int) -> bool:
        """Expand the fold shown at ``row_index`` of ``side``, if any."""
        rows = self.rows_for(side)
        if not 0 <= row_index < len(rows):
            return False
        row = rows[row_index]
        if not isinstance(row, Collapse):
            return False
        return self.expand(row.fold_id)

    def first_visible_fold(self, side: Side) -> int | None:
        """Row index of the first fold inside ``side``'s viewport."""
        viewport = self.viewport_for(side)
        rows = self.rows_for(side)
        start = viewport.first_row
        for idx in range(start, min(len(rows), start + viewport.visible_rows)):
            if isinstance(rows[idx], Collapse):
                return idx
        return None

    def close(self) -> None:
        """Drop listeners and cancel pending sync deferrals."""
        if self.closed:
            return
        self.closed = True
        self.left.clear_scroll_listeners()
        self.right.clear_scroll_listeners()
        self.scroll_sync.dispose()


def _max_content_width(rows: Sequence[Row]) -> int:
    widest = 0
    for row in rows:
        if not isinstance(row, Collapse):
            widest = max(widest, len(row.content))
    return widest
