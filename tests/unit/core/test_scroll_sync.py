"""Tests for anchor-based scroll translation and feedback-loop suppression."""

from __future__ import annotations

import unittest

from twinpane.rows import DiffLine
from twinpane.scheduler import FrameScheduler
from twinpane.scroll_sync import (
    ECHO_SUPPRESSION_SECONDS,
    ROW_HEIGHT,
    ScrollSync,
    SyncState,
    calculate_target_scroll,
)
from twinpane.viewport import PaneViewport


class FakeClock:
    def __init__(self) -> None:
        self.now = 10.0

    def __call__(self) -> float:
        return self.now


class RecordingViewport:
    """Bare scroll target that counts vertical writes."""

    def __init__(self, scroll_top: int = 0, scroll_left: int = 0) -> None:
        self._scroll_top = scroll_top
        self.scroll_left = scroll_left
        self.top_writes = 0

    @property
    def scroll_top(self) -> int:
        return self._scroll_top

    @scroll_top.setter
    def scroll_top(self, value: int) -> None:
        self._scroll_top = value
        self.top_writes += 1


def ctx(text: str) -> DiffLine:
    return DiffLine("context", text)


# Anchors: old 0..4 <-> new 0..4, old 8..12 <-> new 6..10.
OLD_ROWS = [*(ctx(f"a{i}") for i in range(5)), *(DiffLine("removed", f"r{i}") for i in range(3)), *(ctx(f"b{i}") for i in range(5))]
NEW_ROWS = [*(ctx(f"a{i}") for i in range(5)), DiffLine("added", "n"), *(ctx(f"b{i}") for i in range(5))]


class CalculateTargetScrollTests(unittest.TestCase):
    def test_row_inside_fold_maps_through_nearest_preceding_anchor(self) -> None:
        anchor_map = {4: 4, 55: 55}
        source = 30 * ROW_HEIGHT + 7
        self.assertEqual(calculate_target_scroll(source, anchor_map, 100), 30 * ROW_HEIGHT + 7)

    def test_target_row_is_clamped_to_target_length(self) -> None:
        anchor_map = {4: 4, 55: 55}
        source = 30 * ROW_HEIGHT + 7
        self.assertEqual(calculate_target_scroll(source, anchor_map, 20), 19 * ROW_HEIGHT + 7)

    def test_no_anchor_at_or_before_source_snaps_to_top(self) -> None:
        self.assertEqual(calculate_target_scroll(0, {2: 2}, 10), 0)
        self.assertEqual(calculate_target_scroll(ROW_HEIGHT + 5, {2: 9}, 10), 0)
        self.assertEqual(calculate_target_scroll(500, {}, 10), 0)

    def test_offset_past_anchor_is_carried_over(self) -> None:
        self.assertEqual(calculate_target_scroll(9 * ROW_HEIGHT, {8: 6}, 11), 7 * ROW_HEIGHT)


class ScrollSyncTests(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FakeClock()
        self.scheduler = FrameScheduler(monotonic=self.clock)
        self.sync = ScrollSync(self.scheduler)

    def _settle(self) -> None:
        self.scheduler.end_frame()
        self.clock.now += ECHO_SUPPRESSION_SECONDS * 2
        self.scheduler.run_due()

    def test_left_scroll_moves_right_pane_through_anchor(self) -> None:
        left = RecordingViewport(scroll_top=9 * ROW_HEIGHT + 5)
        right = RecordingViewport()

        self.assertTrue(self.sync.sync(left, right, "left", OLD_ROWS, NEW_ROWS))

        self.assertEqual(right.scroll_top, 7 * ROW_HEIGHT + 5)
        self.assertIs(self.sync.state, SyncState.SYNCING)
        self.assertEqual(self.sync.last_scroll_source, "left")

    def test_right_scroll_uses_inverse_map(self) -> None:
        left = RecordingViewport()
        right = RecordingViewport(scroll_top=8 * ROW_HEIGHT)

        self.assertTrue(self.sync.sync(right, left, "right", OLD_ROWS, NEW_ROWS))

        self.assertEqual(left.scroll_top, 10 * ROW_HEIGHT)

    def test_echo_from_target_and_reentrant_calls_are_ignored(self) -> None:
        left = RecordingViewport(scroll_top=2 * ROW_HEIGHT)
        right = RecordingViewport()
        self.assertTrue(self.sync.sync(left, right, "left", OLD_ROWS, NEW_ROWS))

        self.assertFalse(self.sync.sync(right, left, "right", OLD_ROWS, NEW_ROWS))
        self.assertFalse(self.sync.sync(left, right, "left", OLD_ROWS, NEW_ROWS))
        self.assertEqual(left.top_writes, 0)
        self.assertEqual(right.top_writes, 1)

    def test_other_side_stays_suppressed_until_debounce_window_ends(self) -> None:
        left = RecordingViewport(scroll_top=2 * ROW_HEIGHT)
        right = RecordingViewport()
        self.sync.sync(left, right, "left", OLD_ROWS, NEW_ROWS)

        self.scheduler.end_frame()
        self.assertIs(self.sync.state, SyncState.IDLE)
        right.scroll_top = 9 * ROW_HEIGHT
        self.assertFalse(self.sync.sync(right, left, "right", OLD_ROWS, NEW_ROWS))

        self.clock.now += ECHO_SUPPRESSION_SECONDS + 0.01
        self.scheduler.run_due()
        self.assertIsNone(self.sync.last_scroll_source)
        self.assertTrue(self.sync.sync(right, left, "right", OLD_ROWS, NEW_ROWS))
        self.assertEqual(left.scroll_top, 11 * ROW_HEIGHT)

    def test_alternating_events_sync_at_most_once_each(self) -> None:
        left = PaneViewport(content_rows=len(OLD_ROWS))
        right = PaneViewport(content_rows=len(NEW_ROWS))
        results: list[tuple[str, bool, SyncState]] = []

        def on_left() -> None:
            state_before = self.sync.state
            results.append(("left", self.sync.sync(left, right, "left", OLD_ROWS, NEW_ROWS), state_before))

        def on_right() -> None:
            state_before = self.sync.state
            results.append(("right", self.sync.sync(right, left, "right", OLD_ROWS, NEW_ROWS), state_before))

        left.add_scroll_listener(on_left)
        right.add_scroll_listener(on_right)

        left.scroll_top = 3 * ROW_HEIGHT
        right.scroll_top = 6 * ROW_HEIGHT
        left.scroll_top = 1 * ROW_HEIGHT

        performed = [entry for entry in results if entry[1]]
        self.assertEqual(len(performed), 1)
        self.assertEqual(performed[0][0], "left")
        for _side, did_sync, state_before in results:
            if did_sync:
                self.assertIs(state_before, SyncState.IDLE)

    def test_second_sync_without_source_movement_does_not_move_target(self) -> None:
        left = RecordingViewport(scroll_top=10 * ROW_HEIGHT + 3)
        right = RecordingViewport()
        self.assertTrue(self.sync.sync(left, right, "left", OLD_ROWS, NEW_ROWS))
        self._settle()

        self.assertFalse(self.sync.sync(left, right, "left", OLD_ROWS, NEW_ROWS))
        self.assertEqual(right.top_writes, 1)

    def test_sub_pixel_difference_is_not_written(self) -> None:
        left = RecordingViewport(scroll_top=2 * ROW_HEIGHT)
        right = RecordingViewport(scroll_top=2 * ROW_HEIGHT + 1)
        self.assertFalse(self.sync.sync(left, right, "left", OLD_ROWS, NEW_ROWS))
        self.assertEqual(right.top_writes, 0)

    def test_horizontal_offset_is_copied_directly(self) -> None:
        left = RecordingViewport(scroll_left=17)
        right = RecordingViewport()
        self.assertTrue(self.sync.sync(left, right, "left", OLD_ROWS, NEW_ROWS))
        self.assertEqual(right.scroll_left, 17)
        self.assertEqual(right.top_writes, 0)

    def test_missing_target_is_not_synced(self) -> None:
        self.assertFalse(self.sync.sync(RecordingViewport(), None, "left", OLD_ROWS, NEW_ROWS))
        self.assertIs(self.sync.state, SyncState.IDLE)

    def test_anchor_maps_are_rebuilt_only_when_rows_change(self) -> None:
        first = self.sync.anchor_maps_for(OLD_ROWS, NEW_ROWS)
        self.assertIs(self.sync.anchor_maps_for(OLD_ROWS, NEW_ROWS), first)
        replaced = self.sync.anchor_maps_for(list(OLD_ROWS), NEW_ROWS)
        self.assertIsNot(replaced, first)
        self.assertEqual(replaced.pairs(), first.pairs())

    def test_dispose_cancels_pending_release_and_blocks_syncs(self) -> None:
        left = RecordingViewport(scroll_top=2 * ROW_HEIGHT)
        right = RecordingViewport()
        self.sync.sync(left, right, "left", OLD_ROWS, NEW_ROWS)

        self.sync.dispose()

        self.assertEqual(self.scheduler.end_frame(), 0)
        self.assertIs(self.sync.state, SyncState.IDLE)
        self.assertFalse(self.sync.sync(left, right, "left", OLD_ROWS, NEW_ROWS))


if __name__ == "__main__":
    unittest.main()
