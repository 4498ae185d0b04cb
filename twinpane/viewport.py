"""Scrollable pane viewport measured in pixels.

Behaves like a scrollable UI element: offsets are clamped to the content
extent, and every change of offset notifies the registered scroll
listeners, including changes made programmatically.
"""

from __future__ import annotations

from collections.abc import Callable

from .scroll_sync import ROW_HEIGHT


class PaneViewport:
    """Vertical and horizontal scroll state of one pane."""

    def __init__(self, content_rows: int = 0, visible_rows: int = 1, content_cols: int = 0, visible_cols: int = 1) -> None:
        self.content_rows = max(0, content_rows)
        self.visible_rows = max(1, visible_rows)
        self.content_cols = max(0, content_cols)
        self.visible_cols = max(1, visible_cols)
        self._scroll_top = 0
        self._scroll_left = 0
        self._listeners: list[Callable[[], None]] = []

    def add_scroll_listener(self, listener: Callable[[], None]) -> None:
        self._listeners.append(listener)

    def clear_scroll_listeners(self) -> None:
        self._listeners.clear()

    def _emit_scroll(self) -> None:
        for listener in list(self._listeners):
            listener()

    @property
    def max_scroll_top(self) -> int:
        return max(0, self.content_rows - self.visible_rows) * ROW_HEIGHT

    @property
    def max_scroll_left(self) -> int:
        return max(0, self.content_cols - self.visible_cols)

    @property
    def scroll_top(self) -> int:
        return self._scroll_top

    @scroll_top.setter
    def scroll_top(self, value: int) -> None:
        clamped = max(0, min(int(value), self.max_scroll_top))
        if clamped == self._scroll_top:
            return
        self._scroll_top = clamped
        self._emit_scroll()

    @property
    def scroll_left(self) -> int:
        return self._scroll_left

    @scroll_left.setter
    def scroll_left(self, value: int) -> None:
        clamped = max(0, min(int(value), self.max_scroll_left))
        if clamped == self._scroll_left:
            return
        self._scroll_left = clamped
        self._emit_scroll()

    @property
    def first_row(self) -> int:
        """Index of the row at the top edge of the pane."""
        return self._scroll_top // ROW_HEIGHT

    def scroll_rows(self, delta: int) -> None:
        self.scroll_top = self._scroll_top + delta * ROW_HEIGHT

    def resize(self, *, content_rows: int | None = None, visible_rows: int | None = None,
               content_cols: int | None = None, visible_cols: int | None = None) -> None:
        """Update extents and re-clamp offsets, notifying listeners when they move."""
        if content_rows is not None:
            self.content_rows = max(0, content_rows)
        if visible_rows is not None:
            self.visible_rows = max(1, visible_rows)
        if content_cols is not None:
            self.content_cols = max(0, content_cols)
        if visible_cols is not None:
            self.visible_cols = max(1, visible_cols)
        self.scroll_top = self._scroll_top
        self.scroll_left = self._scroll_left
