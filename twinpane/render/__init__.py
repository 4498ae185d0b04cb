"""Terminal rendering of side-by-side diff panes."""

from __future__ import annotations

from .panes import FrameTexts, render_frame, render_plain

__all__ = ["FrameTexts", "render_frame", "render_plain"]
