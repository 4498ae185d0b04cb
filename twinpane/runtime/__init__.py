"""Interactive terminal runtime: input, terminal modes, config and the pager loop."""

from __future__ import annotations

from .pager import run_pager

__all__ = ["run_pager"]
