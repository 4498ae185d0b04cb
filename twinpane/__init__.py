"""Public package surface for twinpane.

Exports ``main`` for programmatic CLI invocation. The alignment, folding and
scroll-sync core lives in ``alignment``, ``folding``, ``scroll_sync`` and
``session``.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)

__all__ = ["main"]
