"""Anchor maps between the rows of the old and new panes.

Anchors are context lines present in both panes. They are found with a
single two-cursor merge over already-classified rows; no diffing happens
here. Maps are immutable and rebuilt by replacement whenever either row
sequence changes.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType

from .rows import LINE_ADDED, LINE_REMOVED, Collapse, DiffLine, Row, is_context_line

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnchorMaps:
    """Bidirectional row-index anchors plus build diagnostics."""

    old_to_new: Mapping[int, int] = field(default_factory=lambda: MappingProxyType({}))
    new_to_old: Mapping[int, int] = field(default_factory=lambda: MappingProxyType({}))
    fallback_steps: int = 0

    @classmethod
    def from_pairs(cls, pairs: Sequence[tuple[int, int]], fallback_steps: int = 0) -> AnchorMaps:
        """Freeze ``(old_idx, new_idx)`` pairs into read-only maps."""
        old_to_new = {old_idx: new_idx for old_idx, new_idx in pairs}
        new_to_old = {new_idx: old_idx for old_idx, new_idx in pairs}
        return cls(
            old_to_new=MappingProxyType(old_to_new),
            new_to_old=MappingProxyType(new_to_old),
            fallback_steps=fallback_steps,
        )

    def pairs(self) -> list[tuple[int, int]]:
        return sorted(self.old_to_new.items())

    def __len__(self) -> int:
        return len(self.old_to_new)


def _merge_anchor_pairs(
    old_rows: Sequence[Row],
    new_rows: Sequence[Row],
) -> tuple[list[tuple[int, int]], int, tuple[int, int] | None]:
    """Run the linear merge; return anchors, fallback count, first fallback position."""
    pairs: list[tuple[int, int]] = []
    fallback_steps = 0
    first_fallback: tuple[int, int] | None = None
    old_idx = 0
    new_idx = 0

    while old_idx < len(old_rows) and new_idx < len(new_rows):
        old_row = old_rows[old_idx]
        new_row = new_rows[new_idx]

        if is_context_line(old_row) and is_context_line(new_row):
            pairs.append((old_idx, new_idx))
            old_idx += 1
            new_idx += 1
        elif isinstance(old_row, DiffLine) and old_row.line_type == LINE_REMOVED:
            old_idx += 1
        elif isinstance(new_row, DiffLine) and new_row.line_type == LINE_ADDED:
            new_idx += 1
        elif isinstance(old_row, Collapse):
            old_idx += 1
        elif isinstance(new_row, Collapse):
            new_idx += 1
        else:
            # Panes disagree about structure here; skip both rows.
            if first_fallback is None:
                first_fallback = (old_idx, new_idx)
            fallback_steps += 1
            old_idx += 1
            new_idx += 1

    return pairs, fallback_steps, first_fallback


def build_anchor_maps(old_rows: Sequence[Row], new_rows: Sequence[Row]) -> AnchorMaps:
    """Build anchor maps for one file pair.

    Never raises. Inconsistent input (for example an ``added`` row on the old
    side) only yields fewer anchors; every skipped pair is counted in
    ``fallback_steps`` and reported once per build on this module's logger.
    """
    pairs, fallback_steps, first_fallback = _merge_anchor_pairs(old_rows, new_rows)
    if fallback_steps:
        logger.warning(
            "row sequences disagree about structure: %d fallback step(s), first at old=%d new=%d",
            fallback_steps,
            first_fallback[0] if first_fallback else -1,
            first_fallback[1] if first_fallback else -1,
        )
    return AnchorMaps.from_pairs(pairs, fallback_steps)


def rebuild_anchor_maps_for_region(
    previous: AnchorMaps,
    old_rows: Sequence[Row],
    new_rows: Sequence[Row],
    old_span: tuple[int, int],
    new_span: tuple[int, int],
    old_shift: int,
    new_shift: int,
) -> AnchorMaps:
    """Return new maps after one region of both panes was replaced.

    ``old_span``/``new_span`` are the ``[start, end)`` row ranges of the
    replacement in the *new* sequences; ``old_shift``/``new_shift`` are how
    many rows the replacement added on each side. Anchors before the region
    are kept, anchors after it are shifted, and only the region itself is
    merged again.
    """
    old_start, old_end = old_span
    new_start, new_end = new_span
    before: list[tuple[int, int]] = []
    after: list[tuple[int, int]] = []
    for old_idx, new_idx in previous.pairs():
        if old_idx < old_start and new_idx < new_start:
            before.append((old_idx, new_idx))
        elif old_idx >= old_end - old_shift and new_idx >= new_end - new_shift:
            after.append((old_idx + old_shift, new_idx + new_shift))

    region_pairs, fallback_steps, first_fallback = _merge_anchor_pairs(
        old_rows[old_start:old_end],
        new_rows[new_start:new_end],
    )
    if fallback_steps:
        logger.warning(
            "expanded region disagrees about structure: %d fallback step(s), first at old=%d new=%d",
            fallback_steps,
            old_start + (first_fallback[0] if first_fallback else 0),
            new_start + (first_fallback[1] if first_fallback else 0),
        )
    region = [(old_start + old_idx, new_start + new_idx) for old_idx, new_idx in region_pairs]
    return AnchorMaps.from_pairs(
        before + region + after,
        previous.fallback_steps + fallback_steps,
    )


def find_nearest_anchor(row_index: int, anchor_map: Mapping[int, int]) -> tuple[int, int] | None:
    """Return ``(source_idx, target_idx)`` of the closest anchor at or before ``row_index``."""
    for idx in range(row_index, -1, -1):
        target = anchor_map.get(idx)
        if target is not None:
            return idx, target
    return None
