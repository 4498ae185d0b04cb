"""Folding of long unchanged runs behind "N lines hidden" placeholders.

Folds are pure transforms over row sequences. A ``Collapse`` keeps the rows it
hides, so expanding one needs only the marker. Fold ids are the index, in the
fully expanded pane, of the first hidden row; for paired folds the old pane's
index is used on both sides.
"""

from __future__ import annotations

from collections.abc import Sequence

from .alignment import build_anchor_maps
from .rows import Collapse, DiffLine, Row, is_context_line


def _check_threshold(min_run_length: int, keep_context: int) -> None:
    if min_run_length < 1:
        raise ValueError(f"min_run_length must be >= 1, got {min_run_length}")
    if keep_context < 0:
        raise ValueError(f"keep_context must be >= 0, got {keep_context}")


def _flatten(rows: Sequence[Row]) -> list[DiffLine]:
    flat: list[DiffLine] = []
    for row in rows:
        if isinstance(row, Collapse):
            flat.extend(row.hidden)
        else:
            flat.append(row)
    return flat


def _fold_margins(run_length: int, at_start: bool, at_end: bool, keep_context: int) -> tuple[int, int]:
    """Rows kept visible before/after the folded part of a run."""
    lead = 0 if at_start else keep_context
    trail = 0 if at_end else keep_context
    if lead + trail >= run_length:
        return run_length, 0
    return lead, trail


def fold(rows: Sequence[Row], min_run_length: int, *, keep_context: int = 0) -> list[Row]:
    """Fold every maximal context run of at least ``min_run_length`` rows.

    Existing placeholders adjacent to context rows join their run, so the
    output never holds two neighboring ``Collapse`` rows. ``keep_context``
    leaves that many rows visible at each end of a run that borders a change.
    """
    _check_threshold(min_run_length, keep_context)
    out: list[Row] = []
    idx = 0
    logical_idx = 0
    while idx < len(rows):
        row = rows[idx]
        if not (is_context_line(row) or isinstance(row, Collapse)):
            out.append(row)
            idx += 1
            logical_idx += 1
            continue

        run_start = idx
        while idx < len(rows) and (is_context_line(rows[idx]) or isinstance(rows[idx], Collapse)):
            idx += 1
        run = rows[run_start:idx]
        flat = _flatten(run)
        had_collapse = any(isinstance(item, Collapse) for item in run)

        lead, trail = _fold_margins(len(flat), run_start == 0, idx == len(rows), keep_context)
        hidden = flat[lead : len(flat) - trail]
        if hidden and (len(hidden) >= min_run_length or had_collapse):
            out.extend(flat[:lead])
            out.append(Collapse(fold_id=logical_idx + lead, hidden=tuple(hidden)))
            out.extend(flat[len(flat) - trail :])
        else:
            out.extend(flat)
        logical_idx += len(flat)
    return out


def _anchor_runs(old_rows: Sequence[Row], new_rows: Sequence[Row]) -> list[tuple[int, int, int]]:
    """Group anchors into ``(old_start, new_start, length)`` runs that advance in lockstep."""
    runs: list[tuple[int, int, int]] = []
    for old_idx, new_idx in build_anchor_maps(old_rows, new_rows).pairs():
        if runs:
            old_start, new_start, length = runs[-1]
            if old_idx == old_start + length and new_idx == new_start + length:
                runs[-1] = (old_start, new_start, length + 1)
                continue
        runs.append((old_idx, new_idx, 1))
    return runs


def _apply_spans(rows: Sequence[DiffLine], spans: Sequence[tuple[int, int, int]]) -> list[Row]:
    """Replace each ``[start, end)`` span with a ``Collapse`` carrying ``fold_id``."""
    out: list[Row] = []
    cursor = 0
    for start, end, fold_id in spans:
        out.extend(rows[cursor:start])
        out.append(Collapse(fold_id=fold_id, hidden=tuple(rows[start:end])))
        cursor = end
    out.extend(rows[cursor:])
    return out


def fold_pair(
    old_rows: Sequence[Row],
    new_rows: Sequence[Row],
    min_run_length: int,
    *,
    keep_context: int = 0,
) -> tuple[list[Row], list[Row]]:
    """Fold both panes over the same mutually anchored context runs.

    The fold decision is made once per anchor run, so the placeholders on the
    two sides always hide the same underlying lines and share a fold id.
    """
    _check_threshold(min_run_length, keep_context)
    old_flat = _flatten(old_rows)
    new_flat = _flatten(new_rows)

    old_spans: list[tuple[int, int, int]] = []
    new_spans: list[tuple[int, int, int]] = []
    for old_start, new_start, length in _anchor_runs(old_flat, new_flat):
        at_start = old_start == 0 and new_start == 0
        at_end = old_start + length == len(old_flat) and new_start + length == len(new_flat)
        lead, trail = _fold_margins(length, at_start, at_end, keep_context)
        hidden_length = length - lead - trail
        if hidden_length < min_run_length:
            continue
        fold_id = old_start + lead
        old_spans.append((old_start + lead, old_start + lead + hidden_length, fold_id))
        new_spans.append((new_start + lead, new_start + lead + hidden_length, fold_id))

    return _apply_spans(old_flat, old_spans), _apply_spans(new_flat, new_spans)


def expand(collapse: Collapse) -> list[Row]:
    """Return the rows hidden behind ``collapse``."""
    return list(collapse.hidden)


def find_fold(rows: Sequence[Row], fold_id: int) -> int | None:
    """Return the row index of the placeholder with ``fold_id``, if present."""
    for idx, row in enumerate(rows):
        if isinstance(row, Collapse) and row.fold_id == fold_id:
            return idx
    return None


def expand_in(rows: Sequence[Row], fold_id: int) -> list[Row]:
    """Replace the placeholder with ``fold_id`` by its rows; unknown ids are a no-op."""
    idx = find_fold(rows, fold_id)
    if idx is None:
        return list(rows)
    collapse = rows[idx]
    assert isinstance(collapse, Collapse)
    return [*rows[:idx], *expand(collapse), *rows[idx + 1 :]]


def expand_all(rows: Sequence[Row]) -> list[Row]:
    """Reconstruct the pre-fold sequence."""
    return list(_flatten(rows))
