"""Command-line front door for twinpane.

Resolves the file pair (two paths, or one path against git ``HEAD``), builds
the view session, then either prints both panes once or runs the pager.
"""

from __future__ import annotations

import argparse
import logging
import shutil
import sys
from pathlib import Path

from .diffsource import rows_for_git_path, rows_for_paths
from .errors import TwinpaneError
from .log import setup_logging
from .render.panes import FrameTexts, render_plain
from .runtime import run_pager
from .runtime.config import load_viewer_config
from .session import DiffViewSession

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _nonnegative_int(value: str) -> int:
    """argparse type for integer values >= 0."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("value must be >= 0")
    return parsed


def _default_render_width() -> int:
    term = shutil.get_terminal_size((120, 24))
    return max(20, term.columns)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="twinpane",
        description="Show two versions of a file side by side with synchronized scrolling.",
    )
    parser.add_argument("old", nargs="?", help="Original file.")
    parser.add_argument("new", nargs="?", help="Modified file.")
    parser.add_argument("--git", metavar="PATH", help="Compare PATH in the working tree against git HEAD.")
    parser.add_argument(
        "--fold",
        type=_nonnegative_int,
        default=None,
        help="Fold unchanged runs of at least N lines (0 disables folding).",
    )
    parser.add_argument(
        "--context",
        type=_nonnegative_int,
        default=None,
        help="Unchanged lines kept visible around each change.",
    )
    parser.add_argument("--style", default=None, help="Pygments style name.")
    parser.add_argument("--no-color", action="store_true", help="Disable color output even on TTY.")
    parser.add_argument("--nopager", action="store_true", help="Print both panes once instead of paging.")
    parser.add_argument(
        "--max-cols",
        type=_positive_int,
        default=None,
        help="Column width for --nopager output (default: terminal width).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug details.")
    return parser


def display_path(old_path: str, new_path: str) -> str:
    """Single title for a file pair, showing renames as ``old → new``."""
    if old_path and new_path and old_path != new_path:
        return f"{old_path} → {new_path}"
    return new_path or old_path


def _load_session(args: argparse.Namespace, fold_threshold: int | None, keep_context: int) -> tuple[DiffViewSession, str]:
    """Build the view session and return it with the filename used for highlighting."""
    if args.git is not None:
        target = Path(args.git)
        if not target.is_file():
            raise SystemExit(f"Path not found: {target}")
        old_rows, new_rows = rows_for_git_path(target)
        labels = (f"{target} @ HEAD", f"{target} (working tree)")
        filename = target.name
    else:
        old_path = Path(args.old)
        new_path = Path(args.new)
        for path in (old_path, new_path):
            if not path.is_file():
                raise SystemExit(f"Path not found: {path}")
        old_rows, new_rows = rows_for_paths(old_path, new_path)
        labels = (str(old_path), str(new_path))
        filename = new_path.name

    logger.info("comparing %s", display_path(*labels))
    session = DiffViewSession(
        old_rows,
        new_rows,
        fold_threshold=fold_threshold,
        keep_context=keep_context,
        old_label=labels[0],
        new_label=labels[1],
    )
    return session, filename


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and show the requested file pair."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.git is not None and (args.old is not None or args.new is not None):
        raise SystemExit("Cannot combine --git with positional paths.")
    if args.git is None and (args.old is None or args.new is None):
        parser.error("expected OLD and NEW paths, or --git PATH")

    interactive = not args.nopager and sys.stdin.isatty() and sys.stdout.isatty()
    setup_logging(verbose=args.verbose, log_to_stderr=not interactive)

    viewer_config = load_viewer_config()
    fold = viewer_config.fold_threshold if args.fold is None else args.fold
    keep_context = viewer_config.keep_context if args.context is None else args.context
    style = args.style or viewer_config.style
    colorize = not args.no_color and sys.stdout.isatty()

    try:
        session, filename = _load_session(args, fold or None, keep_context)
    except TwinpaneError as exc:
        raise SystemExit(str(exc)) from exc
    except OSError as exc:
        raise SystemExit(f"Cannot read input: {exc}") from exc

    texts = FrameTexts.for_session(session, filename, colorize=colorize, style=style)
    if not interactive:
        max_cols = args.max_cols if args.max_cols is not None else _default_render_width()
        try:
            for line in render_plain(session, texts, max_cols, colorize=colorize):
                sys.stdout.write(line + "\n")
        finally:
            session.close()
        return

    run_pager(session, texts, colorize=colorize)


if __name__ == "__main__":
    main()
