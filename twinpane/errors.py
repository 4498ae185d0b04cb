"""Exception types raised by twinpane's diff sources.

The alignment, folding and scroll-sync core does not raise on inconsistent
rows; these cover loading content and talking to git.
"""

from __future__ import annotations


class TwinpaneError(Exception):
    """Base class for errors reported to the user by the CLI."""


class GitError(TwinpaneError):
    """A git subprocess failed, timed out, or the path is outside a repository."""


class BinaryFileError(TwinpaneError):
    """Content looks binary and cannot be shown as lines."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Binary file not shown: {path}")
        self.path = path


class DiffParseError(TwinpaneError):
    """Unified diff text is malformed (for example a hunk shorter than its header says)."""
