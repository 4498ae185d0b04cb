"""Git access for diffing a working-tree file against ``HEAD``.

All calls shell out to ``git`` with a timeout. Failures raise ``GitError``
instead of returning partial data.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from ..errors import GitError
from .files import text_lines_from_bytes

logger = logging.getLogger(__name__)

GIT_TIMEOUT_SECONDS = 5.0


def _run_git(repo_root: Path, args: list[str], timeout_seconds: float) -> subprocess.CompletedProcess[bytes]:
    """Execute a git subcommand and return the completed process."""
    command = ["git", "-C", str(repo_root), *args]
    logger.debug("running %s", " ".join(command))
    try:
        return subprocess.run(
            command,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            check=False,
            timeout=timeout_seconds,
        )
    except FileNotFoundError as exc:
        raise GitError("git executable not found") from exc
    except subprocess.TimeoutExpired as exc:
        raise GitError(f"git {args[0]} timed out after {timeout_seconds:g}s") from exc


def _stderr_message(proc: subprocess.CompletedProcess[bytes]) -> str:
    return proc.stderr.decode("utf-8", errors="replace").strip()


def resolve_repo_root(path: Path, timeout_seconds: float = GIT_TIMEOUT_SECONDS) -> Path:
    """Return the repository root containing ``path``."""
    start = path if path.is_dir() else path.parent
    proc = _run_git(start, ["rev-parse", "--show-toplevel"], timeout_seconds)
    if proc.returncode != 0:
        raise GitError(f"not inside a git repository: {path} ({_stderr_message(proc)})")
    return Path(proc.stdout.decode("utf-8", errors="replace").strip()).resolve()


def _relative_to_repo(path: Path, repo_root: Path) -> Path:
    target = path.resolve()
    if not target.is_relative_to(repo_root):
        raise GitError(f"{path} is outside repository {repo_root}")
    return target.relative_to(repo_root)


def head_exists(repo_root: Path, timeout_seconds: float = GIT_TIMEOUT_SECONDS) -> bool:
    """Return whether ``HEAD`` resolves to a commit (false in a repo with no commits yet)."""
    proc = _run_git(repo_root, ["rev-parse", "--verify", "-q", "HEAD"], timeout_seconds)
    return proc.returncode == 0


def read_head_lines(path: Path, timeout_seconds: float = GIT_TIMEOUT_SECONDS) -> list[str]:
    """Return the ``HEAD`` version of ``path`` as lines; empty for files new since ``HEAD``."""
    repo_root = resolve_repo_root(path, timeout_seconds)
    rel_path = _relative_to_repo(path, repo_root)
    proc = _run_git(repo_root, ["show", f"HEAD:{rel_path.as_posix()}"], timeout_seconds)
    if proc.returncode != 0:
        logger.info("no HEAD version of %s: %s", rel_path, _stderr_message(proc))
        return []
    return text_lines_from_bytes(proc.stdout, f"HEAD:{rel_path.as_posix()}")


def diff_against_head(path: Path, timeout_seconds: float = GIT_TIMEOUT_SECONDS) -> str:
    """Return ``git diff HEAD`` unified output for ``path``.

    Empty when the repository has no commits, since there is nothing to diff against.
    """
    repo_root = resolve_repo_root(path, timeout_seconds)
    rel_path = _relative_to_repo(path, repo_root)
    if not head_exists(repo_root, timeout_seconds):
        logger.info("no commits yet in %s, diffing %s against empty", repo_root, rel_path)
        return ""
    proc = _run_git(repo_root, ["diff", "--no-color", "--no-ext-diff", "HEAD", "--", rel_path.as_posix()], timeout_seconds)
    if proc.returncode != 0:
        raise GitError(f"git diff failed for {rel_path}: {_stderr_message(proc)}")
    return proc.stdout.decode("utf-8", errors="replace")
