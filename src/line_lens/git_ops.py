"""Git operations: locating the repository and running git queries."""

import logging
from dataclasses import dataclass
from pathlib import Path

from git import Git
from git.exc import GitCommandError, GitCommandNotFound

logger = logging.getLogger(__name__)


class LineLensError(Exception):
    """Base class for line-lens errors."""


class GitUnavailableError(LineLensError):
    """The git executable could not be launched."""


@dataclass(frozen=True)
class Location:
    """A file inside a repository."""

    root: Path
    relative_path: str  # POSIX form, relative to root


def run_git(cwd: Path, command: str, *args: str, timeout_ms: int) -> str:
    """
    Run `git <command> <args>` in `cwd` and return its stdout.

    Raises:
        GitUnavailableError: git could not be launched at all.
        GitCommandError: git ran but failed, or was killed after the timeout.
    """
    git = Git(str(cwd))
    timeout = timeout_ms / 1000
    method = getattr(git, command.replace("-", "_"))

    logger.debug("git %s %s (cwd=%s)", command, " ".join(args), cwd)
    try:
        return method(*args, kill_after_timeout=timeout)
    except GitCommandNotFound as e:
        raise GitUnavailableError(f"Cannot run git: {e}") from e


def find_repo_root(start_dir: Path, timeout_ms: int) -> Path | None:
    """
    Return the top-level directory of the repository containing `start_dir`.

    Returns None when `start_dir` is not inside a repository, or does not
    exist (e.g. the file has never been saved).
    """
    if not start_dir.is_dir():
        return None

    try:
        output = run_git(start_dir, "rev-parse", "--show-toplevel", timeout_ms=timeout_ms)
    except GitCommandError as e:
        logger.debug("Not a repository: %s (%s)", start_dir, e.status)
        return None

    root = output.strip()
    if not root:
        return None
    return Path(root).resolve()


def relative_path(root: Path, file_path: Path) -> str | None:
    """Path of `file_path` relative to `root`, or None if it lies outside."""
    try:
        return file_path.resolve().relative_to(root.resolve()).as_posix()
    except ValueError:
        return None


def locate(file_path: Path, timeout_ms: int) -> Location | None:
    """
    Resolve a file to its repository root and repository-relative path.

    Must succeed before any blame or diff query is made for the file.
    """
    file_path = Path(file_path).absolute()
    root = find_repo_root(file_path.parent, timeout_ms)
    if root is None:
        return None

    rel_path = relative_path(root, file_path)
    if not rel_path or rel_path == ".":
        logger.debug("%s is not under %s", file_path, root)
        return None

    return Location(root=root, relative_path=rel_path)
