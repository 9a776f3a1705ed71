"""Fetch the diff a commit made to one file."""

import enum
import logging
from dataclasses import dataclass, field
from pathlib import Path

from git.exc import GitCommandError

from .git_ops import run_git

logger = logging.getLogger(__name__)

CONTEXT_LINES = 3


class DiffStatus(enum.Enum):
    OK = "ok"
    ROOT_COMMIT = "root-commit"
    EMPTY_DIFF = "empty-diff"
    UNAVAILABLE = "unavailable"


STATUS_MESSAGES = {
    DiffStatus.ROOT_COMMIT: "This is the first commit: there is no parent to diff against",
    DiffStatus.EMPTY_DIFF: "No textual changes to this file in that commit",
    DiffStatus.UNAVAILABLE: "No diff available",
}


@dataclass
class DiffResult:
    """The unified diff of one file between a commit and its parent."""

    path: str
    base_hash: str  # Parent, empty if it could not be resolved
    target_hash: str
    lines: list[str] = field(default_factory=list)
    status: DiffStatus = DiffStatus.OK

    @property
    def has_content(self) -> bool:
        return self.status == DiffStatus.OK and bool(self.lines)

    @property
    def message(self) -> str:
        """User-facing notice for a result without content."""
        return STATUS_MESSAGES.get(self.status, "")


def resolve_parent(root: Path, commit_hash: str, timeout_ms: int) -> str | None:
    """
    Return the first parent of `commit_hash`.

    A root commit and a failed lookup both give None.
    """
    try:
        output = run_git(
            root,
            "rev-parse",
            "--verify",
            "--quiet",
            f"{commit_hash}^",
            timeout_ms=timeout_ms,
        )
    except GitCommandError as e:
        logger.debug("No parent for %s (%s)", commit_hash, e.status)
        return None

    return output.strip() or None


def split_diff_lines(text: str) -> list[str]:
    """Split diff text on newlines, dropping empty trailing artifacts."""
    # Not splitlines(): form feeds and other separators are line content
    lines = [line.removesuffix("\r") for line in text.split("\n")]
    while lines and lines[-1] == "":
        lines.pop()
    return lines


def retrieve_diff(
    root: Path, relative_path: str, commit_hash: str, timeout_ms: int
) -> DiffResult:
    """
    Get the diff of `relative_path` between `commit_hash` and its first parent.

    Raises:
        GitUnavailableError: git could not be launched.
    """
    parent = resolve_parent(root, commit_hash, timeout_ms)
    if parent is None:
        return DiffResult(
            path=relative_path,
            base_hash="",
            target_hash=commit_hash,
            status=DiffStatus.ROOT_COMMIT,
        )

    try:
        text = run_git(
            root,
            "diff",
            f"-U{CONTEXT_LINES}",
            parent,
            commit_hash,
            "--",
            relative_path,
            timeout_ms=timeout_ms,
        )
    except GitCommandError as e:
        logger.debug("Diff failed for %s at %s (%s)", relative_path, commit_hash, e.status)
        return DiffResult(
            path=relative_path,
            base_hash=parent,
            target_hash=commit_hash,
            status=DiffStatus.UNAVAILABLE,
        )

    lines = split_diff_lines(text)
    return DiffResult(
        path=relative_path,
        base_hash=parent,
        target_hash=commit_hash,
        lines=lines,
        status=DiffStatus.OK if lines else DiffStatus.EMPTY_DIFF,
    )
