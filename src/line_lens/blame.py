"""Single-line blame: run the query and parse its porcelain output."""

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from git.exc import GitCommandError

from .git_ops import run_git

logger = logging.getLogger(__name__)

UNKNOWN_AUTHOR = "Unknown"

_HASH_RE = re.compile(r"^[0-9a-fA-F]+$")


@dataclass(frozen=True)
class Annotation:
    """Who last changed a line, when, and why."""

    commit_hash: str = ""  # Empty when there is no commit to show
    author: str | None = None
    timestamp: int | None = None  # Seconds since epoch
    summary: str | None = None  # First line of the commit message

    @property
    def short_hash(self) -> str:
        return self.commit_hash[:7]

    @property
    def is_committed(self) -> bool:
        return bool(self.commit_hash)


def parse_porcelain(raw: str) -> Annotation:
    """
    Parse `git blame --porcelain` output for a single line.

    Only the header block is scanned; it ends at the tab-prefixed line that
    carries the file content. Fields whose marker is missing, or whose value
    cannot be parsed, are left unset.
    """
    commit_hash = ""
    fields: dict[str, str] = {}

    lines = raw.splitlines()
    if lines:
        first = lines[0].split(" ", 1)[0]
        if _HASH_RE.match(first):
            commit_hash = first

    for line in lines[1:] if commit_hash else lines:
        if line.startswith("\t"):
            break
        key, sep, value = line.partition(" ")
        if sep and key not in fields:
            fields[key] = value

    # git reports lines that are not committed yet with an all-zero hash
    if commit_hash and not commit_hash.strip("0"):
        commit_hash = ""

    timestamp = None
    if "author-time" in fields:
        try:
            timestamp = int(fields["author-time"].strip())
        except ValueError:
            logger.debug("Unparsable author-time: %r", fields["author-time"])

    return Annotation(
        commit_hash=commit_hash,
        author=fields.get("author"),
        timestamp=timestamp,
        summary=fields.get("summary"),
    )


def annotate(
    root: Path, relative_path: str, line_number: int, timeout_ms: int
) -> Annotation | None:
    """
    Blame one line of a file.

    Args:
        root: Repository root (see git_ops.locate)
        relative_path: File path relative to the root
        line_number: 1-based line number
        timeout_ms: Timeout for the git invocation

    Returns:
        The parsed Annotation, or None when git has nothing to say about the
        line (untracked file, line past the end, timeout).

    Raises:
        GitUnavailableError: git could not be launched.
    """
    try:
        output = run_git(
            root,
            "blame",
            "-L",
            f"{line_number},{line_number}",
            "--porcelain",
            "--",
            relative_path,
            timeout_ms=timeout_ms,
        )
    except GitCommandError as e:
        logger.debug("No blame for %s:%d (%s)", relative_path, line_number, e.status)
        return None

    if not output.strip():
        return None

    return parse_porcelain(output)
