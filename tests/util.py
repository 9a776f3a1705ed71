"""Test doubles shared by the test modules."""

import shutil
from pathlib import Path

from git import Actor, Repo

from line_lens.host import Host, TimerHandle

FIRST_TIME = 1700000000  # 2023-11-14 22:13:20 UTC
SECOND_TIME = 1700003600

JANE = Actor("Jane Doe", "jane@example.com")
JOHN = Actor("John Roe", "john@example.com")


def make_commit(repo: Repo, message: str, author: Actor, timestamp: int) -> str:
    """Commit the index with fixed author and dates, returning the hash."""
    date = f"{timestamp} +0000"
    commit = repo.index.commit(
        message,
        author=author,
        committer=author,
        author_date=date,
        commit_date=date,
    )
    return commit.hexsha


class FakeTimer(TimerHandle):
    def __init__(self, due: int, callback):
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeHost(Host):
    """In-memory host with a manual clock."""

    def __init__(self, viewport: tuple[int, int] = (100, 40)):
        self.now = 0
        self.timers: list[FakeTimer] = []
        self.annotation: tuple[Path, int, str, str] | None = None
        self.shown: list[str] = []
        self.diffs = []
        self.notices: list[tuple[str, str]] = []
        self.viewport = viewport

    @property
    def pending(self) -> list[FakeTimer]:
        return [t for t in self.timers if not t.cancelled]

    def advance(self, ms: int):
        """Move the clock forward, firing due timers in order."""
        target = self.now + ms
        while True:
            due = [t for t in self.pending if t.due <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.due)
            self.timers.remove(timer)
            self.now = timer.due
            timer.callback()
        self.now = target

    def schedule(self, delay_ms, callback):
        timer = FakeTimer(self.now + delay_ms, callback)
        self.timers.append(timer)
        return timer

    def show_annotation(self, path, line, text, style):
        self.annotation = (path, line, text, style)
        self.shown.append(text)

    def clear_annotation(self):
        self.annotation = None

    def open_diff(self, spec):
        self.diffs.append(spec)

    def notify(self, message, severity="information"):
        self.notices.append((message, severity))

    def viewport_size(self):
        return self.viewport


def make_git_wrapper(directory: Path, script: str) -> Path:
    """
    Write an executable stand-in for git.

    `script` is shell code run before the real git; "$REAL_GIT" holds the
    path of the real executable.
    """
    wrapper = directory / "git-wrapper"
    wrapper.write_text(f'#!/bin/sh\nREAL_GIT="{shutil.which("git")}"\n{script}\nexec "$REAL_GIT" "$@"\n')
    wrapper.chmod(0o755)
    return wrapper


def slow_git(directory: Path) -> Path:
    """A git that never answers within a short timeout."""
    return make_git_wrapper(directory, "exec sleep 5")
