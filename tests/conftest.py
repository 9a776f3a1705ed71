import os
import time
from dataclasses import dataclass
from pathlib import Path

import pytest
from git import Repo

from .util import FIRST_TIME, JANE, JOHN, SECOND_TIME, make_commit


@dataclass
class GitScenario:
    repo: Repo
    root: Path
    first: str  # creates hello.txt
    second: str  # changes line 2 of hello.txt
    third: str  # adds notes.txt, leaves hello.txt alone

    def path(self, name: str) -> Path:
        return self.root / name


@pytest.fixture(autouse=True)
def isolated_git_config(monkeypatch, tmp_path_factory):
    """Keep the host's git configuration out of the tests."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", os.devnull)
    for name in list(os.environ):
        if name.startswith("LINE_LENS_"):
            monkeypatch.delenv(name)


@pytest.fixture
def utc(monkeypatch):
    """Render local times as UTC."""
    monkeypatch.setenv("TZ", "UTC")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


@pytest.fixture
def scenario(tmp_path) -> GitScenario:
    root = (tmp_path / "repo").resolve()
    root.mkdir()
    repo = Repo.init(root)

    (root / "hello.txt").write_text("one\ntwo\nthree\n")
    repo.index.add(["hello.txt"])
    first = make_commit(repo, "Initial commit", JANE, FIRST_TIME)

    (root / "hello.txt").write_text("one\nTWO\nthree\n")
    repo.index.add(["hello.txt"])
    second = make_commit(repo, "Shout the second line\n\nLonger body.", JOHN, SECOND_TIME)

    (root / "notes.txt").write_text("notes\n")
    repo.index.add(["notes.txt"])
    third = make_commit(repo, "Add notes", JANE, SECOND_TIME + 60)

    return GitScenario(repo=repo, root=root, first=first, second=second, third=third)
