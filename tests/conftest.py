from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

from devflow.ui import console as console_mod


requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


def git(cwd: Path, *args: str) -> str:
    proc = subprocess.run(
        ["git", *args],
        cwd=cwd,
        check=True,
        capture_output=True,
        text=True,
    )
    return proc.stdout.strip()


def commit_file(repo: Path, name: str, content: str, message: str) -> None:
    (repo / name).write_text(content)
    git(repo, "add", name)
    git(repo, "commit", "-q", "-m", message)


@pytest.fixture(autouse=True)
def fresh_console():
    """Each test starts from a default Console."""
    console_mod.set_console(console_mod.Console())
    yield
    console_mod.set_console(console_mod.Console())


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """A repository with one commit on main and a feature branch checked out."""
    repo = tmp_path / "repo"
    repo.mkdir()
    git(repo, "init", "-q")
    git(repo, "symbolic-ref", "HEAD", "refs/heads/main")
    git(repo, "config", "user.email", "dev@example.com")
    git(repo, "config", "user.name", "Dev")
    git(repo, "config", "commit.gpgsign", "false")
    commit_file(repo, "README.md", "hello\n", "chore: initial commit")
    git(repo, "checkout", "-q", "-b", "feat/widget")
    return repo
