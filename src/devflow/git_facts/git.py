# git.py
# Small, focused wrapper around the Git CLI.
# Every git fact devflow needs (branch, cleanliness, commits, diffs) goes
# through here so checks never call subprocess("git ...") directly.

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import List, Optional


def _git(args: list[str], cwd: Optional[str | Path] = None) -> str:
    """
    Execute a git command and return its stdout as a clean string.

    Args:
        args: List of git arguments (e.g. ["status", "--porcelain"])
        cwd: Optional working directory in which to run the git command.

    Returns:
        Stdout from the git command with surrounding whitespace removed.

    Raises:
        subprocess.CalledProcessError: git exited non-zero.
        FileNotFoundError: git is not installed.
    """
    out = subprocess.check_output(
        ["git", *args],
        cwd=str(cwd) if cwd is not None else None,
        text=True,
        stderr=subprocess.PIPE,
    )
    return out.strip()


def repo_root(cwd: Optional[str | Path] = None) -> Path:
    """Return the absolute path to the root of the current Git repository."""
    return Path(_git(["rev-parse", "--show-toplevel"], cwd=cwd))


def current_branch(cwd: Optional[str | Path] = None) -> str:
    """
    Return the checked-out branch name.

    A detached HEAD is reported as the literal string "HEAD".
    """
    return _git(["rev-parse", "--abbrev-ref", "HEAD"], cwd=cwd)


def is_dirty(cwd: Optional[str | Path] = None) -> bool:
    """
    Check whether the working tree has uncommitted changes.

    Modified, staged and untracked files all count. `git status --porcelain`
    prints nothing at all on a clean tree.
    """
    return _git(["status", "--porcelain"], cwd=cwd) != ""


def has_staged_changes(cwd: Optional[str | Path] = None) -> bool:
    """True if the index differs from HEAD (i.e. `git commit` has work to do)."""
    return _git(["diff", "--cached", "--name-only"], cwd=cwd) != ""


def last_commit_subject(cwd: Optional[str | Path] = None) -> str:
    """Return the subject line of the HEAD commit."""
    return _git(["log", "-1", "--format=%s"], cwd=cwd)


def commit_subjects(base: str, head: str = "HEAD", cwd: Optional[str | Path] = None) -> List[str]:
    """Return subjects of the commits reachable from head but not from base, oldest first."""
    out = _git(["log", "--reverse", "--format=%s", f"{base}..{head}"], cwd=cwd)
    if not out:
        return []
    return out.splitlines()


def changed_files(base: str, head: str = "HEAD", cwd: Optional[str | Path] = None) -> List[str]:
    """
    Return a list of files changed between two Git references.

    File paths are returned relative to the repository root.
    """
    out = _git(["diff", "--name-only", f"{base}..{head}"], cwd=cwd)
    if not out:
        return []
    return out.splitlines()


def working_tree_files(cwd: Optional[str | Path] = None) -> List[str]:
    """Staged, unstaged and untracked paths of a dirty working tree, sorted."""
    files = set()
    for args in (
        ["diff", "--name-only"],
        ["diff", "--name-only", "--cached"],
        ["ls-files", "--others", "--exclude-standard"],
    ):
        out = _git(args, cwd=cwd)
        if out:
            files.update(out.splitlines())
    return sorted(files)


def merge_base(with_ref: str = "origin/main", cwd: Optional[str | Path] = None) -> str:
    """
    Return the merge-base (common ancestor) between HEAD and another ref.

    This is the point where the current branch diverged from `with_ref`,
    the natural base for "what did this branch change".
    """
    return _git(["merge-base", "HEAD", with_ref], cwd=cwd)


def get_remote_url(remote: str = "origin", cwd: Optional[str | Path] = None) -> str:
    """Return the URL configured for a git remote."""
    return _git(["remote", "get-url", remote], cwd=cwd)


def tracked_files(cwd: Optional[str | Path] = None) -> List[str]:
    """Every file git tracks, used when there is no base to diff against."""
    out = _git(["ls-files"], cwd=cwd)
    if not out:
        return []
    return out.splitlines()
