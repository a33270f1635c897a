# checks/conventions.py
from __future__ import annotations

import re
import subprocess
from pathlib import Path
from typing import Iterable, List, Optional

from ..git_facts import git
from ..model import CheckFn, CheckOutcome, SkipFn


DEFAULT_BRANCH_PATTERN = r"^(feat|fix|docs|refactor|test|chore|perf|ci)/[a-z0-9._-]+$"
DEFAULT_COMMIT_PATTERN = (
    r"^(feat|fix|docs|style|refactor|perf|test|build|ci|chore|revert)"
    r"(\([\w.-]+\))?!?: .+"
)
DEFAULT_PROTECTED_BRANCHES = ("main", "master")
MAX_SUBJECT_LENGTH = 72


# ---------------------------------------------------------------------
# Pure validators (no git)
# ---------------------------------------------------------------------

def validate_branch_name(
    branch: str,
    pattern: str = DEFAULT_BRANCH_PATTERN,
    protected: Iterable[str] = DEFAULT_PROTECTED_BRANCHES,
) -> Optional[str]:
    """Return a problem description, or None if the branch name is acceptable."""
    if branch == "HEAD":
        return "HEAD is detached; check out a working branch"
    if branch in set(protected):
        return f"working directly on protected branch '{branch}'; create a feature branch"
    if not re.match(pattern, branch):
        return f"branch '{branch}' does not match {pattern}"
    return None


def validate_commit_subject(
    subject: str,
    pattern: str = DEFAULT_COMMIT_PATTERN,
    max_length: int = MAX_SUBJECT_LENGTH,
) -> Optional[str]:
    """Return a problem description, or None if the commit subject follows the convention."""
    if not subject.strip():
        return "empty commit subject"
    if len(subject) > max_length:
        return f"subject is {len(subject)} chars (max {max_length}): {subject!r}"
    if not re.match(pattern, subject):
        return f"subject does not follow the commit convention: {subject!r}"
    return None


# ---------------------------------------------------------------------
# Check functions (bound to a repo root by the runner)
# ---------------------------------------------------------------------

def branch_name_check(
    pattern: str = DEFAULT_BRANCH_PATTERN,
    protected: Iterable[str] = DEFAULT_PROTECTED_BRANCHES,
) -> CheckFn:
    protected = tuple(protected)

    def check(repo_root: Path) -> CheckOutcome:
        branch = git.current_branch(repo_root)
        problem = validate_branch_name(branch, pattern, protected)
        if problem:
            return CheckOutcome.failed(problem)
        return CheckOutcome.passed(f"on branch {branch}")

    check.__doc__ = f"branch name matches {pattern}"
    return check


def commit_message_check(
    pattern: str = DEFAULT_COMMIT_PATTERN,
    base_ref: str = "origin/main",
    max_length: int = MAX_SUBJECT_LENGTH,
) -> CheckFn:
    """
    Validate the subjects of the commits on this branch.

    Commits are those in merge-base(HEAD, base_ref)..HEAD. If base_ref cannot
    be resolved (no remote yet), only the HEAD commit is checked. A branch with
    no commits of its own is skipped.
    """

    def check(repo_root: Path) -> CheckOutcome:
        try:
            base = git.merge_base(base_ref, cwd=repo_root)
            subjects = git.commit_subjects(base, cwd=repo_root)
        except subprocess.CalledProcessError:
            subjects = [git.last_commit_subject(repo_root)]

        if not subjects:
            return CheckOutcome.skipped(f"no commits ahead of {base_ref}")

        problems: List[str] = []
        for subject in subjects:
            problem = validate_commit_subject(subject, pattern, max_length)
            if problem:
                problems.append(problem)

        if problems:
            return CheckOutcome.failed("\n".join(problems))
        return CheckOutcome.passed(f"{len(subjects)} commit(s) follow the convention")

    check.__doc__ = "commit subjects follow the commit convention"
    return check


def clean_tree_check() -> CheckFn:
    def check(repo_root: Path) -> CheckOutcome:
        files = git.working_tree_files(repo_root)
        if files:
            shown = ", ".join(files[:10])
            more = f" (+{len(files) - 10} more)" if len(files) > 10 else ""
            return CheckOutcome.failed(f"uncommitted changes: {shown}{more}")
        return CheckOutcome.passed("working tree clean")

    check.__doc__ = "all changes are committed"
    return check


# ---------------------------------------------------------------------
# Skip predicates
# ---------------------------------------------------------------------

def nothing_to_commit() -> SkipFn:
    """Skip `git commit` when the index matches HEAD."""

    def skip(repo_root: Path) -> Optional[str]:
        if git.has_staged_changes(repo_root):
            return None
        return "nothing staged to commit"

    return skip
