# checks/tools.py
from __future__ import annotations

import shlex
from typing import List, Optional

from ..dsl import check_step, tool_step
from ..model import Step
from . import conventions


# ---------------------------------------------------------------------
# Step factories for the prescribed workflow
#   branch -> sync -> lint -> format -> typecheck -> test
#   -> commit-message -> clean-tree -> pr
# ---------------------------------------------------------------------

def branch_step(pattern: str = conventions.DEFAULT_BRANCH_PATTERN,
                protected: Optional[List[str]] = None) -> Step:
    return check_step(
        "branch",
        conventions.branch_name_check(
            pattern,
            protected if protected is not None else conventions.DEFAULT_PROTECTED_BRANCHES,
        ),
    )


def uv_sync_step() -> Step:
    return tool_step("sync", "uv", "sync", paths=["pyproject.toml", "uv.lock"])


def ruff_check_step() -> Step:
    return tool_step("lint", "ruff", "check .")


def ruff_format_step() -> Step:
    return tool_step("format", "ruff", "format --check .")


def mypy_step(target: str = "src") -> Step:
    return tool_step("typecheck", "mypy", target)


def pytest_step(args: str | None = None) -> Step:
    return tool_step("test", "pytest", args)


def commit_message_step(pattern: str = conventions.DEFAULT_COMMIT_PATTERN,
                        base_ref: str = "origin/main") -> Step:
    return check_step("commit-message", conventions.commit_message_check(pattern, base_ref))


def clean_tree_step() -> Step:
    return check_step("clean-tree", conventions.clean_tree_check())


def git_commit_step(message: str) -> Step:
    """
    `git commit -m <message>`, skipped when nothing is staged.

    Keeps a re-run on an unchanged tree green instead of failing on
    "nothing to commit".
    """
    return tool_step("commit", "git", f"commit -m {shlex.quote(message)}",
                     skip_if=conventions.nothing_to_commit())


def gh_auth_step() -> Step:
    return tool_step("gh-auth", "gh", "auth status")


def pr_step() -> Step:
    """The PR URL printed by gh is the artifact of this step."""
    return tool_step("pr", "gh", "pr view --json url --jq .url")
