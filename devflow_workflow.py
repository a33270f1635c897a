# devflow_workflow.py
# Checklist devflow runs on itself: conventions, lint, types, tests, then PR.
from __future__ import annotations

from devflow import checklist, optional, tool_step
from devflow.checks.tools import (
    branch_step,
    clean_tree_step,
    commit_message_step,
    pr_step,
)


def workflow():
    return checklist(
        branch_step(),
        tool_step("sync", "uv", "sync", paths=["pyproject.toml", "uv.lock"]),
        tool_step("lint", "ruff", "check src tests"),
        tool_step("format", "ruff", "format --check src tests"),
        tool_step("typecheck", "mypy", "src/devflow", paths=["src/**", "pyproject.toml"]),
        tool_step("test", "pytest", "-q", paths=["src/**", "tests/**", "pyproject.toml"]),
        commit_message_step(),
        clean_tree_step(),
        optional(pr_step()),
    )
