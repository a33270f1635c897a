# templates.py
# Static text devflow emits verbatim: the self-review checklist, the PR body,
# a starter workflow file and the tool configuration fragments.
from __future__ import annotations

from typing import Dict


SELF_REVIEW_CHECKLIST = """\
## Self-review checklist

### Before committing
- [ ] Working on a feature branch (`feat/...`, `fix/...`, ...), not `main`
- [ ] `uv sync` run after any dependency change
- [ ] `ruff check .` passes
- [ ] `ruff format --check .` passes
- [ ] `mypy` passes with no new ignores
- [ ] `pytest` passes; new behaviour has tests

### Commit
- [ ] Subject follows `type(scope): summary` (feat, fix, docs, refactor, test, chore, ...)
- [ ] Subject is 72 characters or fewer
- [ ] No unrelated changes, debug prints or commented-out code

### Pull request
- [ ] Branch pushed (`git push -u origin HEAD`)
- [ ] PR opened with `gh pr create` and the template filled in
- [ ] CI is green on the PR
- [ ] Review comments answered or resolved
"""


PR_BODY = """\
## Summary

<!-- What does this change do and why? -->

## Changes

-

## Test plan

<!-- Commands run and what you observed. -->

- [ ] `ruff check .`
- [ ] `mypy`
- [ ] `pytest`
"""


WORKFLOW_FILE = '''\
# devflow_workflow.py
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
        tool_step("sync", "uv", "sync"),
        tool_step("lint", "ruff", "check ."),
        tool_step("format", "ruff", "format --check ."),
        tool_step("typecheck", "mypy", "src"),
        tool_step("test", "pytest", "-q", paths=["src/**", "tests/**", "pyproject.toml"]),
        commit_message_step(),
        clean_tree_step(),
        optional(pr_step()),
    )
'''


RUFF_CONFIG = """\
[tool.ruff]
line-length = 100
target-version = "py311"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]
"""

MYPY_CONFIG = """\
[tool.mypy]
python_version = "3.11"
strict = true
warn_unused_ignores = true
"""

PYTEST_CONFIG = """\
[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-q"
"""

DEVFLOW_CONFIG = """\
[tool.devflow]
base_ref = "origin/main"
src = "src"
optional = ["pr"]
"""

CONFIG_FRAGMENTS: Dict[str, str] = {
    "ruff": RUFF_CONFIG,
    "mypy": MYPY_CONFIG,
    "pytest": PYTEST_CONFIG,
    "devflow": DEVFLOW_CONFIG,
}
