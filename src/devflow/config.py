# config.py
from __future__ import annotations

import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .checks import conventions, tools
from .errors import WorkflowError
from .model import Step


# Default checklist, in the order the workflow prescribes it
DEFAULT_STEPS: Tuple[str, ...] = (
    "branch",
    "sync",
    "lint",
    "format",
    "typecheck",
    "test",
    "commit-message",
    "clean-tree",
    "pr",
)


@dataclass(frozen=True)
class DevflowConfig:
    """
    Settings read from the [tool.devflow] table of pyproject.toml.

    Every key is optional; an absent table gives the defaults below.
    """
    workflow: Optional[str] = None
    branch_pattern: str = conventions.DEFAULT_BRANCH_PATTERN
    commit_pattern: str = conventions.DEFAULT_COMMIT_PATTERN
    protected_branches: List[str] = field(
        default_factory=lambda: list(conventions.DEFAULT_PROTECTED_BRANCHES)
    )
    base_ref: str = "origin/main"
    src: str = "src"
    pytest_args: Optional[str] = None
    steps: List[str] = field(default_factory=lambda: list(DEFAULT_STEPS))
    optional: List[str] = field(default_factory=lambda: ["pr"])


_STR_KEYS = {"branch_pattern", "commit_pattern", "base_ref", "src"}
_OPT_STR_KEYS = {"workflow", "pytest_args"}
_LIST_KEYS = {"protected_branches", "steps", "optional"}


def _invalid(message: str, **details: Any) -> WorkflowError:
    return WorkflowError(kind="config_invalid", message=message, details=details)


def parse_config(table: Dict[str, Any]) -> DevflowConfig:
    """Validate a raw [tool.devflow] table into a DevflowConfig."""
    known = {f.name for f in fields(DevflowConfig)}
    values: Dict[str, Any] = {}

    for raw_key, value in table.items():
        key = raw_key.replace("-", "_")
        if key not in known:
            raise _invalid(f"unknown key '{raw_key}' in [tool.devflow]", known=sorted(known))

        if key in _STR_KEYS and not isinstance(value, str):
            raise _invalid(f"'{raw_key}' must be a string", got=type(value).__name__)
        if key in _OPT_STR_KEYS and value is not None and not isinstance(value, str):
            raise _invalid(f"'{raw_key}' must be a string", got=type(value).__name__)
        if key in _LIST_KEYS and not (
            isinstance(value, list) and all(isinstance(v, str) for v in value)
        ):
            raise _invalid(f"'{raw_key}' must be a list of strings")

        values[key] = value

    cfg = DevflowConfig(**values)

    unknown_steps = [s for s in cfg.steps if s not in DEFAULT_STEPS]
    if unknown_steps:
        raise _invalid(
            f"unknown default step(s): {unknown_steps}",
            available=list(DEFAULT_STEPS),
        )
    if len(set(cfg.steps)) != len(cfg.steps):
        raise _invalid("'steps' lists a step more than once")

    unknown_optional = [s for s in cfg.optional if s not in DEFAULT_STEPS]
    if unknown_optional:
        raise _invalid(
            f"unknown step(s) in 'optional': {unknown_optional}",
            available=list(DEFAULT_STEPS),
        )

    return cfg


def load_config(project_dir: str | Path = ".") -> DevflowConfig:
    """
    Read [tool.devflow] from <project_dir>/pyproject.toml.

    A missing file or table yields the defaults.
    """
    pyproject = Path(project_dir) / "pyproject.toml"
    if not pyproject.exists():
        return DevflowConfig()

    try:
        with pyproject.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise WorkflowError(
            kind="config_invalid",
            message=f"could not parse {pyproject}",
            details={"error": str(e)},
        ) from e

    table = data.get("tool", {}).get("devflow", {})
    if not isinstance(table, dict):
        raise _invalid("[tool.devflow] must be a table")
    return parse_config(table)


def default_steps(cfg: DevflowConfig) -> List[Step]:
    """Build the prescribed checklist, filtered and ordered by cfg.steps."""
    factories = {
        "branch": lambda: tools.branch_step(cfg.branch_pattern, cfg.protected_branches),
        "sync": tools.uv_sync_step,
        "lint": tools.ruff_check_step,
        "format": tools.ruff_format_step,
        "typecheck": lambda: tools.mypy_step(cfg.src),
        "test": lambda: tools.pytest_step(cfg.pytest_args),
        "commit-message": lambda: tools.commit_message_step(cfg.commit_pattern, cfg.base_ref),
        "clean-tree": tools.clean_tree_step,
        "pr": tools.pr_step,
    }

    steps: List[Step] = []
    for name in cfg.steps:
        step = factories[name]()
        if name in cfg.optional:
            step.required = False
        steps.append(step)
    return steps
