# src/devflow/dsl.py
from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from .model import CheckFn, SkipFn, Step


# ---------------------------------------------------------------------
# Step helpers
# ---------------------------------------------------------------------

def sh(
    name: str,
    cmd: str,
    *,
    required: bool = True,
    cwd: str | None = None,
    env: Optional[Dict[str, str]] = None,
    skip_if: Optional[SkipFn] = None,
    paths: Optional[List[str]] = None,
) -> Step:
    """Create a shell step."""
    return Step(
        name=name,
        command=cmd,
        required=required,
        cwd=cwd,
        env=dict(env or {}),
        skip_if=skip_if,
        paths=paths,
    )


def tool_step(
    name: str,
    tool: str,
    args: str | None = None,
    *,
    required: bool = True,
    cwd: str | None = None,
    env: Optional[Dict[str, str]] = None,
    skip_if: Optional[SkipFn] = None,
    paths: Optional[List[str]] = None,
) -> Step:
    """
    Create a step that runs an external tool.

    The runner checks that `tool` is on PATH before invoking it, so a
    missing tool fails with an install hint instead of a bare 127.
    """
    cmd = tool if not args else f"{tool} {args}"
    step = sh(name, cmd, required=required, cwd=cwd, env=env, skip_if=skip_if, paths=paths)
    step.kind = "tool"
    step.tool = tool
    return step


def check_step(
    name: str,
    check: CheckFn,
    *,
    description: str = "",
    required: bool = True,
    paths: Optional[List[str]] = None,
) -> Step:
    """Create a step backed by a Python check function instead of a command."""
    return Step(
        name=name,
        command=description or getattr(check, "__doc__", None) or name,
        required=required,
        kind="check",
        check=check,
        paths=paths,
    )


def optional(step: Step) -> Step:
    """Mark a step as not required: its failure is reported but does not halt the run."""
    step.required = False
    return step


# ---------------------------------------------------------------------
# Checklist helper (single-file story)
# ---------------------------------------------------------------------

def checklist(*steps: Step) -> List[Step]:
    """
    Checklist definition helper.

    Users can write, in devflow_workflow.py:

        from devflow import checklist, sh, tool_step

        def workflow():
            return checklist(
                tool_step("lint", "ruff", "check ."),
                tool_step("test", "pytest"),
            )

    Or use STEPS directly:
        STEPS = checklist(sh(...), sh(...))
    """
    ensure_unique_names(steps)
    return list(steps)


def ensure_unique_names(steps: Iterable[Step]) -> None:
    """Raise ValueError if two steps share a name (results are keyed by name)."""
    names = [s.name for s in steps]
    if len(set(names)) != len(names):
        dupes = sorted({n for n in names if names.count(n) > 1})
        raise ValueError(f"Duplicate step names found: {dupes}")

