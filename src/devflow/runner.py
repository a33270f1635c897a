# runner.py
from __future__ import annotations

import os
import runpy
import shutil
import subprocess
import time
from dataclasses import replace
from fnmatch import fnmatch
from pathlib import Path
from typing import Callable, Dict, List, Optional

from .dsl import ensure_unique_names
from .errors import TOOL_HINTS, StepFailure, WorkflowError
from .git_facts import git
from .model import Step, StepResult, StepStatus, WorkflowRun
from .ui.console import get_console

OUTPUT_TAIL = 4000


# ----------------------------------------------------------------------
# Workflow loading (local file)
# ----------------------------------------------------------------------

def load_workflow(path: str | Path) -> List[Step]:
    """
    Load a checklist from a python file path.

    The file must define either:
      - workflow() -> List[Step]
      - STEPS = [Step, ...]
    """
    wf_path = Path(path).expanduser().resolve()
    if not wf_path.exists():
        raise FileNotFoundError(f"Workflow file not found: {wf_path}")
    if wf_path.suffix != ".py":
        raise ValueError(f"Workflow must be a .py file, got: {wf_path.name}")

    module_name = f"devflow_workflow_{wf_path.stem}"
    globals_dict = runpy.run_path(str(wf_path), run_name=module_name)

    steps = None
    if "workflow" in globals_dict and callable(globals_dict["workflow"]):
        steps = globals_dict["workflow"]()
    elif "STEPS" in globals_dict:
        steps = globals_dict["STEPS"]

    if not isinstance(steps, list) or not all(isinstance(s, Step) for s in steps):
        raise TypeError(
            "Workflow must return/define a List[Step]. "
            "Define workflow() -> List[Step] or STEPS = [Step, ...]."
        )

    return steps


# ----------------------------------------------------------------------
# Git diff based selection
# ----------------------------------------------------------------------

def changed_paths(repo_root: Path, compare_ref: str = "origin/main") -> List[str]:
    """
    Files this branch touches.

    A dirty tree reports its staged, unstaged and untracked files. A clean
    tree reports the diff against merge-base(HEAD, compare_ref), falling back
    to HEAD~1 and then to every tracked file.
    """
    if git.is_dirty(repo_root):
        return git.working_tree_files(repo_root)

    try:
        base = git.merge_base(compare_ref, cwd=repo_root)
    except subprocess.CalledProcessError:
        base = "HEAD~1"

    try:
        return git.changed_files(base, "HEAD", cwd=repo_root)
    except subprocess.CalledProcessError:
        return git.tracked_files(repo_root)


def _matches_any(path: str, patterns: list[str]) -> bool:
    return any(fnmatch(path, p) for p in patterns)


def diff_skip_reason(step: Step, changed: List[str]) -> Optional[str]:
    """None if the step should run for this change set, else why it is skipped."""
    if not step.paths:
        return None
    if any(_matches_any(f, step.paths) for f in changed):
        return None
    return f"no changes matching {step.paths}"


# ----------------------------------------------------------------------
# Execution primitives (one per step kind)
# ----------------------------------------------------------------------

def _step_cwd(step: Step, repo_root: Path) -> Path:
    cwd = (repo_root / (step.cwd or ".")).resolve()
    if not cwd.exists():
        raise WorkflowError(
            kind="cwd_missing",
            step=step.name,
            message=f"working directory not found: {cwd}",
        )
    return cwd


def _run_shell(step: Step, repo_root: Path) -> StepResult:
    cwd = _step_cwd(step, repo_root)

    env = os.environ.copy()
    env.update(step.env or {})

    proc = subprocess.run(
        step.command,
        shell=True,
        cwd=str(cwd),
        env=env,
        text=True,
        errors="replace",
        capture_output=True,
    )

    # only the exit code decides the status; output is informational
    output = "\n".join(part for part in (proc.stdout, proc.stderr) if part)[-OUTPUT_TAIL:]

    if proc.returncode != 0:
        raise StepFailure(
            step=step.name,
            cmd=step.command,
            exit_code=proc.returncode,
            output=output,
        )

    return StepResult(
        step=step.name,
        status=StepStatus.PASSED,
        exit_code=0,
        output=output,
    )


def _run_tool(step: Step, repo_root: Path) -> StepResult:
    tool = step.tool or step.command.split()[0]
    if shutil.which(tool) is None:
        hint = TOOL_HINTS.get(tool, f"Install {tool} or fix PATH.")
        return StepResult(
            step=step.name,
            status=StepStatus.FAILED,
            exit_code=127,
            reason=f"{tool} is not available. {hint}",
        )
    return _run_shell(step, repo_root)


def _run_check(step: Step, repo_root: Path) -> StepResult:
    if step.check is None:
        raise WorkflowError(kind="step_invalid", step=step.name, message="check step has no check function")

    outcome = step.check(repo_root)
    if outcome.skip:
        status = StepStatus.SKIPPED
    elif outcome.ok:
        status = StepStatus.PASSED
    else:
        status = StepStatus.FAILED
    return StepResult(step=step.name, status=status, reason=outcome.message)


Executor = Callable[[Step, Path], StepResult]

EXECUTORS: Dict[str, Executor] = {
    "shell": _run_shell,
    "tool": _run_tool,
    "check": _run_check,
}


def run_step(step: Step, repo_root: Path) -> StepResult:
    """
    Run one step and fold every outcome into a StepResult.

    Executors raise StepFailure for non-zero exits; anything else raised
    (missing cwd, git errors inside a check) also becomes a FAILED result.
    """
    executor = EXECUTORS.get(step.kind)
    if executor is None:
        return StepResult(
            step=step.name,
            status=StepStatus.FAILED,
            reason=f"unknown step kind {step.kind!r} (known: {sorted(EXECUTORS)})",
        )

    start = time.monotonic()
    try:
        reason = step.skip_if(repo_root) if step.skip_if is not None else None
        if reason:
            result = StepResult(step=step.name, status=StepStatus.SKIPPED, reason=reason)
        else:
            result = executor(step, repo_root)
    except StepFailure as e:
        result = StepResult(
            step=step.name,
            status=StepStatus.FAILED,
            exit_code=e.exit_code,
            output=e.output,
            reason=str(e),
        )
    except subprocess.CalledProcessError as e:
        stderr = (e.stderr or "").strip() if isinstance(e.stderr, str) else ""
        result = StepResult(
            step=step.name,
            status=StepStatus.FAILED,
            exit_code=e.returncode,
            output=stderr,
            reason=f"command failed: {' '.join(map(str, e.cmd))}",
        )
    except Exception as e:
        result = StepResult(step=step.name, status=StepStatus.FAILED, reason=str(e))
    result.duration = time.monotonic() - start
    return result


# ----------------------------------------------------------------------
# Public API
# ----------------------------------------------------------------------

def run_checklist(
    steps: List[Step],
    *,
    repo_root: str | Path = ".",
    use_git_diff: bool = False,
    compare_ref: str = "origin/main",
) -> WorkflowRun:
    """
    Run steps strictly in declared order.

    A failing required step halts the run; later steps are never invoked and
    stay PENDING. A failing optional step is recorded and the run goes on.

    Each run works on its own copies of the steps, so an earlier WorkflowRun
    keeps its statuses when the same checklist is run again.
    """
    ensure_unique_names(steps)

    console = get_console()
    repo_root_p = Path(repo_root).resolve()
    run = WorkflowRun(steps=[replace(s, status=StepStatus.PENDING) for s in steps])

    changed: List[str] = []
    if use_git_diff:
        changed = changed_paths(repo_root_p, compare_ref)
        console.print_debug(f"changed files: {changed}")

    for step in run.steps:
        console.print_step(step.name, step.command)

        reason = diff_skip_reason(step, changed) if use_git_diff else None
        if reason:
            result = StepResult(step=step.name, status=StepStatus.SKIPPED, reason=reason)
        else:
            result = run_step(step, repo_root_p)

        step.status = result.status
        run.results[step.name] = result
        console.print_step_result(step, result)

        if result.status is StepStatus.FAILED and step.required:
            run.halted_at = step.name
            break

    return run
