# report.py
from __future__ import annotations

import json

from .model import WorkflowRun
from .ui.console import Console


def render_json(run: WorkflowRun) -> str:
    return json.dumps(run.to_dict(), indent=2)


def report(run: WorkflowRun, console: Console, *, as_json: bool = False) -> int:
    """Print the run summary and return the process exit code (0 green, 1 otherwise)."""
    if as_json:
        console.print_info(render_json(run))
    else:
        console.print_results(run)
    return run.exit_code
