# errors.py
from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class WorkflowError(Exception):
    """
    Structured devflow error with enough context for:
      - clean CLI output
      - JSON reports
      - debugging without full tracebacks
    """
    kind: str
    message: str
    step: str | None = None
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        lines = [f"{self.kind}: {self.message}"]
        if self.step:
            lines.append(f"step={self.step}")
        for k, v in self.details.items():
            lines.append(f"{k}={v}")
        return "\n".join(lines)


@dataclass
class StepFailure(Exception):
    step: str
    cmd: str
    exit_code: int
    output: str = ""

    def __str__(self) -> str:
        return f"step '{self.step}' failed (exit={self.exit_code}): {self.cmd}"


TOOL_HINTS = {
    "git": "Install Git or fix PATH.",
    "gh": "Install the GitHub CLI (https://cli.github.com) and run `gh auth login`.",
    "uv": "Install uv (e.g., curl -LsSf https://astral.sh/uv/install.sh | sh).",
    "pytest": "Install pytest (e.g., uv add --dev pytest).",
    "ruff": "Install ruff (e.g., uv add --dev ruff).",
    "mypy": "Install mypy (e.g., uv add --dev mypy).",
    "python3": "Install Python 3 or fix PATH (python3).",
}
