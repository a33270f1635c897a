# model.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Optional


class StepStatus(str, Enum):
    """Lifecycle of a checklist step inside one workflow run."""
    PENDING = "pending"
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class CheckOutcome:
    """What a Python check function reports back to the runner."""
    ok: bool
    message: str = ""
    skip: bool = False

    @classmethod
    def passed(cls, message: str = "") -> CheckOutcome:
        return cls(ok=True, message=message)

    @classmethod
    def failed(cls, message: str) -> CheckOutcome:
        return cls(ok=False, message=message)

    @classmethod
    def skipped(cls, message: str) -> CheckOutcome:
        return cls(ok=True, message=message, skip=True)


CheckFn = Callable[[Path], CheckOutcome]
SkipFn = Callable[[Path], Optional[str]]


@dataclass
class Step:
    """
    One discrete workflow action with a pass/fail outcome.

    `kind` selects the executor:
      - "shell": run `command` through the shell
      - "tool":  like shell, but `tool` must be on PATH first
      - "check": call `check(repo_root)`; `command` is only a description
    """
    name: str
    command: str
    required: bool = True
    status: StepStatus = StepStatus.PENDING

    kind: str = "shell"
    cwd: str | None = None
    env: Dict[str, str] = field(default_factory=dict)
    tool: str | None = None
    check: Optional[CheckFn] = None

    # returns a reason string when the step should not run at all
    skip_if: Optional[SkipFn] = None

    # Git diff based selection
    paths: Optional[List[str]] = None          # e.g. ["src/**", "tests/**"]


@dataclass
class StepResult:
    """Uniform result contract for every step kind."""
    step: str
    status: StepStatus
    exit_code: int | None = None
    output: str = ""
    reason: str = ""
    duration: float = 0.0

    def to_dict(self) -> dict:
        return {
            "step": self.step,
            "status": self.status.value,
            "exit_code": self.exit_code,
            "output": self.output,
            "reason": self.reason,
            "duration": round(self.duration, 3),
        }


@dataclass
class WorkflowRun:
    """
    One traversal of the checklist.

    The run is green iff every required step ended PASSED or SKIPPED.
    Steps that never ran because of a halt stay PENDING.
    """
    steps: List[Step]
    results: Dict[str, StepResult] = field(default_factory=dict)
    halted_at: str | None = None

    @property
    def green(self) -> bool:
        return all(
            s.status in (StepStatus.PASSED, StepStatus.SKIPPED)
            for s in self.steps
            if s.required
        )

    @property
    def exit_code(self) -> int:
        return 0 if self.green else 1

    def statuses(self) -> Dict[str, StepStatus]:
        return {s.name: s.status for s in self.steps}

    def first_failure(self) -> Optional[StepResult]:
        for s in self.steps:
            if s.status is StepStatus.FAILED and s.required:
                return self.results.get(s.name)
        return None

    def to_dict(self) -> dict:
        return {
            "status": "passed" if self.green else "failed",
            "halted_at": self.halted_at,
            "steps": [
                {
                    "name": s.name,
                    "command": s.command,
                    "required": s.required,
                    "status": s.status.value,
                    "result": self.results[s.name].to_dict() if s.name in self.results else None,
                }
                for s in self.steps
            ],
        }
