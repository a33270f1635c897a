"""Console output formatting utilities for devflow."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from devflow.model import Step, StepResult, WorkflowRun


STATUS_LABELS = {
    "pending": "NOT RUN",
    "passed": "PASSED",
    "failed": "FAILED",
    "skipped": "SKIPPED",
}


class Console:
    """Centralized console output formatting."""

    def __init__(self, debug: bool = False, quiet: bool = False):
        """
        Initialize console formatter.

        Args:
            debug: If True, show detailed output including stack traces
            quiet: If True, suppress per-step progress (used for --json)
        """
        self.debug = debug
        self.quiet = quiet

    def print_header(self, title: str) -> None:
        """Print a section header."""
        print(f"\n{title}")
        print("-" * len(title))

    def print_run_started(
        self,
        repository: str,
        workflow: str,
        step_count: int,
    ) -> None:
        """Print run start information."""
        if self.quiet:
            return
        print("\nRUN STARTED")
        print(f"Repository: {repository}")
        print(f"Workflow: {workflow}")
        print(f"Steps: {step_count}")
        print()

    def print_step(self, name: str, command: str) -> None:
        """Print step start message."""
        if self.quiet:
            return
        print(f"STEP: {name} ({command})")

    def print_step_result(self, step: Step, result: StepResult) -> None:
        """Print the outcome of one step, with output on failure."""
        if self.quiet:
            return
        status = result.status.value
        if status == "passed":
            print("STATUS: success")
            if self.debug and result.output:
                self._print_output(result.output)
        elif status == "skipped":
            print(f"STATUS: skipped ({result.reason})")
        else:
            self.print_failure(
                step.name,
                result.reason,
                exit_code=result.exit_code,
                output=result.output,
                required=step.required,
            )

    def print_failure(
        self,
        name: str,
        reason: str,
        exit_code: Optional[int] = None,
        output: str = "",
        required: bool = True,
    ) -> None:
        """
        Print failure message.

        Args:
            name: Step name
            reason: Failure reason/error message
            exit_code: Optional exit code
            output: Captured stdout/stderr of the failing command
            required: If False, the failure is reported as non-blocking
        """
        prefix = "STEP FAILED" if required else "STEP FAILED (optional)"
        print(f"{prefix}: {name}")
        if exit_code is not None:
            print(f"Exit code: {exit_code}")
        if reason:
            print(f"Reason: {reason}")
        if output:
            self._print_output(output)

    def _print_output(self, output: str) -> None:
        print("Output:")
        for line in output.rstrip().splitlines():
            print(f"  | {line}")

    def print_plan(self, steps: List[Step]) -> None:
        """Print the checklist without running it."""
        self.print_header("PLAN")
        for idx, step in enumerate(steps, start=1):
            flag = "required" if step.required else "optional"
            print(f"  {idx}. {step.name} [{flag}] {step.command}")
            if step.paths:
                print(f"     paths: {', '.join(step.paths)}")

    def print_results(self, run: WorkflowRun) -> None:
        """Print final results summary."""
        print("\n" + "=" * 40)
        print("RESULTS")
        print("=" * 40)
        for step in run.steps:
            label = STATUS_LABELS.get(step.status.value, step.status.value.upper())
            suffix = "" if step.required else " (optional)"
            print(f"  {step.name}: {label}{suffix}")
        print("-" * 40)
        if run.green:
            print("RUN: PASSED")
        else:
            failure = run.first_failure()
            where = f" at {failure.step}" if failure else ""
            print(f"RUN: FAILED{where}")

    def print_error(
        self,
        title: str,
        message: str,
        details: Optional[list[str]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        """
        Print structured error message.

        Args:
            title: Error title
            message: Main error message
            details: Optional list of detail lines
            suggestion: Optional suggestion for user
        """
        print(f"\nERROR: {title}", file=sys.stderr)
        print(f"{message}", file=sys.stderr)
        if details:
            for detail in details:
                print(f"  {detail}", file=sys.stderr)
        if suggestion:
            print(f"\n{suggestion}", file=sys.stderr)

    def print_exception(self, exc: Exception) -> None:
        """Print exception, with full traceback only in debug mode."""
        if self.debug:
            import traceback
            traceback.print_exc()
        else:
            print(f"Error: {exc}", file=sys.stderr)

    def print_info(self, message: str) -> None:
        """Print informational message."""
        print(message)

    def print_debug(self, message: str) -> None:
        """Print debug message (only if debug mode enabled)."""
        if self.debug:
            print(f"[DEBUG] {message}", file=sys.stderr)


# Global console instance (will be initialized by CLI)
_console: Optional[Console] = None


def get_console() -> Console:
    """Get the global console instance."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def set_console(console: Console) -> None:
    """Set the global console instance."""
    global _console
    _console = console
