from .dsl import sh, tool_step, check_step, optional, checklist
from .runner import run_checklist, load_workflow
from .model import Step, StepStatus, StepResult, WorkflowRun, CheckOutcome

__all__ = [
    "sh", "tool_step", "check_step", "optional", "checklist",
    "run_checklist", "load_workflow",
    "Step", "StepStatus", "StepResult", "WorkflowRun", "CheckOutcome",
]
