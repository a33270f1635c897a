"""Tests for the checklist data model."""

import pytest

from devflow import checklist, optional, sh
from devflow.dsl import ensure_unique_names
from devflow.model import StepResult, StepStatus, WorkflowRun


class TestWorkflowRunStatus:
    def test_green_when_all_required_passed(self):
        steps = [sh("a", "true"), sh("b", "true")]
        for s in steps:
            s.status = StepStatus.PASSED
        run = WorkflowRun(steps=steps)
        assert run.green
        assert run.exit_code == 0

    def test_skipped_required_step_keeps_run_green(self):
        a, b = sh("a", "true"), sh("b", "true")
        a.status = StepStatus.PASSED
        b.status = StepStatus.SKIPPED
        assert WorkflowRun(steps=[a, b]).green

    def test_pending_required_step_is_not_green(self):
        a, b = sh("a", "true"), sh("b", "true")
        a.status = StepStatus.PASSED
        run = WorkflowRun(steps=[a, b])
        assert not run.green
        assert run.exit_code == 1

    def test_failed_optional_step_keeps_run_green(self):
        a = sh("a", "true")
        b = optional(sh("b", "false"))
        a.status = StepStatus.PASSED
        b.status = StepStatus.FAILED
        assert WorkflowRun(steps=[a, b]).green

    def test_first_failure_ignores_optional_steps(self):
        a = optional(sh("a", "false"))
        b = sh("b", "false")
        a.status = StepStatus.FAILED
        b.status = StepStatus.FAILED
        run = WorkflowRun(steps=[a, b])
        run.results["b"] = StepResult(step="b", status=StepStatus.FAILED, exit_code=1)
        assert run.first_failure().step == "b"

    def test_to_dict_lists_steps_in_order(self):
        steps = checklist(sh("lint", "ruff check ."), sh("test", "pytest"))
        data = WorkflowRun(steps=steps).to_dict()
        assert [s["name"] for s in data["steps"]] == ["lint", "test"]
        assert data["status"] == "failed"
        assert data["steps"][0]["status"] == "pending"
        assert data["steps"][0]["result"] is None


class TestDsl:
    def test_checklist_rejects_duplicate_names(self):
        with pytest.raises(ValueError, match="Duplicate step names"):
            checklist(sh("lint", "a"), sh("lint", "b"))

    def test_new_steps_are_pending_and_required(self):
        step = sh("lint", "ruff check .")
        assert step.status is StepStatus.PENDING
        assert step.required
        assert step.kind == "shell"

    def test_ensure_unique_names_lists_every_duplicate(self):
        steps = [sh("test", "a"), sh("lint", "b"), sh("test", "c"), sh("lint", "d")]
        with pytest.raises(ValueError, match=r"\['lint', 'test'\]"):
            ensure_unique_names(steps)
        ensure_unique_names([sh("lint", "a"), sh("test", "b")])
