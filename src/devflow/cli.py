# cli.py
from __future__ import annotations

import subprocess
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import click

from devflow.config import DevflowConfig, default_steps, load_config
from devflow.errors import WorkflowError
from devflow.git_facts.git import get_remote_url, repo_root
from devflow.model import Step
from devflow.report import report
from devflow.runner import load_workflow, run_checklist
from devflow.templates import CONFIG_FRAGMENTS, PR_BODY, SELF_REVIEW_CHECKLIST, WORKFLOW_FILE
from devflow.ui.console import Console, get_console, set_console

DEFAULT_WORKFLOW_FILE = "devflow_workflow.py"


def find_workflow_files() -> list[Path]:
    """
    Find all workflow files in the current directory.

    Returns:
        List of Path objects for workflow files
    """
    workflow_files = []
    current_dir = Path(".")

    default_workflow = current_dir / DEFAULT_WORKFLOW_FILE
    if default_workflow.exists():
        workflow_files.append(default_workflow)

    for path in current_dir.glob("*_workflow.py"):
        if path != default_workflow:
            workflow_files.append(path)

    return sorted(workflow_files)


def discover_workflow(workflow_arg: str | None, cfg: DevflowConfig) -> Optional[Path]:
    """
    Discover the workflow file from the argument, [tool.devflow] or the cwd.

    Returns:
        Path to workflow file, or None to use the built-in checklist

    Raises:
        SystemExit: If an explicit workflow cannot be found or several are found
    """
    console = get_console()

    explicit = workflow_arg or cfg.workflow
    if explicit:
        workflow_path = Path(explicit)
        if not workflow_path.exists() and workflow_path.suffix != ".py":
            workflow_path = Path(str(workflow_path) + ".py")
        if not workflow_path.exists():
            console.print_error(
                "Workflow file not found",
                f"Could not find workflow file: {explicit}",
                suggestion="Create one with:\n  devflow init\n\nor specify a different path:\n  devflow run --workflow my_workflow.py",
            )
            sys.exit(1)
        return workflow_path

    workflow_files = find_workflow_files()

    if len(workflow_files) > 1:
        file_list = "\n".join(f"  {f}" for f in workflow_files)
        console.print_error(
            "Multiple workflow files found",
            "Found multiple workflow files. Please specify which one to use:",
            details=[file_list],
            suggestion=f"Specify a workflow explicitly:\n  devflow run --workflow {DEFAULT_WORKFLOW_FILE}",
        )
        sys.exit(1)

    if workflow_files:
        return workflow_files[0]
    return None


def resolve_steps(ctx: click.Context, workflow: str | None) -> Tuple[List[Step], str, DevflowConfig]:
    """Load config and the checklist; exits with a structured error on failure."""
    console = get_console()
    try:
        cfg = load_config(".")
    except WorkflowError as e:
        console.print_error("Invalid configuration", e.message, details=[f"{k}: {v}" for k, v in e.details.items()])
        sys.exit(1)

    workflow_path = discover_workflow(workflow, cfg)
    if workflow_path is None:
        return default_steps(cfg), "built-in", cfg

    try:
        steps = load_workflow(workflow_path)
    except Exception as e:
        console.print_error(
            "Failed to load workflow",
            f"Could not load workflow from {workflow_path}",
            details=[str(e)],
        )
        if ctx.obj.get("debug", False):
            import traceback
            traceback.print_exc()
        sys.exit(1)
    return steps, workflow_path.name, cfg


def _resolve_root() -> Path:
    """Top of the enclosing git repository, or the current directory outside one."""
    try:
        return repo_root()
    except (subprocess.CalledProcessError, FileNotFoundError):
        return Path(".").resolve()


def _repo_name() -> str:
    try:
        repo_url = get_remote_url("origin")
        return repo_url.rstrip("/").split("/")[-1].replace(".git", "")
    except (subprocess.CalledProcessError, FileNotFoundError):
        return Path(".").resolve().name


@click.group()
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode (show stack traces and command output)",
)
@click.pass_context
def cli(ctx, debug):
    """devflow: fail-fast developer workflow checker."""
    console = Console(debug=debug)
    set_console(console)
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


@cli.command()
@click.option(
    "--workflow",
    default=None,
    help=f"Workflow file path (defaults to {DEFAULT_WORKFLOW_FILE} if present, else the built-in checklist)",
)
@click.option("--git-diff/--no-git-diff", default=False, help="Skip steps whose paths match no changed file")
@click.option("--compare-ref", default=None, help="Git ref to diff against (defaults to [tool.devflow] base_ref)")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the run as JSON")
@click.option("--dry-run", is_flag=True, default=False, help="Show the checklist without running it")
@click.pass_context
def run(ctx, workflow, git_diff, compare_ref, as_json, dry_run):
    """Run the workflow checklist, stopping at the first required failure."""
    console = get_console()
    steps, source, cfg = resolve_steps(ctx, workflow)

    if dry_run:
        console.print_plan(steps)
        return

    if as_json:
        console.quiet = True

    try:
        console.print_run_started(
            repository=_repo_name(),
            workflow=source,
            step_count=len(steps),
        )

        result = run_checklist(
            steps,
            repo_root=_resolve_root(),
            use_git_diff=git_diff,
            compare_ref=compare_ref or cfg.base_ref,
        )

        code = report(result, console, as_json=as_json)
        if code != 0:
            sys.exit(code)

    except KeyboardInterrupt:
        console.print_info("\nInterrupted by user")
        sys.exit(130)
    except Exception as e:
        console.print_exception(e)
        sys.exit(1)


@cli.command()
@click.option("--workflow", default=None, help="Workflow file path")
@click.pass_context
def plan(ctx, workflow):
    """Show the checklist steps in the order they would run."""
    steps, source, _cfg = resolve_steps(ctx, workflow)
    console = get_console()
    console.print_info(f"Workflow: {source}")
    console.print_plan(steps)


@cli.command()
@click.option("--force", is_flag=True, default=False, help="Overwrite an existing workflow file")
@click.option("--path", "path", default=DEFAULT_WORKFLOW_FILE, show_default=True, help="Where to write the workflow file")
def init(force, path):
    """Write a starter workflow file."""
    console = get_console()
    target = Path(path)
    if target.exists() and not force:
        console.print_error(
            "Workflow file exists",
            f"{target} already exists.",
            suggestion="Use --force to overwrite it.",
        )
        sys.exit(1)
    target.write_text(WORKFLOW_FILE, encoding="utf-8")
    console.print_info(f"Wrote {target}")


@cli.command()
@click.option("--pr", "pr_body", is_flag=True, default=False, help="Print the pull request body template instead")
def checklist(pr_body):
    """Print the self-review checklist template."""
    click.echo(PR_BODY if pr_body else SELF_REVIEW_CHECKLIST, nl=False)


@cli.command()
@click.argument("tools", nargs=-1, type=click.Choice(sorted(CONFIG_FRAGMENTS)))
def config(tools):
    """Print pyproject.toml fragments for ruff, mypy, pytest and devflow."""
    selected = tools or tuple(CONFIG_FRAGMENTS)
    click.echo("\n".join(CONFIG_FRAGMENTS[t] for t in selected), nl=False)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
