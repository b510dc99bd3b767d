"""actionflow run — Execute a workflow JSON file from the command line."""

import asyncio
import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from pydantic import ValidationError
from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from actionflow.types import (
    ExecutionFailure, ExecutionSuccess, ExecutionSuspended, FailurePolicy, Workflow,
)

console = Console()


def build_registry(modules: Optional[List[str]] = None):
    """Registry from builtins (per config) plus configured and CLI-supplied modules."""
    from actionflow.config import config
    from actionflow.functions.registry import FunctionRegistry

    return FunctionRegistry.from_registered(
        include_builtins=config.include_builtins,
        modules=[*config.function_modules, *(modules or [])],
    )


def load_workflow(path: Path) -> Workflow:
    """Read and validate a workflow file. Exits with code 1 on any problem."""
    try:
        payload = json.loads(path.read_text())
    except (OSError, ValueError) as exc:
        console.print(f"[red]Cannot read workflow:[/red] {exc}")
        raise typer.Exit(1)
    try:
        return Workflow.model_validate(payload)
    except ValidationError as exc:
        console.print(f"[red]Invalid workflow format:[/red] {exc}")
        raise typer.Exit(1)


def _preview(value, limit: int = 80) -> str:
    text = json.dumps(value, default=str)
    return text if len(text) <= limit else text[: limit - 1] + "…"


def _print_response(response, run) -> None:
    color = {"completed": "green", "failed": "red", "awaiting_confirmation": "yellow"}.get(
        run.state.value, "white"
    )
    summary = (
        f"[bold]Run:[/bold] [dim]{run.id}[/dim]\n"
        f"[bold]Policy:[/bold] {run.policy.value}\n"
        f"[bold]State:[/bold] [{color}]{run.state.value.upper()}[/{color}]  "
        f"[dim]{run.action_count} action(s) in {run.duration_ms}ms[/dim]"
    )
    console.print()
    console.print(Panel(summary, title="[bold blue]Workflow Execution Summary[/bold blue]", border_style="blue"))

    results = response.results if not isinstance(response, ExecutionFailure) else []
    if isinstance(response, ExecutionFailure):
        errors = response.step_errors or []
    elif isinstance(response, ExecutionSuccess):
        errors = response.errors or []
    else:
        errors = []

    if results:
        table = Table(box=box.ROUNDED, header_style="bold dim", title="[bold]Results[/bold]")
        table.add_column("Action", style="cyan")
        table.add_column("Result")
        for r in results:
            table.add_row(r.action_id, f"[dim]{_preview(r.result)}[/dim]")
        console.print(table)

    if errors:
        table = Table(box=box.ROUNDED, header_style="bold dim", title="[bold red]Errors[/bold red]")
        table.add_column("Action", style="cyan")
        table.add_column("Error", style="red")
        for e in errors:
            table.add_row(e.action_id, e.error)
            if e.details:
                table.add_row("", f"[dim]{e.details}[/dim]")
        console.print(table)

    if isinstance(response, ExecutionSuspended):
        pending = response.pending
        console.print(Panel(
            f"[bold]{pending.tool}[/bold] (action [cyan]{pending.action_id}[/cyan]) "
            f"requires confirmation.\n[dim]Arguments: {_preview(pending.arguments, 200)}[/dim]\n"
            "Re-run with [cyan]--confirm[/cyan] to proceed.",
            title="[bold yellow]Confirmation Required[/bold yellow]",
            border_style="yellow",
        ))
    elif isinstance(response, ExecutionFailure):
        console.print(f"[red]{response.error}:[/red] {response.details}")


async def _execute(workflow: Workflow, modules, policy, debug):
    from actionflow.config import config
    from actionflow.workflows import WorkflowExecutor

    executor = WorkflowExecutor(build_registry(modules), config=config)
    return await executor.execute_with_run(workflow, policy=policy, debug=debug)


def run_workflow(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Workflow JSON file"),
    module: List[str] = typer.Option([], "--module", "-m", help="Module to import for @function registrations (repeatable)"),
    policy: Optional[FailurePolicy] = typer.Option(None, "--policy", help="Failure policy: collect or fail_fast"),
    debug: bool = typer.Option(False, "--debug", help="Include tracebacks in step errors and log parameters"),
    confirm: bool = typer.Option(False, "--confirm", help="Mark every action as confirmed"),
    as_json: bool = typer.Option(False, "--json", help="Print the response envelope as JSON"),
):
    """Execute a workflow and print its results.

    Exit codes: 0 completed, 1 failed or invalid, 2 awaiting confirmation.

    Example:
        actionflow run workflow.json
        actionflow run workflow.json -m myapp.functions --policy fail_fast
    """
    if debug:
        logging.basicConfig(level=logging.INFO, handlers=[RichHandler(show_path=False)], force=True)

    workflow = load_workflow(path)
    if confirm:
        workflow = workflow.model_copy(update={
            "actions": [a.model_copy(update={"confirmed": True}) for a in workflow.actions],
        })

    try:
        response, run = asyncio.run(_execute(workflow, module, policy, debug))
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted.[/yellow]")
        raise typer.Exit(1)
    except Exception as exc:
        console.print(f"\n[red]Error:[/red] {exc}")
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps(response.to_dict(), indent=2, default=str))
    else:
        _print_response(response, run)

    if isinstance(response, ExecutionSuspended):
        raise typer.Exit(2)
    if isinstance(response, ExecutionFailure):
        raise typer.Exit(1)
