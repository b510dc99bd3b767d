"""actionflow verify — Statically check a workflow file without executing it."""

from pathlib import Path
from typing import List

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from actionflow.cli.commands.run import build_registry, load_workflow

console = Console()


def verify_workflow(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Workflow JSON file"),
    module: List[str] = typer.Option([], "--module", "-m", help="Module to import for @function registrations (repeatable)"),
):
    """Check tool names, required parameters, literal types and reference order.

    Exits with code 1 if any hard error is found; warnings alone pass.

    Example:
        actionflow verify workflow.json
    """
    from actionflow.config import config
    from actionflow.workflows import WorkflowValidator

    workflow = load_workflow(path)
    errors = WorkflowValidator().validate(
        workflow, registry=build_registry(module), tool_prefix=config.tool_prefix,
    )
    hard_errors = [e for e in errors if not e.startswith("WARNING:")]

    if not errors:
        console.print(f"[bold green]✓ Workflow is valid[/bold green] [dim]({len(workflow.actions)} action(s))[/dim]")
        return

    table = Table(box=box.ROUNDED, header_style="bold dim", show_lines=False)
    table.add_column("#", width=4, justify="right")
    table.add_column("Level", width=8)
    table.add_column("Message")
    for i, message in enumerate(errors, 1):
        if message.startswith("WARNING:"):
            table.add_row(str(i), "[yellow]warn[/yellow]", message[len("WARNING:"):].strip())
        else:
            table.add_row(str(i), "[red]error[/red]", message)
    console.print(table)

    if hard_errors:
        console.print(f"[bold red]✗ {len(hard_errors)} error(s)[/bold red]")
        raise typer.Exit(1)
    console.print("[bold green]✓ Workflow is valid[/bold green] [dim](with warnings)[/dim]")
