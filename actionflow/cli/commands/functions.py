"""actionflow functions — List registered functions."""

from typing import List

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from actionflow.cli.commands.run import build_registry

console = Console()


def functions_list(
    module: List[str] = typer.Option([], "--module", "-m", help="Module to import for @function registrations (repeatable)"),
):
    """List every registered function with its parameters.

    Example:
        actionflow functions -m myapp.functions
    """
    definitions = build_registry(module).list_functions()

    if not definitions:
        console.print("[yellow]No functions registered.[/yellow]")
        return

    table = Table(
        box=box.ROUNDED,
        header_style="bold dim",
        show_lines=False,
        title=f"[bold]{len(definitions)} Registered Functions[/bold]",
    )
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Description")
    table.add_column("Parameters", style="dim")
    table.add_column("Confirm?", width=9)
    table.add_column("Active?", width=8)

    for definition in sorted(definitions, key=lambda d: d.name):
        params = ", ".join(
            f"{name}{'' if spec.required else '?'}: {spec.type}"
            for name, spec in definition.parameters.items()
        )
        table.add_row(
            definition.name,
            f"[dim]{definition.description}[/dim]",
            params,
            "[yellow]yes[/yellow]" if definition.needs_confirmation else "[dim]no[/dim]",
            "[green]yes[/green]" if definition.is_active else "[red]no[/red]",
        )

    console.print()
    console.print(table)
    console.print()
    console.print("[dim]Add custom functions with the [cyan]@function[/cyan] decorator and load them with --module.[/dim]")
