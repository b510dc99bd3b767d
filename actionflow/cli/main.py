"""actionflow CLI — Typer application."""

import typer
from rich.console import Console

from actionflow.version import __version__

app = typer.Typer(
    name="actionflow",
    help="actionflow — run declarative workflows against registered functions.",
    no_args_is_help=True,
    invoke_without_command=True,
)
console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", "-v", is_eager=True, help="Show version"),
):
    """actionflow CLI."""
    if version:
        console.print(f"actionflow v{__version__}")
        raise typer.Exit()
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


from actionflow.cli.commands import functions, run, serve, verify  # noqa: E402

app.command(name="run", help="Execute a workflow JSON file")(run.run_workflow)
app.command(name="verify", help="Statically check a workflow JSON file")(verify.verify_workflow)
app.command(name="functions", help="List registered functions")(functions.functions_list)
app.command(name="serve", help="Start the HTTP API server")(serve.serve)


if __name__ == "__main__":
    app()
