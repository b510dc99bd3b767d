"""actionflow serve — Start the HTTP API server."""

from typing import Optional

import typer
from rich.console import Console

console = Console()


def serve(
    host: Optional[str] = typer.Option(None, help="Host to bind to (default: ACTIONFLOW_HOST)"),
    port: Optional[int] = typer.Option(None, help="Port to listen on (default: ACTIONFLOW_PORT)"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
):
    """Start the actionflow API server."""
    import uvicorn

    from actionflow.config import config

    host = host or config.host
    port = port or config.port
    console.print(f"[green]Starting actionflow server on {host}:{port}[/green]")
    uvicorn.run("actionflow.api.main:app", host=host, port=port, reload=reload, log_level=config.log_level.lower())
