"""Serve the JSON API."""

from typing import Optional

import typer
from rich.console import Console

from ..web import BackgroundTasks, create_app
from .common import open_orchestrator

console = Console()


def serve_command(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (default: server.host)"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port (default: server.port)"),
    debug: bool = typer.Option(False, "--debug", help="Enable the Flask debugger"),
) -> None:
    """Run the HTTP API with the development server."""
    orchestrator = open_orchestrator()
    server = orchestrator.config.config.server
    tasks = BackgroundTasks()
    app = create_app(orchestrator, tasks=tasks)

    host = host or server.host
    port = port or server.port
    if not orchestrator.config.get_cron_secret():
        console.print("[yellow]Warning: no cron secret set, trigger endpoints are open.[/yellow]")

    console.print(f"Serving on [bold]http://{host}:{port}[/bold]")
    try:
        app.run(host=host, port=port, debug=debug, use_reloader=False)
    finally:
        tasks.shutdown(wait=False)
        orchestrator.close()
