"""Helpers shared by the CLI commands."""

import typer
from rich.console import Console
from rich.markup import escape

from ..config import Config
from ..db import validate_connection
from ..pipeline import PipelineOrchestrator

console = Console()


def open_orchestrator() -> PipelineOrchestrator:
    """Load the configuration, check the database and wire the pipelines.

    Exits with status 1 when the configuration is missing or invalid, or the
    database cannot be reached.
    """
    config = Config()
    try:
        config.config
    except FileNotFoundError:
        console.print(f"[red]Config not found: {config.config_path}[/red]")
        console.print("Run 'feedcurator init' first.")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    orchestrator = PipelineOrchestrator(config)

    console.print("[dim]Checking database connection...[/dim]")
    if not validate_connection(orchestrator.database):
        console.print("[red]❌ Database connection failed![/red]")
        console.print("Please check your database configuration and ensure Postgres is running.")
        orchestrator.close()
        raise typer.Exit(1)

    return orchestrator
