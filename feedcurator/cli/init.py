"""Init command implementation."""

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.panel import Panel

from ..config import ConfigModel, default_config_path, load_feed_seeds, save_config
from ..db import Database, FeedRegistry, init_database, validate_connection

console = Console()

DEFAULT_BLACKLIST: List[str] = [
    "betting",
    "casino",
    "highlights",
    "recap",
    "live blog",
]


def seed_blacklist(registry: FeedRegistry, keywords: List[str]) -> int:
    """Add keywords that are not yet blacklisted. Returns how many were added."""
    existing = {k.lower() for k in registry.list_blacklist_keywords()}
    added = 0
    for keyword in keywords:
        if keyword.lower() in existing:
            continue
        registry.add_blacklist_keyword(keyword)
        added += 1
    return added


def init_command(
    config_path: Optional[Path] = typer.Option(
        None,
        "--config-path",
        help="Where to write the configuration (default: ~/.config/feedcurator/config.yaml)",
    ),
    db_host: str = typer.Option("localhost", "--db-host", help="Postgres host"),
    db_port: int = typer.Option(5432, "--db-port", help="Postgres port"),
    db_name: str = typer.Option("feedcurator", "--db-name", help="Database name"),
    db_user: str = typer.Option("feedcurator", "--db-user", help="Database user"),
    seed: bool = typer.Option(
        True,
        "--seed-blacklist/--no-seed-blacklist",
        help="Seed the default title blacklist",
    ),
    feeds_file: Optional[Path] = typer.Option(
        None,
        "--feeds",
        help="YAML file with feeds to register",
    ),
) -> None:
    """Initialize configuration and database schema."""
    console.print(Panel.fit("📰 FeedCurator - Initialization", style="bold blue"))

    config_path = config_path or default_config_path()

    config = ConfigModel(
        postgres={
            "host": db_host,
            "port": db_port,
            "database": db_name,
            "user": db_user,
        },
    )
    if config_path.exists():
        console.print(f"[yellow]Config already exists, keeping it: {config_path}[/yellow]")
    else:
        save_config(config, config_path)
        console.print(f"✅ Created config: {config_path}")

    database = Database(config.postgres.model_dump())
    try:
        console.print("\n[bold]Testing database connection...[/bold]")
        if not validate_connection(database):
            console.print(
                "[red]❌ Database connection failed![/red]\n"
                "Please ensure Postgres is running and credentials are correct.\n"
                "Set the password via environment variable: "
                "[bold]export FEEDCURATOR_DB_PASSWORD=your_password[/bold]"
            )
            raise typer.Exit(1)
        console.print("✅ Database connection successful")

        console.print("\n[bold]Initializing database schema...[/bold]")
        try:
            init_database(database)
        except Exception as e:
            console.print(f"[red]❌ Failed to initialize database: {e}[/red]")
            raise typer.Exit(1)
        console.print("✅ Database schema initialized")

        registry = FeedRegistry(database)
        if seed:
            added = seed_blacklist(registry, DEFAULT_BLACKLIST)
            console.print(f"✅ Blacklist seeded ({added} new keywords)")

        if feeds_file is not None:
            try:
                seeds = load_feed_seeds(feeds_file)
            except (FileNotFoundError, ValueError) as e:
                console.print(f"[red]{e}[/red]")
                raise typer.Exit(1)
            for feed_seed in seeds:
                registry.add_feed(feed_seed.name, feed_seed.url, category=feed_seed.category)
            console.print(f"✅ Registered {len(seeds)} feeds from {feeds_file}")
    finally:
        database.close()

    console.print(
        Panel(
            f"[green]✅ FeedCurator initialized successfully![/green]\n\n"
            f"Configuration: {config_path}\n\n"
            f"Next steps:\n"
            f"1. Set database password: [bold]export FEEDCURATOR_DB_PASSWORD=your_password[/bold]\n"
            f"2. Set classifier API key: [bold]export GEMINI_API_KEY=your_key[/bold]\n"
            f"3. Add feeds: [bold]feedcurator feeds add --name ... --url ...[/bold]\n"
            f"4. Run: [bold]feedcurator ingest[/bold] then [bold]feedcurator analyze[/bold]",
            style="green",
        )
    )
