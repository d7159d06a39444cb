"""Feed and blacklist management commands."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ..config import load_feed_seeds
from ..ingestion import print_feed_summary
from .common import open_orchestrator

console = Console()
feeds_app = typer.Typer(help="Manage RSS feeds")
blacklist_app = typer.Typer(help="Manage title blacklist keywords")


@feeds_app.command("list")
def feeds_list(
    show_all: bool = typer.Option(False, "--all", "-a", help="Include deactivated feeds"),
) -> None:
    """List registered feeds."""
    orchestrator = open_orchestrator()
    try:
        feeds = orchestrator.registry.list_feeds(include_inactive=show_all)
    finally:
        orchestrator.close()

    if not feeds:
        console.print("[yellow]No feeds registered.[/yellow]")
        return

    table = Table(title="Registered Feeds")
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Category", style="magenta")
    table.add_column("Active", style="yellow")
    table.add_column("URL", style="blue")

    for feed in feeds:
        table.add_row(
            str(feed.id),
            feed.name,
            feed.category or "",
            "✓" if feed.active else "✗",
            feed.url,
        )

    console.print(table)


@feeds_app.command("add")
def feeds_add(
    name: str = typer.Option(..., "--name", "-n", help="Feed name"),
    url: str = typer.Option(..., "--url", "-u", help="RSS/Atom feed URL"),
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Optional label"),
) -> None:
    """Register a feed, or reactivate it if the URL is already known."""
    orchestrator = open_orchestrator()
    try:
        feed = orchestrator.registry.add_feed(name, url, category=category)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    finally:
        orchestrator.close()

    console.print(f"[green]✅ Added feed #{feed.id}: {feed.name}[/green]")


@feeds_app.command("remove")
def feeds_remove(
    feed_id: int = typer.Argument(..., help="Feed ID to deactivate"),
) -> None:
    """Deactivate a feed. Its articles are kept."""
    orchestrator = open_orchestrator()
    try:
        removed = orchestrator.registry.deactivate_feed(feed_id)
    finally:
        orchestrator.close()

    if not removed:
        console.print(f"[red]Feed #{feed_id} not found.[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✅ Deactivated feed #{feed_id}[/green]")


@feeds_app.command("test")
def feeds_test(
    name: Optional[str] = typer.Argument(None, help="Feed name to test (or test all active feeds)"),
) -> None:
    """Fetch feeds without storing anything and report what they return."""
    orchestrator = open_orchestrator()
    try:
        feeds = orchestrator.registry.list_active_feeds()
        if name:
            feeds = [f for f in feeds if f.name == name]
            if not feeds:
                console.print(f"[red]Feed '{name}' not found.[/red]")
                raise typer.Exit(1)

        results = []
        for feed in feeds:
            result = orchestrator.rss_fetcher.fetch_feed(feed)
            if result.success:
                console.print(f"[green]✅ {feed.name}: {result.item_count} items[/green]")
            else:
                console.print(f"[red]❌ {feed.name}: {result.error}[/red]")
            results.append(result)
    finally:
        orchestrator.close()

    print_feed_summary(results)


@feeds_app.command("import")
def feeds_import(
    feeds_file: Path = typer.Argument(..., help="YAML file with a top-level 'feeds' list"),
) -> None:
    """Register every feed listed in a YAML file."""
    try:
        seeds = load_feed_seeds(feeds_file)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    orchestrator = open_orchestrator()
    try:
        for seed in seeds:
            feed = orchestrator.registry.add_feed(seed.name, seed.url, category=seed.category)
            console.print(f"✅ {feed.name} (#{feed.id})")
    finally:
        orchestrator.close()

    console.print(f"[green]Imported {len(seeds)} feeds[/green]")


@blacklist_app.command("list")
def blacklist_list() -> None:
    """List blacklist keywords."""
    orchestrator = open_orchestrator()
    try:
        keywords = orchestrator.registry.list_blacklist()
    finally:
        orchestrator.close()

    if not keywords:
        console.print("[yellow]Blacklist is empty.[/yellow]")
        return

    table = Table(title="Title Blacklist")
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Keyword", style="cyan")
    for keyword in keywords:
        table.add_row(str(keyword.id), keyword.keyword)

    console.print(table)


@blacklist_app.command("add")
def blacklist_add(
    keyword: str = typer.Argument(..., help="Keyword; titles containing it are skipped"),
) -> None:
    """Add a blacklist keyword."""
    orchestrator = open_orchestrator()
    try:
        entry = orchestrator.registry.add_blacklist_keyword(keyword)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    finally:
        orchestrator.close()

    console.print(f"[green]✅ Added keyword #{entry.id}: {entry.keyword}[/green]")


@blacklist_app.command("remove")
def blacklist_remove(
    keyword_id: int = typer.Argument(..., help="Keyword ID to delete"),
) -> None:
    """Delete a blacklist keyword."""
    orchestrator = open_orchestrator()
    try:
        removed = orchestrator.registry.delete_blacklist_keyword(keyword_id)
    finally:
        orchestrator.close()

    if not removed:
        console.print(f"[red]Keyword #{keyword_id} not found.[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✅ Removed keyword #{keyword_id}[/green]")
