"""Pipeline commands: ingest, analyze, reanalyze and newsletter export."""

from pathlib import Path
from typing import List, Optional

import psycopg
import typer
from rich.console import Console
from rich.table import Table

from ..newsletter import format_newsletter, save_newsletter
from .common import open_orchestrator

console = Console()


def ingest_command(
    details: bool = typer.Option(False, "--details", help="Show per-feed fetch results"),
) -> None:
    """Fetch every active feed and store new articles."""
    orchestrator = open_orchestrator()
    try:
        result = orchestrator.run_ingestion()
    except psycopg.Error as e:
        console.print(f"[red]Ingestion failed: {e}[/red]")
        raise typer.Exit(1)
    finally:
        orchestrator.close()

    table = Table(title="Ingestion Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Count", style="green", justify="right")
    table.add_row("Feeds processed", str(result.feeds_processed))
    table.add_row("New articles", str(result.ingested))
    table.add_row("Already stored", str(result.duplicates))
    table.add_row("Blacklisted", str(result.blacklisted))
    table.add_row("Invalid entries", str(result.skipped))
    table.add_row("Store errors", str(result.store_errors))
    console.print(table)

    if result.failed_feeds:
        console.print("\n[bold red]Failed feeds:[/bold red]")
        for name, error in result.failed_feeds.items():
            console.print(f"  - {name}: {error}")

    if details:
        for feed_result in orchestrator.ingestion.last_feed_results:
            status = "[green]✓[/green]" if feed_result.success else "[red]✗[/red]"
            console.print(f"{status} {feed_result.source_name}: {feed_result.item_count} items")


def analyze_command(
    limit: Optional[int] = typer.Option(
        None,
        "--limit",
        "-n",
        help="Articles to analyze (default: analysis.batch_size)",
        min=1,
    ),
) -> None:
    """Classify the newest unanalyzed articles."""
    orchestrator = open_orchestrator()
    try:
        result = orchestrator.analyze_next(limit)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    except psycopg.Error as e:
        console.print(f"[red]Analysis failed: {e}[/red]")
        raise typer.Exit(1)
    finally:
        orchestrator.close()

    if not result.candidates:
        console.print("[yellow]No pending articles to analyze.[/yellow]")
        return

    table = Table(title="Analysis Summary")
    table.add_column("Outcome", style="cyan")
    table.add_column("Count", style="green", justify="right")
    table.add_row("Analyzed", str(result.analyzed))
    table.add_row("Skipped (retry later)", str(result.skipped))
    table.add_row("Failed (retry later)", str(result.failed))
    console.print(table)


def reanalyze_command(
    article_id: int = typer.Argument(..., help="Article ID to analyze again"),
) -> None:
    """Analyze one article again, replacing its previous analysis."""
    orchestrator = open_orchestrator()
    try:
        analyzed = orchestrator.reanalyze(article_id)
        article = orchestrator.articles.get_article_by_id(article_id) if analyzed else None
    except LookupError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    finally:
        orchestrator.close()

    if not analyzed:
        console.print(f"[red]❌ Analysis of article #{article_id} failed. See the log for details.[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✅ Article #{article_id} analyzed[/green]")
    if article is not None:
        console.print(f"  Category: {article.category}")
        console.print(f"  Score: {article.relevance_score}")
        console.print(f"  Access: {article.access_status}")
        console.print(f"  Summary: {article.summary}")


def newsletter_command(
    ids: List[int] = typer.Argument(..., help="Article IDs to include"),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the snippet to this file instead of stdout",
    ),
) -> None:
    """Export selected articles as a Markdown newsletter snippet."""
    orchestrator = open_orchestrator()
    try:
        articles = orchestrator.articles.get_articles_by_ids(ids)
    finally:
        orchestrator.close()

    if not articles:
        console.print("[yellow]No matching articles.[/yellow]")
        raise typer.Exit(1)

    text = format_newsletter(articles)
    if output is not None:
        save_newsletter(text, output)
        console.print(f"✅ Saved {len(articles)} articles to {output}")
    else:
        typer.echo(text)
