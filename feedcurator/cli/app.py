"""Main CLI application."""

import os
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()

from ..config import CONFIG_ENV_VAR
from ..logging_config import setup_logging
from .feeds import blacklist_app, feeds_app
from .init import init_command
from .run import analyze_command, ingest_command, newsletter_command, reanalyze_command
from .serve import serve_command

app = typer.Typer(
    name="feedcurator",
    help="FeedCurator - RSS ingestion and AI curation for sports business news",
    no_args_is_help=True,
)


@app.callback()
def main(
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Config file (default: $FEEDCURATOR_CONFIG or ~/.config/feedcurator/config.yaml)",
    ),
    log_level: str = typer.Option("INFO", "--log-level", "-l", help="Logging level"),
) -> None:
    """Select the config file and configure logging before any command runs."""
    if config_path is not None:
        os.environ[CONFIG_ENV_VAR] = str(config_path)
    setup_logging(log_level)


# Register commands
app.command("init")(init_command)
app.command("ingest")(ingest_command)
app.command("analyze")(analyze_command)
app.command("reanalyze")(reanalyze_command)
app.command("newsletter")(newsletter_command)
app.command("serve")(serve_command)
app.add_typer(feeds_app, name="feeds", help="Manage RSS feeds")
app.add_typer(blacklist_app, name="blacklist", help="Manage title blacklist keywords")


if __name__ == "__main__":
    app()
