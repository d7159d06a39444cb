"""RSS/Atom feed fetcher."""

import calendar
import logging
from datetime import datetime
from typing import Any, List, Optional

import feedparser
import httpx
import pendulum
from rich.console import Console

from ..models import FeedSource
from .models import FeedItem, FeedResult

console = Console()
logger = logging.getLogger(__name__)


def _entry_published(entry: Any) -> Optional[datetime]:
    """Publication date of a feed entry, falling back to its update date."""
    for key in ("published_parsed", "updated_parsed"):
        parsed = entry.get(key)
        if parsed:
            try:
                # feedparser normalizes struct_time to UTC
                return pendulum.from_timestamp(calendar.timegm(parsed), tz="UTC")
            except (OverflowError, ValueError, TypeError):
                continue
    return None


class RSSFetcher:
    """Fetch and parse RSS feeds, one at a time."""

    def __init__(
        self,
        client: httpx.Client,
        timeout: float = 30.0,
        user_agent: str = "FeedCurator/1.0 (RSS curation)",
    ) -> None:
        """Initialize RSS fetcher."""
        self.client = client
        self.timeout = timeout
        self.user_agent = user_agent

    def parse_entries(self, source: FeedSource, document: str) -> FeedResult:
        """Parse a feed document into usable items."""
        feed = feedparser.parse(document)

        if feed.bozo and not feed.entries:
            return FeedResult(
                source_name=source.name,
                source_url=source.url,
                success=False,
                error=f"Invalid feed: {feed.get('bozo_exception')}",
            )

        items = []
        skipped = 0
        for entry in feed.entries:
            title = (entry.get("title") or "").strip()
            link = (entry.get("link") or "").strip()
            if not title or not link:
                skipped += 1
                continue

            items.append(
                FeedItem(
                    title=title,
                    link=link,
                    published=_entry_published(entry),
                    source_name=source.name,
                )
            )

        return FeedResult(
            source_name=source.name,
            source_url=source.url,
            success=True,
            items=items,
            skipped=skipped,
        )

    def fetch_feed(self, source: FeedSource) -> FeedResult:
        """Fetch and parse a single feed. Errors are reported, never raised."""
        try:
            response = self.client.get(
                source.url,
                timeout=self.timeout,
                headers={"User-Agent": self.user_agent},
                follow_redirects=True,
            )
            response.raise_for_status()
            return self.parse_entries(source, response.text)

        except httpx.HTTPError as e:
            return FeedResult(
                source_name=source.name,
                source_url=source.url,
                success=False,
                error=f"HTTP error: {e}",
            )
        except Exception as e:
            logger.exception("Unexpected error parsing feed %s", source.name)
            return FeedResult(
                source_name=source.name,
                source_url=source.url,
                success=False,
                error=f"Unexpected error: {e}",
            )


def print_feed_summary(results: List[FeedResult]) -> None:
    """Print summary of feed fetch results."""
    total_items = sum(r.item_count for r in results)
    successful = sum(1 for r in results if r.success)
    failed = len(results) - successful

    console.print("\n[bold]RSS Feed Summary:[/bold]")
    console.print(f"  Feeds fetched: {len(results)}")
    console.print(f"  Successful: [green]{successful}[/green]")
    console.print(f"  Failed: [red]{failed}[/red]")
    console.print(f"  Total items: {total_items}")

    if failed > 0:
        console.print("\n[bold red]Failed feeds:[/bold red]")
        for result in results:
            if not result.success:
                console.print(f"  - {result.source_name}: {result.error}")
