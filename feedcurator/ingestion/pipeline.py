"""Feed ingestion pipeline."""

import logging
from typing import List, Optional

import httpx
import psycopg

from ..db import ArticleStore, FeedRegistry
from ..models import FeedSource
from .article_fetcher import ArticleFetcher
from .filters import Blacklist
from .models import FeedItem, FeedResult, IngestionResult, SharedArticle
from .redirects import RedirectResolver
from .rss_fetcher import RSSFetcher

logger = logging.getLogger(__name__)

SHARE_SOURCE = "share-target"


def validate_article_url(url: str) -> str:
    """Return ``url`` if it is a usable absolute http(s) URL.

    Raises:
        ValueError: If the URL cannot be parsed or requested
    """
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as e:
        raise ValueError(f"Invalid url: {e}") from e
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise ValueError(f"Invalid url: {url!r}")
    return url


class IngestionPipeline:
    """Pull active feeds into the article store.

    Feeds and entries are processed one at a time. A failing feed or entry is
    logged and skipped; only failing to load the registry aborts a run.
    """

    def __init__(
        self,
        articles: ArticleStore,
        registry: FeedRegistry,
        rss_fetcher: RSSFetcher,
        resolver: RedirectResolver,
        article_fetcher: ArticleFetcher,
    ) -> None:
        self.articles = articles
        self.registry = registry
        self.rss_fetcher = rss_fetcher
        self.resolver = resolver
        self.article_fetcher = article_fetcher
        self.last_feed_results: List[FeedResult] = []

    def run_ingestion(self) -> IngestionResult:
        """Ingest every active feed; returns counts for the run."""
        feeds = self.registry.list_active_feeds()
        blacklist = Blacklist(self.registry.list_blacklist_keywords())
        logger.info("Loaded %d feeds and %d blacklist keywords", len(feeds), len(blacklist))

        result = IngestionResult()
        self.last_feed_results = []

        for feed in feeds:
            self._ingest_feed(feed, blacklist, result)

        logger.info(
            "Ingestion complete: %d new, %d duplicates, %d blacklisted, %d failed feeds",
            result.ingested,
            result.duplicates,
            result.blacklisted,
            len(result.failed_feeds),
        )
        return result

    def _ingest_feed(self, feed: FeedSource, blacklist: Blacklist, result: IngestionResult) -> None:
        logger.info("Fetching %s (%s)", feed.name, feed.url)
        feed_result = self.rss_fetcher.fetch_feed(feed)
        self.last_feed_results.append(feed_result)

        if not feed_result.success:
            logger.error("Failed to fetch feed %s: %s", feed.name, feed_result.error)
            result.failed_feeds[feed.name] = feed_result.error or "Unknown error"
            return

        result.feeds_processed += 1
        result.skipped += feed_result.skipped
        new_count = 0

        for item in feed_result.items:
            keyword = blacklist.match(item.title)
            if keyword:
                logger.debug("Skipped (blacklist '%s'): %s", keyword, item.title)
                result.blacklisted += 1
                continue

            try:
                inserted = self._store_item(item)
            except psycopg.Error as e:
                logger.error("Error storing '%s': %s", item.title, e)
                result.store_errors += 1
                continue

            if inserted:
                new_count += 1
                result.ingested += 1
            else:
                result.duplicates += 1

        logger.info("%s: %d new articles", feed.name, new_count)

    def _store_item(self, item: FeedItem) -> bool:
        url = self.resolver.resolve(item.link)
        _, inserted = self.articles.upsert_article_by_url(
            url=url,
            title=item.title,
            source=item.source_name,
            created_at=item.published,
        )
        if inserted:
            logger.debug("Saved: %s", item.title)
        return inserted

    def ingest_shared(
        self,
        url: str,
        title: Optional[str] = None,
        category: Optional[str] = None,
    ) -> SharedArticle:
        """
        Store a single externally submitted article.

        Without a title, the page title is fetched; the URL is the last resort.

        Raises:
            ValueError: If ``url`` is empty or not a valid http(s) URL
        """
        url = (url or "").strip()
        if not url:
            raise ValueError("Missing url")
        validate_article_url(url)

        url = self.resolver.resolve(url)
        title = (title or "").strip()
        if not title:
            title = self.article_fetcher.fetch_title(url) or url

        article_id, created = self.articles.upsert_article_by_url(
            url=url,
            title=title,
            source=SHARE_SOURCE,
            category=category,
        )
        logger.info("Shared article #%d %s: %s", article_id, "saved" if created else "already stored", url)
        return SharedArticle(id=article_id, url=url, title=title, created=created)
