"""RSS ingestion, redirect resolution and article fetching."""

from .article_fetcher import ArticleFetcher, extract_main_text, extract_title
from .filters import Blacklist
from .models import FeedItem, FeedResult, IngestionResult, SharedArticle
from .pipeline import SHARE_SOURCE, IngestionPipeline
from .redirects import RedirectResolver
from .rss_fetcher import RSSFetcher, print_feed_summary

__all__ = [
    "ArticleFetcher",
    "Blacklist",
    "FeedItem",
    "FeedResult",
    "IngestionPipeline",
    "IngestionResult",
    "RSSFetcher",
    "RedirectResolver",
    "SHARE_SOURCE",
    "SharedArticle",
    "extract_main_text",
    "extract_title",
    "print_feed_summary",
]
