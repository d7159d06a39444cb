"""Data models for feedcurator."""

from .article import ACCESS_STATUSES, Article, extract_domain
from .feed import BlacklistKeyword, FeedSource

__all__ = [
    "ACCESS_STATUSES",
    "Article",
    "BlacklistKeyword",
    "FeedSource",
    "extract_domain",
]
