"""Data models for ingestion."""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class FeedItem(BaseModel):
    """Parsed RSS/Atom feed entry."""

    title: str = Field(..., description="Entry title, stripped")
    link: str = Field(..., description="Entry link")
    published: Optional[datetime] = Field(None, description="Publication date")
    source_name: str = Field(..., description="Configured feed name")


class FeedResult(BaseModel):
    """Result of fetching an RSS feed."""

    source_name: str = Field(..., description="Feed name")
    source_url: str = Field(..., description="RSS feed URL")
    success: bool = Field(..., description="Whether fetch was successful")
    items: List[FeedItem] = Field(default_factory=list, description="Usable feed entries")
    skipped: int = Field(0, description="Entries without title or link")
    error: Optional[str] = Field(None, description="Error message if failed")

    @property
    def item_count(self) -> int:
        return len(self.items)


class IngestionResult(BaseModel):
    """Outcome of one ingestion run."""

    ingested: int = Field(0, description="Newly inserted articles")
    duplicates: int = Field(0, description="Entries whose URL was already stored")
    blacklisted: int = Field(0, description="Entries rejected by the blacklist")
    skipped: int = Field(0, description="Entries without title or link")
    feeds_processed: int = Field(0, description="Feeds fetched successfully")
    failed_feeds: Dict[str, str] = Field(default_factory=dict, description="Feed name to error")
    store_errors: int = Field(0, description="Entries whose store write failed")


class SharedArticle(BaseModel):
    """Outcome of a share intake."""

    id: int = Field(..., description="Article ID")
    url: str = Field(..., description="Stored URL")
    title: str = Field(..., description="Stored title")
    created: bool = Field(..., description="False if the URL was already stored")
