"""Feed registry models."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from .base import DBModel


class FeedSource(DBModel):
    """RSS/Atom feed source model."""

    name: str = Field(..., description="Human-readable source label")
    url: str = Field(..., description="RSS/Atom feed URL")
    category: Optional[str] = Field(None, description="Optional label")
    active: bool = Field(True, description="Only active feeds are ingested")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")


class BlacklistKeyword(DBModel):
    """Keyword rejected by case-insensitive substring match on titles."""

    keyword: str = Field(..., description="Keyword as entered")
