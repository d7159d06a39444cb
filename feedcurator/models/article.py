"""Article model for stored articles and their curation state."""

from datetime import datetime
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from pydantic import Field

from .base import DBModel

ACCESS_STATUSES = ("free", "paywall", "registration", "video", "audio")


def extract_domain(url: str) -> str:
    """Lower-cased host of ``url`` without a leading ``www.``; empty if unparseable."""
    try:
        domain = urlparse(url).hostname or ""
    except ValueError:
        return ""
    if domain.startswith("www."):
        domain = domain[4:]
    return domain


class Article(DBModel):
    """Article model."""

    url: str = Field(..., description="Unique article URL")
    title: str = Field(..., description="Article title")
    source: Optional[str] = Field(None, description="Feed name or share origin")
    is_read: bool = Field(False, description="Archived from the unread view")
    category: Optional[str] = Field(None, description="One of the fixed categories")
    relevance_score: Optional[int] = Field(None, description="Business relevance", ge=0, le=10)
    access_status: Optional[str] = Field(None, description="free, paywall, registration, video or audio")
    summary: Optional[str] = Field(None, description="Short synopsis")
    analysis_json: Optional[Dict[str, Any]] = Field(None, description="Classifier output and metadata")
    raw_html: Optional[str] = Field(None, description="Fetched page, when kept")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    @property
    def domain(self) -> str:
        """Display domain derived from the URL."""
        return extract_domain(self.url)

    @property
    def is_analyzed(self) -> bool:
        return self.analysis_json is not None

    def to_api_dict(self) -> Dict[str, Any]:
        """Serialize for the JSON API, without the raw HTML."""
        data = self.model_dump(mode="json", exclude={"raw_html"})
        data["domain"] = self.domain
        return data
