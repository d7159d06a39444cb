"""Newsletter snippet export."""

from pathlib import Path
from typing import Iterable

from .ingestion.pipeline import SHARE_SOURCE
from .models import Article

ACCESS_MARKERS = {
    "paywall": " 💰",
    "registration": " 📝",
}


def format_article_line(article: Article) -> str:
    """``Title - [source](url)`` followed by the access marker, if any."""
    source_name = article.source if article.source != SHARE_SOURCE else None
    source_name = source_name or article.domain or "lien"
    marker = ACCESS_MARKERS.get(article.access_status or "", "")
    return f"{article.title} - [{source_name}]({article.url}){marker}"


def format_newsletter(articles: Iterable[Article]) -> str:
    """Markdown snippet ready to paste into a newsletter editor."""
    return "\n\n".join(format_article_line(a) for a in articles)


def save_newsletter(text: str, output_path: Path) -> None:
    """Save newsletter snippet to file."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(text + "\n", encoding="utf-8")
