"""Article page fetcher and text extractor."""

import logging
import re
from typing import Optional

import httpx
import trafilatura
from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
_STRIPPED_TAGS = ["script", "style", "noscript", "iframe", "nav"]


def _collapse(text: str) -> str:
    return _WHITESPACE.sub(" ", text.replace("\xa0", " ")).strip()


def extract_region_text(html: str) -> str:
    """Text of the first <article>, else <main>, else <body>, else the document."""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(_STRIPPED_TAGS):
        tag.decompose()

    for selector in ("article", "main", "body"):
        region = soup.find(selector)
        if region is not None:
            text = _collapse(region.get_text(" "))
            if text:
                return text

    return _collapse(soup.get_text(" "))


def extract_main_text(html: str) -> str:
    """Plain-text approximation of the page's main content."""
    extracted = None
    try:
        extracted = trafilatura.extract(
            html,
            include_comments=False,
            include_tables=False,
            deduplicate=True,
            favor_precision=True,
        )
    except Exception as e:
        logger.debug("trafilatura failed, using region fallback: %s", e)

    if extracted:
        return _collapse(extracted)
    return extract_region_text(html)


def extract_title(html: str) -> Optional[str]:
    """Page title from og:title, else <title>."""
    soup = BeautifulSoup(html, "html.parser")

    og_title = soup.find("meta", attrs={"property": "og:title"})
    if og_title and og_title.get("content"):
        title = _collapse(og_title["content"])
        if title:
            return title

    if soup.title and soup.title.string:
        title = _collapse(soup.title.string)
        if title:
            return title

    return None


class ArticleFetcher:
    """Fetch article HTML for classification and share intake."""

    def __init__(
        self,
        client: httpx.Client,
        timeout: float = 5.0,
        user_agent: str = "Mozilla/5.0 (compatible; FeedCurator/1.0)",
    ) -> None:
        """Initialize article fetcher."""
        self.client = client
        self.timeout = timeout
        self.user_agent = user_agent

    def fetch_html(self, url: str) -> Optional[str]:
        """Page HTML, or None when the page cannot be fetched."""
        try:
            response = self.client.get(
                url,
                timeout=self.timeout,
                follow_redirects=True,
                headers={
                    "User-Agent": self.user_agent,
                    "Accept": "text/html,application/xhtml+xml",
                },
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning("Failed to fetch %s: HTTP %s", url, e.response.status_code)
            return None
        except httpx.TimeoutException:
            logger.warning("Timed out fetching %s", url)
            return None
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("Error fetching %s: %s", url, e)
            return None

        return response.text

    def fetch_title(self, url: str) -> Optional[str]:
        """Title of the page at ``url``, or None."""
        html = self.fetch_html(url)
        if not html:
            return None
        return extract_title(html)
