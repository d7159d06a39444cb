"""Shared fixtures: in-memory store, registry and classifier fakes."""

import json
from datetime import datetime, timezone
from itertools import count
from typing import Callable, Dict, List, Optional, Sequence, Tuple
from unittest.mock import MagicMock

import httpx
import pytest

from feedcurator.analysis import LLMProvider
from feedcurator.config import Config, ConfigModel
from feedcurator.models import Article, BlacklistKeyword, FeedSource
from feedcurator.pipeline import PipelineOrchestrator


class FakeArticleStore:
    """In-memory ArticleStore with the same contract."""

    def __init__(self) -> None:
        self.rows: Dict[int, Article] = {}
        self._ids = count(1)

    def add(self, url: str, title: str = "Title", source: Optional[str] = "Feed", **fields) -> Article:
        article = Article(
            id=next(self._ids),
            url=url,
            title=title,
            source=source,
            created_at=fields.pop("created_at", datetime.now(timezone.utc)),
            **fields,
        )
        self.rows[article.id] = article
        return article

    def by_url(self, url: str) -> Optional[Article]:
        return next((a for a in self.rows.values() if a.url == url), None)

    def upsert_article_by_url(
        self,
        url: str,
        title: str,
        source: str,
        created_at: Optional[datetime] = None,
        category: Optional[str] = None,
    ) -> Tuple[int, bool]:
        existing = self.by_url(url)
        if existing is not None:
            return existing.id, False
        article = self.add(
            url,
            title=title,
            source=source,
            category=category,
            created_at=created_at or datetime.now(timezone.utc),
        )
        return article.id, True

    def _newest_first(self, articles) -> List[Article]:
        return sorted(articles, key=lambda a: (a.created_at, a.id), reverse=True)

    def select_unanalyzed_articles(self, limit: int, newest_first: bool = True) -> List[Article]:
        pending = [a for a in self.rows.values() if a.analysis_json is None]
        ordered = self._newest_first(pending)
        if not newest_first:
            ordered.reverse()
        return [a.model_copy(deep=True) for a in ordered[:limit]]

    def get_article_by_id(self, article_id: int) -> Optional[Article]:
        article = self.rows.get(article_id)
        return article.model_copy(deep=True) if article else None

    def get_articles_by_ids(self, ids: Sequence[int]) -> List[Article]:
        return self._newest_first(a for a in self.rows.values() if a.id in set(ids))

    def list_articles(self, min_score: float, include_read: bool = False) -> List[Article]:
        selected = [
            a
            for a in self.rows.values()
            if (a.relevance_score is None or a.relevance_score >= min_score)
            and (include_read or not a.is_read)
        ]
        return self._newest_first(selected)

    def update_article_analysis(
        self,
        article_id: int,
        category: str,
        relevance_score: int,
        access_status: str,
        summary: str,
        analysis: dict,
        raw_html: Optional[str] = None,
        force: bool = False,
    ) -> bool:
        article = self.rows.get(article_id)
        if article is None or (article.analysis_json is not None and not force):
            return False
        # Round-trip through JSON like the JSONB column does
        self.rows[article_id] = article.model_copy(
            update={
                "category": category,
                "relevance_score": relevance_score,
                "access_status": access_status,
                "summary": summary,
                "analysis_json": json.loads(json.dumps(analysis)),
                "raw_html": raw_html if raw_html is not None else article.raw_html,
            }
        )
        return True

    def set_read_state(self, ids: Sequence[int], is_read: bool) -> int:
        updated = 0
        for article_id in ids:
            if article_id in self.rows:
                self.rows[article_id] = self.rows[article_id].model_copy(update={"is_read": is_read})
                updated += 1
        return updated

    def update_article_category(self, article_id: int, category: str) -> bool:
        if article_id not in self.rows:
            return False
        self.rows[article_id] = self.rows[article_id].model_copy(update={"category": category})
        return True


class FakeFeedRegistry:
    """In-memory FeedRegistry."""

    def __init__(self, feeds=(), keywords=()) -> None:
        self._feed_ids = count(1)
        self._keyword_ids = count(1)
        self.feeds: Dict[int, FeedSource] = {}
        self.keywords: Dict[int, BlacklistKeyword] = {}
        for name, url in feeds:
            self.add_feed(name, url)
        for keyword in keywords:
            self.add_blacklist_keyword(keyword)

    def list_active_feeds(self) -> List[FeedSource]:
        return self.list_feeds()

    def list_feeds(self, include_inactive: bool = False) -> List[FeedSource]:
        return [f for f in self.feeds.values() if include_inactive or f.active]

    def add_feed(self, name: str, url: str, category: Optional[str] = None) -> FeedSource:
        if not name.strip() or not url.strip():
            raise ValueError("Feed name and url must not be empty")
        for feed_id, feed in self.feeds.items():
            if feed.url == url:
                self.feeds[feed_id] = feed.model_copy(update={"name": name, "category": category, "active": True})
                return self.feeds[feed_id]
        feed = FeedSource(id=next(self._feed_ids), name=name, url=url, category=category)
        self.feeds[feed.id] = feed
        return feed

    def deactivate_feed(self, feed_id: int) -> bool:
        if feed_id not in self.feeds:
            return False
        self.feeds[feed_id] = self.feeds[feed_id].model_copy(update={"active": False})
        return True

    def list_blacklist(self) -> List[BlacklistKeyword]:
        return list(self.keywords.values())

    def list_blacklist_keywords(self) -> List[str]:
        return [k.keyword for k in self.keywords.values()]

    def add_blacklist_keyword(self, keyword: str) -> BlacklistKeyword:
        keyword = keyword.strip()
        if not keyword:
            raise ValueError("Keyword must not be empty")
        if keyword.lower() in {k.lower() for k in self.list_blacklist_keywords()}:
            raise ValueError(f"Keyword '{keyword}' is already blacklisted")
        entry = BlacklistKeyword(id=next(self._keyword_ids), keyword=keyword)
        self.keywords[entry.id] = entry
        return entry

    def delete_blacklist_keyword(self, keyword_id: int) -> bool:
        return self.keywords.pop(keyword_id, None) is not None


class FakeLLMProvider(LLMProvider):
    """Returns queued responses; an Exception in the queue is raised instead."""

    def __init__(self, responses=None, model: str = "fake-model") -> None:
        self.model = model
        self.responses = list(responses or [])
        self.prompts: List[str] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        response = self.responses.pop(0) if self.responses else classifier_json()
        if isinstance(response, Exception):
            raise response
        return response

    def get_usage_stats(self) -> Dict:
        return {"api_calls": len(self.prompts), "model": self.model}


def classifier_json(
    category: str = "Sponsoring",
    relevance_score=8,
    access_status: str = "free",
    summary: str = "Nouveau contrat de sponsoring.",
) -> str:
    return json.dumps(
        {
            "category": category,
            "relevance_score": relevance_score,
            "access_status": access_status,
            "summary": summary,
        }
    )


def mock_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.Client:
    """httpx client whose requests are answered by ``handler``."""
    return httpx.Client(transport=httpx.MockTransport(handler))


ARTICLE_HTML = """
<html>
  <head><title>Page title</title><meta property="og:title" content="Club signs kit deal"></head>
  <body>
    <nav>Menu</nav>
    <article><p>The club signed a record kit sponsorship worth 50 million euros.</p></article>
  </body>
</html>
"""


@pytest.fixture
def store() -> FakeArticleStore:
    return FakeArticleStore()


@pytest.fixture
def registry() -> FakeFeedRegistry:
    return FakeFeedRegistry()


@pytest.fixture
def llm() -> FakeLLMProvider:
    return FakeLLMProvider()


@pytest.fixture
def config() -> Config:
    return Config(config=ConfigModel(analysis={"delay_seconds": 0}))


@pytest.fixture
def page_client() -> httpx.Client:
    """Serves ARTICLE_HTML for every request."""
    return mock_client(lambda request: httpx.Response(200, text=ARTICLE_HTML))


@pytest.fixture
def orchestrator(config, store, registry, llm, page_client) -> PipelineOrchestrator:
    return PipelineOrchestrator(
        config,
        database=MagicMock(),
        http_client=page_client,
        llm_provider=llm,
        articles=store,
        registry=registry,
    )
