"""Wires the store, fetchers and classifier together for one process."""

import logging
from typing import Optional

import httpx

from ..analysis import AnalysisResult, ClassificationPipeline, LLMProvider, create_provider
from ..config import Config
from ..db import ArticleStore, Database, FeedRegistry
from ..ingestion import (
    ArticleFetcher,
    IngestionPipeline,
    IngestionResult,
    RedirectResolver,
    RSSFetcher,
    SharedArticle,
)

logger = logging.getLogger(__name__)


class PipelineOrchestrator:
    """Owns every long-lived collaborator of the curation pipelines.

    One instance is built at process start (CLI command or web app) and shared
    by every caller. The classifier is created on first use so that ingestion
    and read-only endpoints work without an API key.
    """

    def __init__(
        self,
        config: Config,
        database: Optional[Database] = None,
        http_client: Optional[httpx.Client] = None,
        llm_provider: Optional[LLMProvider] = None,
        articles: Optional[ArticleStore] = None,
        registry: Optional[FeedRegistry] = None,
    ) -> None:
        self.config = config
        settings = config.config

        self.database = database or Database(config.get_db_config())
        self.articles = articles or ArticleStore(self.database)
        self.registry = registry or FeedRegistry(self.database)
        self._owns_client = http_client is None
        self.http_client = http_client or httpx.Client()

        self.rss_fetcher = RSSFetcher(
            self.http_client,
            timeout=settings.ingestion.feed_timeout,
            user_agent=settings.ingestion.user_agent,
        )
        self.resolver = RedirectResolver(
            self.http_client,
            redirect_domains=settings.ingestion.redirect_domains,
            consent_markers=settings.ingestion.consent_markers,
            timeout=settings.ingestion.redirect_timeout,
            user_agent=settings.ingestion.browser_user_agent,
        )
        self.article_fetcher = ArticleFetcher(
            self.http_client,
            timeout=settings.analysis.page_timeout,
            user_agent=settings.analysis.user_agent,
        )
        self.ingestion = IngestionPipeline(
            self.articles,
            self.registry,
            self.rss_fetcher,
            self.resolver,
            self.article_fetcher,
        )

        self._llm_provider = llm_provider
        self._classification: Optional[ClassificationPipeline] = None

    @property
    def classification(self) -> ClassificationPipeline:
        """Classification pipeline, built with the configured provider on first use.

        Raises:
            ValueError: If no classifier API key is configured
        """
        if self._classification is None:
            if self._llm_provider is None:
                self._llm_provider = create_provider(self.config.get_llm_config())
                logger.info("Using classifier model %s", self._llm_provider.model)

            analysis = self.config.config.analysis
            self._classification = ClassificationPipeline(
                self.articles,
                self.article_fetcher,
                self._llm_provider,
                delay_seconds=analysis.delay_seconds,
                max_content_chars=analysis.max_content_chars,
                store_raw_html=analysis.store_raw_html,
            )
        return self._classification

    def run_ingestion(self) -> IngestionResult:
        return self.ingestion.run_ingestion()

    def analyze_next(self, batch_size: Optional[int] = None) -> AnalysisResult:
        """Analyze the next batch; defaults to ``analysis.batch_size``."""
        if batch_size is None:
            batch_size = self.config.config.analysis.batch_size
        return self.classification.analyze_next(batch_size)

    def reanalyze(self, article_id: int) -> bool:
        return self.classification.reanalyze(article_id)

    def analyze_article_by_id(self, article_id: int) -> str:
        return self.classification.analyze_article_by_id(article_id)

    def share(
        self,
        url: str,
        title: Optional[str] = None,
        category: Optional[str] = None,
    ) -> SharedArticle:
        return self.ingestion.ingest_shared(url, title=title, category=category)

    def close(self) -> None:
        """Release the HTTP client and the connection pool."""
        if self._owns_client:
            self.http_client.close()
        self.database.close()
