"""Classification pipeline: score, categorize and summarize stored articles."""

import logging
import time
from typing import Any, Callable, Dict, Optional

import pendulum
import psycopg
from pydantic import BaseModel, Field

from ..db import ArticleStore
from ..ingestion.article_fetcher import ArticleFetcher, extract_main_text
from ..models import Article
from .categories import normalize_access_status, normalize_category, normalize_score
from .llm_provider import LLMProvider
from .parser import ParseError, parse_classifier_response
from .prompt import build_prompt

logger = logging.getLogger(__name__)

ANALYZED = "analyzed"
SKIPPED = "skipped"
FAILED = "failed"


class AnalysisResult(BaseModel):
    """Outcome of one classification batch."""

    candidates: int = Field(0, description="Unanalyzed articles selected")
    analyzed: int = Field(0, description="Articles written with an analysis")
    skipped: int = Field(0, description="Fetch or parse failures, left for a later run")
    failed: int = Field(0, description="Classifier or store errors, left for a later run")


class ClassificationPipeline:
    """Classify unanalyzed articles one at a time.

    Every per-article failure leaves the article unanalyzed, so it is picked
    up again by a later batch.
    """

    def __init__(
        self,
        articles: ArticleStore,
        article_fetcher: ArticleFetcher,
        llm_provider: LLMProvider,
        delay_seconds: float = 6.0,
        max_content_chars: int = 12000,
        store_raw_html: bool = False,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.articles = articles
        self.article_fetcher = article_fetcher
        self.llm_provider = llm_provider
        self.delay_seconds = delay_seconds
        self.max_content_chars = max_content_chars
        self.store_raw_html = store_raw_html
        self._sleep = sleep
        self._last_call: Optional[float] = None

    def analyze_next(self, batch_size: int) -> AnalysisResult:
        """Analyze up to ``batch_size`` of the newest unanalyzed articles."""
        candidates = self.articles.select_unanalyzed_articles(batch_size, newest_first=True)
        result = AnalysisResult(candidates=len(candidates))

        if not candidates:
            logger.info("No pending articles to analyze")
            return result

        logger.info("Found %d articles to analyze", len(candidates))

        for article in candidates:
            try:
                outcome = self.analyze_article(article)
            except Exception:
                logger.exception("Unexpected error analyzing article #%s", article.id)
                outcome = FAILED
            if outcome == ANALYZED:
                result.analyzed += 1
            elif outcome == SKIPPED:
                result.skipped += 1
            else:
                result.failed += 1

        logger.info(
            "Analysis complete: %d analyzed, %d skipped, %d failed",
            result.analyzed,
            result.skipped,
            result.failed,
        )
        return result

    def reanalyze(self, article_id: int) -> bool:
        """
        Analyze one article again, overwriting any previous analysis.

        Raises:
            LookupError: If the article does not exist
        """
        article = self.articles.get_article_by_id(article_id)
        if article is None:
            raise LookupError(f"Article with id {article_id} not found")
        return self.analyze_article(article, force=True) == ANALYZED

    def analyze_article_by_id(self, article_id: int) -> str:
        """Analyze one article unless it already has an analysis."""
        article = self.articles.get_article_by_id(article_id)
        if article is None:
            raise LookupError(f"Article with id {article_id} not found")
        if article.is_analyzed:
            return SKIPPED
        return self.analyze_article(article)

    def analyze_article(self, article: Article, force: bool = False) -> str:
        """Fetch, classify and store one article. Returns the outcome label."""
        logger.info("Analyzing article #%s: %s", article.id, article.title)

        html = self.article_fetcher.fetch_html(article.url)
        if not html:
            return SKIPPED

        try:
            content = extract_main_text(html)
        except Exception:
            logger.exception("Text extraction failed for article #%s", article.id)
            return SKIPPED

        prompt = build_prompt(article.title, article.url, content, self.max_content_chars)

        self._throttle()
        try:
            response_text = self.llm_provider.generate(prompt)
        except Exception as e:
            logger.error("Classifier error for article #%s: %s", article.id, e)
            return FAILED

        parsed = parse_classifier_response(response_text)
        if isinstance(parsed, ParseError):
            logger.warning(
                "Unusable classifier response for article #%s (%s): %.200s",
                article.id,
                parsed.reason,
                parsed.text,
            )
            return SKIPPED

        category = normalize_category(parsed.category)
        relevance_score = normalize_score(parsed.relevance_score)
        access_status = normalize_access_status(parsed.access_status)
        summary = parsed.summary.strip()

        analysis: Dict[str, Any] = {
            "raw": parsed.raw,
            "category": category,
            "relevance_score": relevance_score,
            "access_status": access_status,
            "summary": summary,
            "model": self.llm_provider.model,
            "analyzed_at": pendulum.now("UTC").to_iso8601_string(),
        }

        try:
            updated = self.articles.update_article_analysis(
                article.id,
                category=category,
                relevance_score=relevance_score,
                access_status=access_status,
                summary=summary,
                analysis=analysis,
                raw_html=html if self.store_raw_html else None,
                force=force,
            )
        except psycopg.Error as e:
            logger.error("Error saving analysis for article #%s: %s", article.id, e)
            return FAILED

        if not updated:
            logger.info("Article #%s already analyzed, result discarded", article.id)
            return SKIPPED

        logger.info(
            'Updated article #%s => category="%s", score=%d, access=%s',
            article.id,
            category,
            relevance_score,
            access_status,
        )
        return ANALYZED

    def _throttle(self) -> None:
        """Keep at least ``delay_seconds`` between classifier calls."""
        if self._last_call is not None and self.delay_seconds > 0:
            remaining = self.delay_seconds - (time.monotonic() - self._last_call)
            if remaining > 0:
                logger.debug("Pausing %.1fs to respect rate limits", remaining)
                self._sleep(remaining)
        self._last_call = time.monotonic()
