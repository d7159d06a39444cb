"""Article storage and curation state."""

import json
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..models import Article
from .connection import Database


class ArticleStore:
    """Durable collection of articles, keyed by URL."""

    def __init__(self, database: Database) -> None:
        self.database = database

    def upsert_article_by_url(
        self,
        url: str,
        title: str,
        source: str,
        created_at: Optional[datetime] = None,
        category: Optional[str] = None,
    ) -> Tuple[int, bool]:
        """
        Insert an article unless its URL is already stored.

        An existing URL is left untouched.

        Returns:
            Tuple of (article_id, inserted_as_new)
        """
        with self.database.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO articles (url, title, source, category, is_read, created_at)
                    VALUES (%s, %s, %s, %s, FALSE, COALESCE(%s::timestamptz, CURRENT_TIMESTAMP))
                    ON CONFLICT (url) DO NOTHING
                    RETURNING id
                    """,
                    (url, title, source, category, created_at),
                )
                inserted = cur.fetchone()
                if inserted:
                    return inserted["id"], True

                cur.execute("SELECT id FROM articles WHERE url = %s", (url,))
                existing = cur.fetchone()
                return existing["id"], False

    def select_unanalyzed_articles(
        self,
        limit: int,
        newest_first: bool = True,
    ) -> List[Article]:
        """Articles with no analysis yet, in creation order."""
        order = "DESC" if newest_first else "ASC"
        with self.database.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"""
                    SELECT * FROM articles
                    WHERE analysis_json IS NULL
                    ORDER BY created_at {order}, id {order}
                    LIMIT %s
                    """,
                    (limit,),
                )
                return [Article(**row) for row in cur.fetchall()]

    def get_article_by_id(self, article_id: int) -> Optional[Article]:
        with self.database.connection() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT * FROM articles WHERE id = %s", (article_id,))
                row = cur.fetchone()
        return Article(**row) if row else None

    def get_articles_by_ids(self, ids: Sequence[int]) -> List[Article]:
        """Articles for ``ids``, newest first. Unknown ids are ignored."""
        if not ids:
            return []
        with self.database.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    SELECT * FROM articles
                    WHERE id = ANY(%s)
                    ORDER BY created_at DESC, id DESC
                    """,
                    (list(ids),),
                )
                return [Article(**row) for row in cur.fetchall()]

    def list_articles(self, min_score: float, include_read: bool = False) -> List[Article]:
        """
        Articles for the dashboard, newest first.

        Unscored articles are always included so they show up before analysis.
        """
        query = """
            SELECT * FROM articles
            WHERE (relevance_score >= %s OR relevance_score IS NULL)
        """
        if not include_read:
            query += " AND is_read = FALSE"
        query += " ORDER BY created_at DESC, id DESC"

        with self.database.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(query, (min_score,))
                return [Article(**row) for row in cur.fetchall()]

    def update_article_analysis(
        self,
        article_id: int,
        category: str,
        relevance_score: int,
        access_status: str,
        summary: str,
        analysis: Dict[str, Any],
        raw_html: Optional[str] = None,
        force: bool = False,
    ) -> bool:
        """
        Write classification results in a single statement.

        Without ``force`` an article that already has an analysis is left
        unchanged.

        Returns:
            True if the row was updated
        """
        query = """
            UPDATE articles
            SET
                category = %s,
                relevance_score = %s,
                access_status = %s,
                summary = %s,
                analysis_json = %s::jsonb,
                raw_html = %s
            WHERE id = %s
        """
        if not force:
            query += " AND analysis_json IS NULL"

        with self.database.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    query,
                    (
                        category,
                        relevance_score,
                        access_status,
                        summary,
                        json.dumps(analysis, ensure_ascii=False),
                        raw_html,
                        article_id,
                    ),
                )
                return cur.rowcount > 0

    def set_read_state(self, ids: Sequence[int], is_read: bool) -> int:
        """Set ``is_read`` on every article in ``ids``; returns rows updated."""
        if not ids:
            return 0
        with self.database.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "UPDATE articles SET is_read = %s WHERE id = ANY(%s)",
                    (is_read, list(ids)),
                )
                return cur.rowcount

    def update_article_category(self, article_id: int, category: str) -> bool:
        """Manual category correction from the dashboard."""
        with self.database.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "UPDATE articles SET category = %s WHERE id = %s",
                    (category, article_id),
                )
                return cur.rowcount > 0
