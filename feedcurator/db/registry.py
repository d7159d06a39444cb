"""Feed and blacklist registry in database."""

from typing import List, Optional

import psycopg

from ..models import BlacklistKeyword, FeedSource
from .connection import Database


class FeedRegistry:
    """Manage feed sources and blacklist keywords."""

    def __init__(self, database: Database) -> None:
        self.database = database

    def list_active_feeds(self) -> List[FeedSource]:
        return self.list_feeds(include_inactive=False)

    def list_feeds(self, include_inactive: bool = False) -> List[FeedSource]:
        """Feeds in creation order."""
        query = "SELECT * FROM feeds"
        if not include_inactive:
            query += " WHERE active = TRUE"
        query += " ORDER BY created_at, id"

        with self.database.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(query)
                return [FeedSource(**row) for row in cur.fetchall()]

    def add_feed(self, name: str, url: str, category: Optional[str] = None) -> FeedSource:
        """
        Add a feed, or update and reactivate the feed with the same URL.

        Raises:
            ValueError: If name or URL is empty
        """
        name = name.strip()
        url = url.strip()
        if not name or not url:
            raise ValueError("Feed name and URL are required")

        with self.database.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO feeds (name, url, category, active)
                    VALUES (%s, %s, %s, TRUE)
                    ON CONFLICT (url) DO UPDATE SET
                        name = EXCLUDED.name,
                        category = EXCLUDED.category,
                        active = TRUE
                    RETURNING *
                    """,
                    (name, url, category or None),
                )
                return FeedSource(**cur.fetchone())

    def deactivate_feed(self, feed_id: int) -> bool:
        """Soft-delete a feed so ingestion ignores it."""
        with self.database.connection() as conn:
            with conn.cursor() as cur:
                cur.execute("UPDATE feeds SET active = FALSE WHERE id = %s", (feed_id,))
                return cur.rowcount > 0

    def list_blacklist(self) -> List[BlacklistKeyword]:
        with self.database.connection() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT * FROM blacklist ORDER BY created_at, id")
                return [BlacklistKeyword(**row) for row in cur.fetchall()]

    def list_blacklist_keywords(self) -> List[str]:
        return [entry.keyword for entry in self.list_blacklist()]

    def add_blacklist_keyword(self, keyword: str) -> BlacklistKeyword:
        """
        Add a blacklist keyword.

        Raises:
            ValueError: If the keyword is empty or already present (any case)
        """
        keyword = keyword.strip()
        if not keyword:
            raise ValueError("Keyword must not be empty")

        try:
            with self.database.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        "INSERT INTO blacklist (keyword) VALUES (%s) RETURNING *",
                        (keyword,),
                    )
                    return BlacklistKeyword(**cur.fetchone())
        except psycopg.errors.UniqueViolation as e:
            raise ValueError(f"Keyword '{keyword}' is already blacklisted") from e

    def delete_blacklist_keyword(self, keyword_id: int) -> bool:
        with self.database.connection() as conn:
            with conn.cursor() as cur:
                cur.execute("DELETE FROM blacklist WHERE id = %s", (keyword_id,))
                return cur.rowcount > 0
