"""Database management for feedcurator."""

from .articles import ArticleStore
from .connection import Database
from .init import init_database, validate_connection
from .registry import FeedRegistry

__all__ = ["ArticleStore", "Database", "FeedRegistry", "init_database", "validate_connection"]
