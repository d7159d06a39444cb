"""Database connection management."""

import os
from contextlib import contextmanager
from typing import Any, Dict, Generator, Optional
from urllib.parse import quote

import psycopg
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool


class DatabaseConfig:
    """Database configuration."""

    def __init__(self, config: Dict[str, Any]) -> None:
        """Initialize database config from dict."""
        self.host = config.get("host", "localhost")
        self.port = config.get("port", 5432)
        self.database = config.get("database", "feedcurator")
        self.user = config.get("user", "feedcurator")
        self.min_size = config.get("min_size", 1)
        self.max_size = config.get("max_size", 5)

        # Handle password from environment variable if specified
        password = config.get("password")
        password_env = config.get("password_env")
        if not password and password_env:
            password = os.environ.get(password_env, "")
        self.password = password or ""

    @property
    def connection_string(self) -> str:
        """Get psycopg connection string."""
        user = quote(self.user, safe="")
        password = quote(self.password, safe="")
        return f"postgresql://{user}:{password}@{self.host}:{self.port}/{self.database}"


class Database:
    """Store client shared by the pipelines and the HTTP handlers.

    Built once at process start and passed to every collaborator. The pool is
    opened lazily on first use.
    """

    def __init__(self, config: Dict[str, Any]) -> None:
        self.config = DatabaseConfig(config)
        self._pool: Optional[ConnectionPool] = None

    @property
    def pool(self) -> ConnectionPool:
        if self._pool is None:
            self._pool = ConnectionPool(
                self.config.connection_string,
                min_size=self.config.min_size,
                max_size=self.config.max_size,
                kwargs={"row_factory": dict_row},
                open=True,
            )
        return self._pool

    @contextmanager
    def connection(self) -> Generator[psycopg.Connection, None, None]:
        """Get a database connection from the pool.

        The transaction is committed when the block exits cleanly and rolled
        back otherwise.
        """
        with self.pool.connection() as conn:
            yield conn

    def close(self) -> None:
        if self._pool is not None:
            self._pool.close()
            self._pool = None
