"""PostgreSQL record store using asyncpg and aiosql."""
from pathlib import Path

import aiosql
import asyncpg
from asyncpg import UniqueViolationError
from loguru import logger

from config.database import DatabaseConfig
from .errors import PersistenceError
from .models import Article, LogEntry, LogLevel, ScrapeCandidate, Setting


class PostgresRecordStore:
    """
    PostgreSQL implementation of the RecordStore Protocol.

    Every operation acquires a pooled connection for a single SQL statement,
    which makes each operation atomic with respect to the others (trims are
    a single DELETE ... RETURNING statement). Schema is managed by Alembic;
    SQL lives in ``queries/*.sql`` and is loaded with aiosql.

    Database errors are wrapped in PersistenceError so callers do not need
    to know about asyncpg.

    Example:
        db_config = DatabaseConfig()
        await db_config.create_pool()
        store = PostgresRecordStore(db_config)
        articles = await store.list_articles(limit=20)
    """

    def __init__(self, db_config: DatabaseConfig):
        """
        Initialize the store and load SQL queries.

        Args:
            db_config: Database configuration owning the connection pool
                (caller manages pool lifecycle)
        """
        self.db_config = db_config
        queries_path = Path(__file__).parent / "queries"
        self.queries = aiosql.from_path(str(queries_path), "asyncpg")

    # Articles

    async def list_articles(self, limit: int = 50) -> list[Article]:
        rows = await self._run("list_articles", limit=max(limit, 0))
        return [Article(**dict(row)) for row in rows]

    async def find_article_by_url(self, url: str) -> Article | None:
        row = await self._run("find_article_by_url", url=url)
        return Article(**dict(row)) if row else None

    async def insert_article(self, candidate: ScrapeCandidate) -> Article:
        try:
            row = await self._run(
                "insert_article",
                title=candidate.title,
                excerpt=candidate.excerpt,
                url=candidate.url,
                category=candidate.category,
                published_date=candidate.published_date,
            )
        except PersistenceError as e:
            if isinstance(e.__cause__, UniqueViolationError):
                raise PersistenceError(
                    "insert_article", f"article url already exists: {candidate.url}"
                ) from e.__cause__
            raise
        return Article(**dict(row))

    async def trim_articles(self, keep_count: int) -> int:
        deleted = await self._run("trim_articles", keep_count=max(keep_count, 0))
        return int(deleted or 0)

    async def count_articles(self) -> int:
        return int(await self._run("count_articles") or 0)

    # Operational logs

    async def list_logs(self, limit: int = 100) -> list[LogEntry]:
        rows = await self._run("list_logs", limit=max(limit, 0))
        return [LogEntry(**dict(row)) for row in rows]

    async def append_log(self, level: LogLevel, message: str) -> LogEntry:
        row = await self._run("append_log", level=LogLevel(level).value, message=message)
        return LogEntry(**dict(row))

    async def trim_logs(self, keep_count: int) -> int:
        deleted = await self._run("trim_logs", keep_count=max(keep_count, 0))
        return int(deleted or 0)

    # Settings

    async def get_setting(self, key: str) -> Setting | None:
        row = await self._run("get_setting", key=key)
        return Setting(**dict(row)) if row else None

    async def upsert_setting(self, key: str, value: str) -> Setting:
        row = await self._run("upsert_setting", key=key, value=value)
        return Setting(**dict(row))

    async def list_settings(self) -> list[Setting]:
        rows = await self._run("list_settings")
        return [Setting(**dict(row)) for row in rows]

    async def _run(self, query_name: str, **params):
        """
        Execute a named aiosql query on a pooled connection.

        Raises:
            PersistenceError: If the pool is not initialized or the query fails
        """
        query = getattr(self.queries, query_name)
        try:
            async with self.db_config.connection() as conn:
                return await query(conn, **params)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, RuntimeError, OSError) as e:
            logger.error(f"Query {query_name} failed: {e}")
            raise PersistenceError(query_name, str(e)) from e
