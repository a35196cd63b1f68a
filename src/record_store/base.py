"""Base protocol for record stores."""
from typing import Protocol

from .models import Article, LogEntry, LogLevel, ScrapeCandidate, Setting


class RecordStore(Protocol):
    """
    Protocol for record stores using structural subtyping.

    A record store owns the canonical copies of articles, operational log
    entries, and settings. Any class implementing these coroutines can be
    injected into the ingestor, scheduler, status service, and API.

    Guarantees expected from implementations:
    - Every operation is atomic with respect to every other operation
      (readers never observe a half-applied write)
    - No two stored articles share a url
    - Listings are newest first (articles by scraped_at, logs by timestamp)
    - Returned models are immutable snapshots

    Implementations:
        - InMemoryRecordStore: single-process store guarded by asyncio.Lock
        - PostgresRecordStore: asyncpg pool + aiosql queries

    Example:
        class MyStore:  # No inheritance needed!
            async def list_articles(self, limit: int = 50) -> list[Article]:
                ...

        # MyStore satisfies RecordStore Protocol
    """

    # Articles
    async def list_articles(self, limit: int = 50) -> list[Article]:
        """Return up to ``limit`` articles ordered by scraped_at descending."""
        ...

    async def find_article_by_url(self, url: str) -> Article | None:
        """Return the stored article with this url, or None."""
        ...

    async def insert_article(self, candidate: ScrapeCandidate) -> Article:
        """
        Persist a candidate as a new article.

        The store assigns ``id`` (monotonic) and ``scraped_at`` (now).

        Raises:
            PersistenceError: If the url already exists or the write fails
        """
        ...

    async def trim_articles(self, keep_count: int) -> int:
        """Delete all but the ``keep_count`` newest articles. Returns deleted count."""
        ...

    async def count_articles(self) -> int:
        """Return the number of stored articles."""
        ...

    # Operational logs
    async def list_logs(self, limit: int = 100) -> list[LogEntry]:
        """Return up to ``limit`` log entries ordered by timestamp descending."""
        ...

    async def append_log(self, level: LogLevel, message: str) -> LogEntry:
        """Append an operational log entry."""
        ...

    async def trim_logs(self, keep_count: int) -> int:
        """Delete all but the ``keep_count`` newest log entries. Returns deleted count."""
        ...

    # Settings
    async def get_setting(self, key: str) -> Setting | None:
        """Return the setting for ``key``, or None if unset."""
        ...

    async def upsert_setting(self, key: str, value: str) -> Setting:
        """Create the setting or update its value and updated_at."""
        ...

    async def list_settings(self) -> list[Setting]:
        """Return all settings."""
        ...
