"""In-memory record store for single-process deployments and tests."""
import asyncio
from collections.abc import Callable
from datetime import datetime, timezone

from loguru import logger

from .errors import PersistenceError
from .models import Article, LogEntry, LogLevel, ScrapeCandidate, Setting


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryRecordStore:
    """
    In-memory implementation of the RecordStore Protocol.

    Features:
    - Monotonic ids per entity kind (articles, logs, settings)
    - Url index for O(1) dedup lookups
    - Newest-first listings with id as tie-breaker for equal timestamps
    - Retention trimming for articles and logs

    Thread Safety: Every operation runs under a single asyncio.Lock, so a
    reader never observes a write half-applied (e.g. a count without the
    matching record).
    Concurrency: Designed for single-process asyncio deployment.
    """

    def __init__(
        self,
        initial_settings: dict[str, str] | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        """
        Initialize an empty store.

        Args:
            initial_settings: Settings to seed (e.g. application defaults)
            clock: Returns the current tz-aware time (injectable for tests)
        """
        self._articles: dict[int, Article] = {}
        self._url_index: dict[str, int] = {}
        self._logs: dict[int, LogEntry] = {}
        self._settings: dict[str, Setting] = {}
        self._next_article_id = 1
        self._next_log_id = 1
        self._next_setting_id = 1
        self._clock = clock
        self._lock = asyncio.Lock()

        for key, value in (initial_settings or {}).items():
            self._put_setting(key, value)

        logger.info(
            f"Initialized InMemoryRecordStore (seeded {len(self._settings)} settings)"
        )

    # Articles

    async def list_articles(self, limit: int = 50) -> list[Article]:
        async with self._lock:
            return self._sorted_articles()[: max(limit, 0)]

    async def find_article_by_url(self, url: str) -> Article | None:
        async with self._lock:
            article_id = self._url_index.get(url)
            if article_id is None:
                return None
            return self._articles[article_id]

    async def insert_article(self, candidate: ScrapeCandidate) -> Article:
        async with self._lock:
            if candidate.url in self._url_index:
                raise PersistenceError(
                    "insert_article", f"article url already exists: {candidate.url}"
                )

            article = Article(
                id=self._next_article_id,
                scraped_at=self._clock(),
                **candidate.model_dump(),
            )
            self._next_article_id += 1
            self._articles[article.id] = article
            self._url_index[article.url] = article.id
            logger.debug(f"Article stored: id={article.id} url={article.url}")
            return article

    async def trim_articles(self, keep_count: int) -> int:
        async with self._lock:
            to_delete = self._sorted_articles()[max(keep_count, 0):]
            for article in to_delete:
                del self._articles[article.id]
                del self._url_index[article.url]

            if to_delete:
                logger.debug(
                    f"Trimmed {len(to_delete)} articles (keep_count={keep_count})"
                )
            return len(to_delete)

    async def count_articles(self) -> int:
        async with self._lock:
            return len(self._articles)

    # Operational logs

    async def list_logs(self, limit: int = 100) -> list[LogEntry]:
        async with self._lock:
            return self._sorted_logs()[: max(limit, 0)]

    async def append_log(self, level: LogLevel, message: str) -> LogEntry:
        async with self._lock:
            entry = LogEntry(
                id=self._next_log_id,
                level=level,
                message=message,
                timestamp=self._clock(),
            )
            self._next_log_id += 1
            self._logs[entry.id] = entry
            return entry

    async def trim_logs(self, keep_count: int) -> int:
        async with self._lock:
            to_delete = self._sorted_logs()[max(keep_count, 0):]
            for entry in to_delete:
                del self._logs[entry.id]
            return len(to_delete)

    # Settings

    async def get_setting(self, key: str) -> Setting | None:
        async with self._lock:
            return self._settings.get(key)

    async def upsert_setting(self, key: str, value: str) -> Setting:
        async with self._lock:
            return self._put_setting(key, value)

    async def list_settings(self) -> list[Setting]:
        async with self._lock:
            return sorted(self._settings.values(), key=lambda s: s.id)

    # Internals (caller holds the lock)

    def _sorted_articles(self) -> list[Article]:
        return sorted(
            self._articles.values(),
            key=lambda a: (a.scraped_at, a.id),
            reverse=True,
        )

    def _sorted_logs(self) -> list[LogEntry]:
        return sorted(
            self._logs.values(),
            key=lambda e: (e.timestamp, e.id),
            reverse=True,
        )

    def _put_setting(self, key: str, value: str) -> Setting:
        existing = self._settings.get(key)
        if existing:
            setting = existing.model_copy(
                update={"value": value, "updated_at": self._clock()}
            )
        else:
            setting = Setting(
                id=self._next_setting_id,
                key=key,
                value=value,
                updated_at=self._clock(),
            )
            self._next_setting_id += 1

        self._settings[setting.key] = setting
        return setting
