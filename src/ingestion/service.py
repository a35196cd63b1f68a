"""Article ingestion service: dedup by url, persist, apply retention."""
from loguru import logger

from src.app_settings.models import (
    DEFAULT_MAX_ARTICLES,
    MAX_ARTICLES_KEY,
    parse_positive_int,
)
from src.record_store.base import RecordStore
from src.record_store.models import LogLevel, ScrapeCandidate


LOG_KEEP_COUNT = 200
ARTICLE_BUFFER_FACTOR = 2


class ArticleIngestionService:
    """
    Stores newly seen candidates and trims old records.

    Implements the ArticleIngestor Protocol.

    Workflow per batch:
    1. Warn (operational log) when the batch is empty, since an empty
       listing usually means the source markup changed
    2. For each candidate, look up its url; insert if absent, skip if present
       (re-scraping the same page is idempotent)
    3. If anything was added: log the count and trim articles to
       ``2 x maxArticles``, evicting the oldest by scraped_at first.
       The buffer keeps recent history when the source reorders items.
    4. Always trim operational logs to the newest 200 entries

    Store failures (PersistenceError) propagate to the caller.

    Example:
        ingestor = ArticleIngestionService(store)
        added = await ingestor.ingest(candidates)
    """

    def __init__(
        self,
        store: RecordStore,
        log_keep_count: int = LOG_KEEP_COUNT,
        buffer_factor: int = ARTICLE_BUFFER_FACTOR,
    ):
        """
        Initialize the ingestion service.

        Args:
            store: Record store owning articles, logs, and settings
            log_keep_count: Operational log entries kept after every cycle
            buffer_factor: Multiplier applied to ``maxArticles`` for retention
        """
        self.store = store
        self.log_keep_count = log_keep_count
        self.buffer_factor = buffer_factor

    async def ingest(self, candidates: list[ScrapeCandidate]) -> int:
        """
        Persist candidates whose url is not stored yet.

        Args:
            candidates: Candidates extracted from the listing page

        Returns:
            Number of newly added articles

        Raises:
            PersistenceError: If a store operation fails
        """
        if not candidates:
            await self.store.append_log(
                LogLevel.WARN, "No articles found - website structure may have changed"
            )

        added_count = 0
        for candidate in candidates:
            existing = await self.store.find_article_by_url(candidate.url)
            if existing:
                logger.debug(f"Article already stored, skipping: {candidate.url}")
                continue

            article = await self.store.insert_article(candidate)
            added_count += 1
            logger.info(f"Article stored with ID: {article.id}")

        if added_count > 0:
            await self.store.append_log(
                LogLevel.INFO, f"Added {added_count} new articles to database"
            )

            keep_count = await self._article_keep_count()
            deleted = await self.store.trim_articles(keep_count)
            if deleted:
                logger.info(f"Retention removed {deleted} articles (keep={keep_count})")

        await self.store.trim_logs(self.log_keep_count)

        logger.info(
            f"Ingestion complete: {added_count} new of {len(candidates)} candidates"
        )
        return added_count

    async def _article_keep_count(self) -> int:
        """Read ``maxArticles`` and apply the retention buffer."""
        setting = await self.store.get_setting(MAX_ARTICLES_KEY)
        max_articles = parse_positive_int(
            setting.value if setting else None, DEFAULT_MAX_ARTICLES
        )
        return max_articles * self.buffer_factor
