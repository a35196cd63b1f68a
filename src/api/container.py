"""Wiring of stores and services for the HTTP application."""
from collections.abc import Callable
from dataclasses import dataclass

from loguru import logger

from config.database import DatabaseConfig
from config.settings import AppConfig
from src.app_settings.models import default_settings
from src.app_settings.service import SettingsService
from src.ingestion.service import ArticleIngestionService
from src.news_extractor.base import NewsScraper
from src.news_extractor.service import NewsScrapeService
from src.record_store.base import RecordStore
from src.record_store.memory_store import InMemoryRecordStore
from src.record_store.postgres_store import PostgresRecordStore
from src.rss_feed.generator import RssFeedGenerator
from src.scheduling.service import ScrapeScheduler
from src.scheduling.timer import CronIntervalTimer, RepeatingTimer
from src.status.service import StatusService


@dataclass
class ServiceContainer:
    """Services shared by the API routes for the lifetime of the process."""

    config: AppConfig
    store: RecordStore
    scheduler: ScrapeScheduler
    settings_service: SettingsService
    status_service: StatusService
    feed_generator: RssFeedGenerator
    db_config: DatabaseConfig | None = None

    async def startup(self) -> None:
        """
        Open store resources, seed missing settings, start the scheduler.

        Raises:
            PersistenceError: If the store cannot be initialized
        """
        if self.db_config is not None:
            await self.db_config.create_pool()

        for key, value in default_settings(self.config.source_url).items():
            if await self.store.get_setting(key) is None:
                await self.store.upsert_setting(key, value)
                logger.info(f"Seeded default setting {key}={value}")

        await self.scheduler.start()

    async def shutdown(self) -> None:
        await self.scheduler.shutdown()
        if self.db_config is not None:
            await self.db_config.close_pool()


def build_container(
    config: AppConfig,
    scraper: NewsScraper | None = None,
    timer_factory: Callable[[int], RepeatingTimer] = CronIntervalTimer,
) -> ServiceContainer:
    """
    Build the service graph for a configuration.

    Args:
        config: Process configuration (selects the store backend)
        scraper: Fetch-and-extract service (default: NewsScrapeService on the store)
        timer_factory: Timer builder handed to the scheduler

    Returns:
        ServiceContainer (call ``startup()`` before serving)
    """
    db_config = None
    if config.store_backend == "postgres":
        db_config = DatabaseConfig(database_url=config.database_url)
        store: RecordStore = PostgresRecordStore(db_config)
    else:
        store = InMemoryRecordStore()

    scheduler = ScrapeScheduler(
        store=store,
        scraper=scraper or NewsScrapeService(store),
        ingestor=ArticleIngestionService(store),
        timer_factory=timer_factory,
        default_source_url=config.source_url,
    )

    logger.info(f"Service container built (store backend: {config.store_backend})")
    return ServiceContainer(
        config=config,
        store=store,
        scheduler=scheduler,
        settings_service=SettingsService(store, scheduler),
        status_service=StatusService(store, scheduler),
        feed_generator=RssFeedGenerator(
            store,
            feed_url=f"{config.feed_base_url}/rss.xml",
            channel_link=config.source_url,
        ),
        db_config=db_config,
    )
