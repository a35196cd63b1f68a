"""
Run a single scrape → ingest cycle and print the result.

Useful to check that the extraction heuristics still match the source
markup without starting the server.

Usage:
    # Scrape the default listing page into a throwaway in-memory store
    uv run python scripts/scrape_once.py

    # Scrape a different page and list what was extracted
    uv run python scripts/scrape_once.py --url https://unik-kediri.ac.id/list-berita --show-articles

    # Scrape into PostgreSQL (uses DATABASE_URL)
    uv run python scripts/scrape_once.py --store postgres
"""

import argparse
import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from config.database import DatabaseConfig
from config.log_config import configure_logging
from config.settings import AppConfig
from src.app_settings.models import SOURCE_URL_KEY, default_settings
from src.ingestion.service import ArticleIngestionService
from src.news_extractor.service import NewsScrapeService
from src.record_store.base import RecordStore
from src.record_store.memory_store import InMemoryRecordStore
from src.record_store.postgres_store import PostgresRecordStore
from src.scheduling.service import ScrapeScheduler


async def run_once(store: RecordStore, source_url: str, retries: int, show_articles: bool) -> int:
    for key, value in default_settings(source_url).items():
        if await store.get_setting(key) is None:
            await store.upsert_setting(key, value)
    await store.upsert_setting(SOURCE_URL_KEY, source_url)

    scheduler = ScrapeScheduler(
        store=store,
        scraper=NewsScrapeService(store, max_retries=retries),
        ingestor=ArticleIngestionService(store),
        default_source_url=source_url,
    )
    result = await scheduler.run_scrape_task()

    logger.info("=" * 70)
    logger.info("Scrape Summary:")
    logger.info(f"  Source: {source_url}")
    logger.info(f"  Candidates extracted: {result.candidate_count}")
    logger.info(f"  New articles stored: {result.added_count}")
    logger.info(f"  Articles in store: {await store.count_articles()}")
    if result.error:
        logger.error(f"  Error ({result.error.kind.value}): {result.error.message}")
    logger.info("=" * 70)

    if show_articles:
        for i, article in enumerate(await store.list_articles(50), 1):
            logger.info(f"Article {i}: [{article.category}] {article.title}")
            logger.info(f"  URL: {article.url}")
            logger.info(f"  Published: {article.published_date}")

    return 0 if result.succeeded else 1


async def main() -> int:
    """Main entry point."""
    load_dotenv()

    parser = argparse.ArgumentParser(description="Run one scrape and ingest cycle")
    parser.add_argument(
        "--url",
        type=str,
        default=None,
        help="Listing page to scrape (default: SOURCE_URL or the UNIK Kediri listing)",
    )
    parser.add_argument(
        "--store",
        choices=["memory", "postgres"],
        default="memory",
        help="Record store backend (default: memory)",
    )
    parser.add_argument(
        "--retries",
        type=int,
        default=1,
        help="Total fetch attempts with exponential backoff (default: 1)",
    )
    parser.add_argument(
        "--show-articles",
        action="store_true",
        help="Print stored articles after the run",
    )
    args = parser.parse_args()

    if args.retries < 1:
        logger.error(f"retries must be >= 1, got: {args.retries}")
        return 1

    configure_logging()
    config = AppConfig.from_env()
    source_url = args.url or config.source_url

    if args.store == "postgres":
        async with DatabaseConfig(database_url=config.database_url) as db_config:
            return await run_once(
                PostgresRecordStore(db_config), source_url, args.retries, args.show_articles
            )

    return await run_once(InMemoryRecordStore(), source_url, args.retries, args.show_articles)


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
