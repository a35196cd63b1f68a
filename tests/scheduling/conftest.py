"""Shared fixtures for scheduler tests."""
import pytest

from src.ingestion.service import ArticleIngestionService
from src.scheduling.service import ScrapeScheduler
from tests.scheduling.fakes import FakeTimerFactory, StaticScraper


@pytest.fixture
def timer_factory() -> FakeTimerFactory:
    return FakeTimerFactory()


@pytest.fixture
def scraper() -> StaticScraper:
    return StaticScraper()


@pytest.fixture
def scheduler(memory_store, scraper, timer_factory, clock) -> ScrapeScheduler:
    return ScrapeScheduler(
        store=memory_store,
        scraper=scraper,
        ingestor=ArticleIngestionService(memory_store),
        timer_factory=timer_factory,
        clock=clock,
    )
