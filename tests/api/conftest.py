"""Shared fixtures for API tests."""
from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from config.settings import AppConfig
from src.api.app import create_app
from src.api.container import ServiceContainer, build_container
from tests.scheduling.fakes import FakeTimerFactory, StaticScraper


@pytest.fixture
def container() -> ServiceContainer:
    """Memory-backed container with a static scraper and a manual timer."""
    return build_container(
        AppConfig(),
        scraper=StaticScraper(),
        timer_factory=FakeTimerFactory(),
    )


@pytest.fixture
def client(container: ServiceContainer) -> Generator[TestClient, None, None]:
    """Test client with the application lifespan running."""
    with TestClient(create_app(container)) as test_client:
        yield test_client
