"""
Pytest configuration and shared fixtures.

Provides an in-memory record store for unit tests and, for tests marked
``integration``, a PostgreSQL instance started with testcontainers and
migrated with Alembic.
"""

import logging
import os
from collections.abc import AsyncGenerator, Generator
from pathlib import Path

import pytest
import pytest_asyncio
from alembic import command
from alembic.config import Config
from testcontainers.postgres import PostgresContainer

from config.database import DatabaseConfig
from src.app_settings.models import default_settings
from src.record_store.memory_store import InMemoryRecordStore
from src.record_store.postgres_store import PostgresRecordStore
from tests.utils import SteppingClock

logger = logging.getLogger(__name__)


@pytest.fixture
def clock() -> SteppingClock:
    return SteppingClock()


@pytest.fixture
def memory_store(clock: SteppingClock) -> InMemoryRecordStore:
    """In-memory store seeded with the default settings."""
    return InMemoryRecordStore(initial_settings=default_settings(), clock=clock)


@pytest.fixture(scope="session")
def postgres_container() -> Generator[PostgresContainer, None, None]:
    """
    Start a PostgreSQL container for the test session.

    This fixture is session-scoped, meaning the container is started once
    and shared across all tests in the session.
    """
    # Use same credentials as .env.example for consistency
    postgres = PostgresContainer(
        image="postgres:16-alpine",
        username="user",
        password="password",
        dbname="news_rss_db",
    )

    with postgres:
        logger.info("=" * 60)
        logger.info("Test PostgreSQL Container Started")
        logger.info(f"  URL: {postgres.get_connection_url()}")
        logger.info("=" * 60)

        yield postgres


@pytest.fixture(scope="session")
def test_database_url(postgres_container: PostgresContainer) -> str:
    """Database URL of the container in SQLAlchemy async format."""
    return postgres_container.get_connection_url().replace(
        "postgresql+psycopg2://", "postgresql+asyncpg://"
    )


@pytest.fixture(scope="session")
def run_migrations(test_database_url: str) -> None:
    """
    Run Alembic migrations on the test database.

    This fixture runs all migrations to set up the database schema
    before any tests run.
    """
    project_root = Path(__file__).parent.parent
    alembic_cfg = Config(str(project_root / "alembic.ini"))

    # env.py reads DATABASE_URL and overrides the ini value
    os.environ["DATABASE_URL"] = test_database_url
    alembic_cfg.set_main_option("sqlalchemy.url", test_database_url)

    command.upgrade(alembic_cfg, "head")


@pytest_asyncio.fixture
async def postgres_store(
    test_database_url: str, run_migrations: None
) -> AsyncGenerator[PostgresRecordStore, None]:
    """
    Provide a PostgresRecordStore over empty tables.

    Tables are truncated before each test; the store runs every operation
    on its own pooled connection, so transaction rollback cannot isolate tests.
    """
    db_config = DatabaseConfig(database_url=test_database_url)
    await db_config.create_pool(min_size=1, max_size=5)

    async with db_config.connection() as conn:
        await conn.execute(
            "TRUNCATE articles, system_logs, settings RESTART IDENTITY"
        )

    try:
        yield PostgresRecordStore(db_config)
    finally:
        await db_config.close_pool()
