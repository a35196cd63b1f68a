"""Integration tests for PostgresRecordStore (requires Docker)."""
import pytest

from config.database import DatabaseConfig
from src.record_store.errors import PersistenceError
from src.record_store.models import LogLevel
from src.record_store.postgres_store import PostgresRecordStore
from tests.utils import make_candidate


pytestmark = pytest.mark.integration


class TestPostgresArticles:
    """Article operations against a real database."""

    async def test_insert_and_find_by_url(self, postgres_store):
        # Given: a candidate
        candidate = make_candidate(1)

        # When: inserting and looking it up
        stored = await postgres_store.insert_article(candidate)
        found = await postgres_store.find_article_by_url(candidate.url)

        # Then: the database assigned id and scraped_at
        assert stored.id == 1
        assert stored.scraped_at.tzinfo is not None
        assert found == stored

    async def test_duplicate_url_raises_persistence_error(self, postgres_store):
        # Given: an article already stored
        await postgres_store.insert_article(make_candidate(1))

        # When/Then: the unique constraint surfaces as PersistenceError
        with pytest.raises(PersistenceError) as exc_info:
            await postgres_store.insert_article(make_candidate(1))

        assert "already exists" in str(exc_info.value)

    async def test_list_and_trim_keep_newest(self, postgres_store):
        # Given: five articles
        for n in range(5):
            await postgres_store.insert_article(make_candidate(n))

        # When: trimming to two
        deleted = await postgres_store.trim_articles(2)

        # Then: the two newest remain, newest first
        remaining = await postgres_store.list_articles()
        assert deleted == 3
        assert [a.url[-1] for a in remaining] == ["4", "3"]
        assert await postgres_store.count_articles() == 2


class TestPostgresLogsAndSettings:
    """Operational logs and settings against a real database."""

    async def test_append_list_and_trim_logs(self, postgres_store):
        for n in range(4):
            await postgres_store.append_log(LogLevel.INFO, f"entry {n}")
        await postgres_store.append_log(LogLevel.ERROR, "boom")

        deleted = await postgres_store.trim_logs(3)
        logs = await postgres_store.list_logs()

        assert deleted == 2
        assert [e.message for e in logs] == ["boom", "entry 3", "entry 2"]
        assert logs[0].level is LogLevel.ERROR

    async def test_upsert_setting_overwrites_value(self, postgres_store):
        created = await postgres_store.upsert_setting("updateInterval", "15")
        updated = await postgres_store.upsert_setting("updateInterval", "30")

        assert updated.id == created.id
        assert (await postgres_store.get_setting("updateInterval")).value == "30"
        assert [s.key for s in await postgres_store.list_settings()] == ["updateInterval"]


async def test_operations_without_pool_raise_persistence_error():
    # Given: a store whose pool was never created
    store = PostgresRecordStore(DatabaseConfig(database_url="postgresql://u:p@localhost/none"))

    # When/Then: the RuntimeError from the pool is wrapped
    with pytest.raises(PersistenceError) as exc_info:
        await store.count_articles()

    assert exc_info.value.operation == "count_articles"
