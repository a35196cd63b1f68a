"""Tests for SettingsService."""
from src.app_settings.models import MAX_ARTICLES_KEY, UPDATE_INTERVAL_KEY
from src.app_settings.service import SettingsService
from src.record_store.models import LogLevel
from src.scheduling.service import ScrapeScheduler
from tests.scheduling.fakes import FakeTimerFactory, StaticScraper


def _scheduler(store) -> tuple[ScrapeScheduler, FakeTimerFactory]:
    factory = FakeTimerFactory()
    scheduler = ScrapeScheduler(
        store=store,
        scraper=StaticScraper(),
        ingestor=None,
        timer_factory=factory,
    )
    return scheduler, factory


class TestUpdateSetting:
    async def test_interval_change_reschedules(self, memory_store):
        # Given: an installed schedule at the default interval
        scheduler, factory = _scheduler(memory_store)
        await scheduler.update_schedule()
        service = SettingsService(memory_store, scheduler)

        # When: setting updateInterval to 30
        setting = await service.update_setting(UPDATE_INTERVAL_KEY, "30")

        # Then: the value is stored and the timer replaced
        assert setting.value == "30"
        assert scheduler.cron_expression == "*/30 * * * *"
        assert factory.timers[0].cancelled
        assert factory.latest.interval_minutes == 30

        # Then: both log entries are written, newest last
        logs = await memory_store.list_logs(2)
        assert [(e.level, e.message) for e in reversed(logs)] == [
            (LogLevel.INFO, "Scheduled scraping every 30 minutes"),
            (LogLevel.INFO, "Update interval changed to 30 minutes"),
        ]

    async def test_other_keys_do_not_reschedule(self, memory_store):
        scheduler, factory = _scheduler(memory_store)
        service = SettingsService(memory_store, scheduler)

        await service.update_setting(MAX_ARTICLES_KEY, "50")

        assert factory.timers == []
        assert (await memory_store.get_setting(MAX_ARTICLES_KEY)).value == "50"

    async def test_list_settings_returns_seeded_defaults(self, memory_store):
        scheduler, _ = _scheduler(memory_store)
        service = SettingsService(memory_store, scheduler)

        keys = [s.key for s in await service.list_settings()]

        assert keys == ["updateInterval", "maxArticles", "sourceUrl"]
