"""Runtime settings service."""
from loguru import logger

from src.record_store.base import RecordStore
from src.record_store.models import LogLevel, Setting
from src.scheduling.base import Scheduler
from .models import UPDATE_INTERVAL_KEY


class SettingsService:
    """
    Reads and updates runtime settings.

    Changing ``updateInterval`` reschedules the timer immediately; a scrape
    already in flight is not interrupted.

    Example:
        service = SettingsService(store, scheduler)
        await service.update_setting("updateInterval", "30")
    """

    def __init__(self, store: RecordStore, scheduler: Scheduler):
        self.store = store
        self.scheduler = scheduler

    async def list_settings(self) -> list[Setting]:
        return await self.store.list_settings()

    async def update_setting(self, key: str, value: str) -> Setting:
        """
        Upsert a setting and apply its side effects.

        Args:
            key: Setting key (e.g. "updateInterval", "maxArticles", "sourceUrl")
            value: New value as a string

        Returns:
            The stored Setting

        Raises:
            PersistenceError: If the store write fails
        """
        setting = await self.store.upsert_setting(key, value)
        logger.info(f"Setting updated: {key}={value}")

        if key == UPDATE_INTERVAL_KEY:
            await self.scheduler.update_schedule()
            await self.store.append_log(
                LogLevel.INFO,
                f"Update interval changed to {self.scheduler.interval_minutes} minutes",
            )

        return setting
