"""Scrape scheduler: repeating timer plus an at-most-one-in-flight guard."""
import asyncio
from collections.abc import Callable
from datetime import datetime, timezone

from loguru import logger

from config.settings import DEFAULT_SOURCE_URL
from src.app_settings.models import (
    DEFAULT_UPDATE_INTERVAL_MINUTES,
    SOURCE_URL_KEY,
    UPDATE_INTERVAL_KEY,
    parse_positive_int,
)
from src.ingestion.base import ArticleIngestor
from src.news_extractor.base import NewsScraper
from src.news_extractor.errors import FetchError
from src.record_store.base import RecordStore
from src.record_store.errors import PersistenceError
from src.record_store.models import LogLevel
from .models import ScrapeError, ScrapeErrorKind, ScrapeRunResult, SchedulerState
from .timer import CronIntervalTimer, RepeatingTimer, cron_expression


SHUTDOWN_TIMEOUT_SECONDS = 10.0


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ScrapeScheduler:
    """
    Drives periodic scrape → ingest runs.

    Implements the Scheduler Protocol.

    Lifecycle:
    1. ``start()`` runs one scrape immediately, then installs the timer
    2. Each timer firing calls ``run_scrape_task()``
    3. ``update_schedule()`` replaces the timer when the interval setting
       changes (an in-flight run is left to finish)
    4. ``stop()`` cancels the timer; ``shutdown()`` also drains an in-flight
       run, cancelling it after a timeout

    At most one run is in flight. The running flag is checked and set with
    no ``await`` in between, so two triggers on the same event loop cannot
    both pass the guard. A trigger arriving while a run is in flight is
    skipped and logged, never queued.

    Failures never escape ``run_scrape_task()``: they are written to the
    operational log and returned in ``ScrapeRunResult.error`` so the timer
    keeps firing.

    Example:
        scheduler = ScrapeScheduler(
            store=store,
            scraper=NewsScrapeService(store),
            ingestor=ArticleIngestionService(store),
        )
        await scheduler.start()
        ...
        scheduler.stop()
    """

    def __init__(
        self,
        store: RecordStore,
        scraper: NewsScraper,
        ingestor: ArticleIngestor,
        timer_factory: Callable[[int], RepeatingTimer] = CronIntervalTimer,
        default_source_url: str = DEFAULT_SOURCE_URL,
        clock: Callable[[], datetime] = _utc_now,
    ):
        """
        Initialize the scheduler (no timer installed yet).

        Args:
            store: Record store for settings and operational logs
            scraper: Fetch-and-extract service
            ingestor: Dedup/persist/retention service
            timer_factory: Builds a timer for an interval in minutes
            default_source_url: Used when the ``sourceUrl`` setting is unset
            clock: Returns the current tz-aware time (for run results)
        """
        self.store = store
        self.scraper = scraper
        self.ingestor = ingestor
        self.timer_factory = timer_factory
        self.default_source_url = default_source_url
        self._clock = clock

        self._timer: RepeatingTimer | None = None
        self._running = False
        self._run_task: asyncio.Task | None = None
        self._idle = asyncio.Event()
        self._idle.set()
        self.interval_minutes: int | None = None
        self.cron_expression: str | None = None
        self.last_result: ScrapeRunResult | None = None

    @property
    def state(self) -> SchedulerState:
        return SchedulerState.RUNNING if self._running else SchedulerState.IDLE

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def is_active(self) -> bool:
        return self._timer is not None

    async def start(self) -> None:
        """
        Run one immediate scrape and install the repeating timer.

        Raises:
            PersistenceError: If the store cannot record startup or read settings
        """
        logger.info("Starting scrape scheduler")
        await self.store.append_log(LogLevel.INFO, "RSS Feed Scheduler starting...")

        await self.run_scrape_task()
        await self.update_schedule()

        await self.store.append_log(
            LogLevel.SUCCESS, "RSS Feed Scheduler started successfully"
        )

    def stop(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
            logger.info("Scrape scheduler stopped")

    async def shutdown(self, timeout: float = SHUTDOWN_TIMEOUT_SECONDS) -> None:
        """
        Stop the timer and let an in-flight run finish.

        A run still going after ``timeout`` seconds is cancelled, so nothing
        keeps using the store once its resources are closed.
        """
        self.stop()
        if not self._running:
            return

        logger.info(f"Waiting up to {timeout}s for in-flight scrape to finish")
        try:
            await asyncio.wait_for(self._idle.wait(), timeout)
        except asyncio.TimeoutError:
            logger.warning("In-flight scrape did not finish in time, cancelling it")
            if self._run_task is not None:
                self._run_task.cancel()
            await self._idle.wait()

    async def update_schedule(self) -> str:
        """
        Replace the timer using the current ``updateInterval`` setting.

        Falls back to 15 minutes when the setting is unset, unparsable,
        or not positive.

        Returns:
            Cron expression of the installed timer (e.g. ``*/15 * * * *``)

        Raises:
            PersistenceError: If the setting cannot be read
        """
        setting = await self.store.get_setting(UPDATE_INTERVAL_KEY)
        interval = parse_positive_int(
            setting.value if setting else None, DEFAULT_UPDATE_INTERVAL_MINUTES
        )
        expression = cron_expression(interval)

        # Cancel and install without awaiting in between: concurrent updates
        # must not leave two timers behind
        if self._timer is not None:
            self._timer.cancel()
        timer = self.timer_factory(interval)
        timer.start(self._on_timer_fired)
        self._timer = timer
        self.interval_minutes = interval
        self.cron_expression = expression

        logger.info(f"Timer installed: {expression}")
        await self.store.append_log(
            LogLevel.INFO, f"Scheduled scraping every {interval} minutes"
        )
        return expression

    async def run_scrape_task(self) -> ScrapeRunResult:
        """
        Execute one scrape → ingest run under the in-progress guard.

        Returns:
            ScrapeRunResult (skipped, succeeded, or carrying a ScrapeError)
        """
        started_at = self._clock()

        if self._running:
            logger.warning("Scrape already in flight, skipping trigger")
            await self._record(LogLevel.WARN, "Scrape task already running, skipping...")
            return ScrapeRunResult(
                started_at=started_at, finished_at=self._clock(), skipped=True
            )

        self._running = True
        self._idle.clear()
        self._run_task = asyncio.current_task()
        try:
            result = await self._execute(started_at)
        finally:
            self._running = False
            self._run_task = None
            self._idle.set()

        self.last_result = result
        return result

    async def _execute(self, started_at: datetime) -> ScrapeRunResult:
        try:
            await self.store.append_log(LogLevel.INFO, "Starting news scraping task...")

            source_url = await self._source_url()
            candidates = await self.scraper.scrape(source_url)
            added_count = await self.ingestor.ingest(candidates)

            await self.store.append_log(
                LogLevel.SUCCESS,
                f"Scraping completed successfully. Found {len(candidates)} articles",
            )
            logger.info(
                f"Scrape run finished: {len(candidates)} candidates, {added_count} new"
            )
            warnings = []
            if not candidates:
                warnings.append(
                    ScrapeError(
                        kind=ScrapeErrorKind.EMPTY_RESULT,
                        message=f"No articles found at {source_url}",
                    )
                )
            return ScrapeRunResult(
                started_at=started_at,
                finished_at=self._clock(),
                candidate_count=len(candidates),
                added_count=added_count,
                warnings=warnings,
            )

        except FetchError as e:
            return await self._failed(started_at, ScrapeErrorKind.FETCH, e)
        except PersistenceError as e:
            return await self._failed(started_at, ScrapeErrorKind.PERSISTENCE, e)
        except Exception as e:
            logger.exception("Unexpected error during scrape run")
            return await self._failed(started_at, ScrapeErrorKind.UNEXPECTED, e)

    async def _failed(
        self, started_at: datetime, kind: ScrapeErrorKind, error: Exception
    ) -> ScrapeRunResult:
        message = str(error)
        logger.error(f"Scrape run failed ({kind.value}): {message}")
        await self._record(LogLevel.ERROR, f"Scraping task failed: {message}")
        return ScrapeRunResult(
            started_at=started_at,
            finished_at=self._clock(),
            error=ScrapeError(kind=kind, message=message),
        )

    async def _record(self, level: LogLevel, message: str) -> None:
        """Append an operational log entry; a failing store is reported to loguru only."""
        try:
            await self.store.append_log(level, message)
        except PersistenceError as e:
            logger.error(f"Could not record log entry '{message}': {e}")

    async def _source_url(self) -> str:
        setting = await self.store.get_setting(SOURCE_URL_KEY)
        if setting and setting.value:
            return setting.value
        return self.default_source_url

    async def _on_timer_fired(self) -> None:
        logger.debug("Scheduled scrape triggered")
        await self.run_scrape_task()
