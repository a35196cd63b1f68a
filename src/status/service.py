"""Status and server statistics for the dashboard."""
import os
import platform
import time
from collections.abc import Callable
from datetime import datetime, timezone

import psutil

from src.record_store.base import RecordStore
from src.record_store.models import LogLevel
from src.scheduling.base import Scheduler
from .models import FeedHealth, RssStatus, ServerInfo


STATUS_LOG_WINDOW = 10

_SUCCESS_LEVELS = (LogLevel.SUCCESS, LogLevel.INFO)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_relative_time(then: datetime, now: datetime) -> str:
    """
    Format the distance between two times for humans.

    Example:
        >>> format_relative_time(now - timedelta(minutes=75), now)
        '1h 15m ago'
    """
    minutes = int((now - then).total_seconds() // 60)
    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes} min ago"

    hours = minutes // 60
    if hours < 24:
        return f"{hours}h {minutes % 60}m ago"

    days = hours // 24
    return f"{days} day{'s' if days > 1 else ''} ago"


def format_uptime(seconds: float) -> str:
    """Format elapsed seconds as ``Hh Mm``."""
    total_minutes = int(seconds // 60)
    return f"{total_minutes // 60}h {total_minutes % 60}m"


class StatusService:
    """
    Derives dashboard status from the store and the scheduler.

    Status heuristic: among the newest ``log_window`` operational log
    entries, the feed is in "error" when error entries outnumber info and
    success entries combined. Warn entries count toward the success rate
    denominator only. With no timer installed the feed is "inactive".

    Example:
        service = StatusService(store, scheduler)
        status = await service.get_rss_status()
    """

    def __init__(
        self,
        store: RecordStore,
        scheduler: Scheduler,
        log_window: int = STATUS_LOG_WINDOW,
        clock: Callable[[], datetime] = _utc_now,
        started_at: float | None = None,
    ):
        """
        Initialize the status service.

        Args:
            store: Record store with articles and operational logs
            scheduler: Scheduler whose timer state feeds ``is_scraping_active``
            log_window: Number of newest log entries considered
            clock: Returns the current tz-aware time
            started_at: Process start as a ``time.time()`` value (default: now)
        """
        self.store = store
        self.scheduler = scheduler
        self.log_window = log_window
        self._clock = clock
        self.started_at = started_at if started_at is not None else time.time()

    async def get_rss_status(self) -> RssStatus:
        """
        Compute the feed status.

        Raises:
            PersistenceError: If the store cannot be read
        """
        logs = await self.store.list_logs(self.log_window)
        error_count = sum(1 for entry in logs if entry.level == LogLevel.ERROR)
        success_count = sum(1 for entry in logs if entry.level in _SUCCESS_LEVELS)
        success_rate = (success_count / len(logs)) * 100 if logs else 100.0

        newest = await self.store.list_articles(1)
        last_update = (
            format_relative_time(newest[0].scraped_at, self._clock())
            if newest
            else "Never"
        )

        if error_count > success_count:
            health = FeedHealth.ERROR
        elif not self.scheduler.is_active:
            health = FeedHealth.INACTIVE
        else:
            health = FeedHealth.ACTIVE

        return RssStatus(
            status=health,
            last_update=last_update,
            article_count=await self.store.count_articles(),
            success_rate=round(success_rate, 1),
            is_scraping_active=self.scheduler.is_active,
        )

    def get_server_info(self) -> ServerInfo:
        rss_bytes = psutil.Process(os.getpid()).memory_info().rss
        return ServerInfo(
            python_version=platform.python_version(),
            memory_usage=f"{round(rss_bytes / 1024 / 1024)} MB",
            uptime=format_uptime(time.time() - self.started_at),
        )
