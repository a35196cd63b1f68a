"""Cron-aligned repeating timers for the scrape scheduler."""
import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta, timezone
from typing import Any, Protocol

from loguru import logger


TimerCallback = Callable[[], Awaitable[Any]]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def cron_expression(interval_minutes: int) -> str:
    """
    Return the cron expression that fires every ``interval_minutes`` minutes.

    Example:
        >>> cron_expression(30)
        '*/30 * * * *'
    """
    if interval_minutes < 1:
        raise ValueError(f"Interval must be at least 1 minute, got: {interval_minutes}")
    return f"*/{interval_minutes} * * * *"


def next_firing(after: datetime, interval_minutes: int) -> datetime:
    """
    Compute the next firing time of ``*/N * * * *`` strictly after ``after``.

    Cron step semantics apply to the minute field only: a firing happens at
    every minute boundary whose minute is divisible by N, so an interval of
    60 or more fires once per hour at minute 0.

    Example:
        >>> next_firing(datetime(2024, 1, 1, 10, 7, 30), 15)
        datetime.datetime(2024, 1, 1, 10, 15)
    """
    if interval_minutes < 1:
        raise ValueError(f"Interval must be at least 1 minute, got: {interval_minutes}")

    candidate = after.replace(second=0, microsecond=0) + timedelta(minutes=1)
    # Minute 0 always matches, so an hour of candidates is enough
    for _ in range(60):
        if candidate.minute % interval_minutes == 0:
            return candidate
        candidate += timedelta(minutes=1)
    return candidate


class RepeatingTimer(Protocol):
    """
    Protocol for repeating timers driving scheduled scrapes.

    Implementations must spawn each firing without waiting for the previous
    one to finish, so an overlapping firing reaches the scheduler's
    in-progress guard instead of being silently delayed.
    """

    interval_minutes: int

    def start(self, callback: TimerCallback) -> None:
        """Begin firing ``callback`` on schedule."""
        ...

    def cancel(self) -> None:
        """Stop future firings. In-flight callbacks are left to finish."""
        ...


class CronIntervalTimer:
    """
    Asyncio timer firing on ``*/N * * * *`` minute boundaries.

    Implements the RepeatingTimer Protocol. Clock and sleep are injectable
    so tests can drive firings without waiting on the wall clock.
    """

    def __init__(
        self,
        interval_minutes: int,
        clock: Callable[[], datetime] = _utc_now,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """
        Initialize the timer (not started).

        Args:
            interval_minutes: Firing step in minutes (>= 1)
            clock: Returns the current tz-aware time
            sleep: Coroutine function used to wait between firings
        """
        self.interval_minutes = interval_minutes
        self.cron_expression = cron_expression(interval_minutes)
        self.next_fire_time: datetime | None = None
        self._clock = clock
        self._sleep = sleep
        self._task: asyncio.Task | None = None
        self._in_flight: set[asyncio.Task] = set()

    @property
    def is_active(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, callback: TimerCallback) -> None:
        if self.is_active:
            raise RuntimeError("Timer already started")
        self._task = asyncio.create_task(self._run(callback))
        logger.debug(f"Timer started: {self.cron_expression}")

    def cancel(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None
            self.next_fire_time = None
            logger.debug(f"Timer cancelled: {self.cron_expression}")

    async def _run(self, callback: TimerCallback) -> None:
        last_fire_at: datetime | None = None
        while True:
            now = self._clock()
            # Wall clock may lag the sleep; each firing must follow the last one
            after = now if last_fire_at is None else max(now, last_fire_at)
            fire_at = next_firing(after, self.interval_minutes)
            last_fire_at = fire_at
            self.next_fire_time = fire_at
            await self._sleep(max((fire_at - now).total_seconds(), 0.0))

            logger.debug(f"Timer fired ({self.cron_expression})")
            task = asyncio.create_task(callback())
            self._in_flight.add(task)
            task.add_done_callback(self._on_callback_done)

    def _on_callback_done(self, task: asyncio.Task) -> None:
        self._in_flight.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.opt(exception=task.exception()).error("Timer callback raised")
