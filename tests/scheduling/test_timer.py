"""Tests for cron-aligned timers."""
import asyncio
from datetime import datetime, timezone

import pytest

from src.scheduling.timer import CronIntervalTimer, cron_expression, next_firing


def _at(hour: int, minute: int, second: int = 0) -> datetime:
    return datetime(2024, 1, 15, hour, minute, second, tzinfo=timezone.utc)


class TestCronExpression:
    @pytest.mark.parametrize(
        "interval,expected",
        [(1, "*/1 * * * *"), (15, "*/15 * * * *"), (30, "*/30 * * * *")],
    )
    def test_expression_for_interval(self, interval, expected):
        assert cron_expression(interval) == expected

    def test_non_positive_interval_raises_value_error(self):
        with pytest.raises(ValueError):
            cron_expression(0)


class TestNextFiring:
    @pytest.mark.parametrize(
        "now,interval,expected",
        [
            (_at(10, 7, 30), 15, _at(10, 15)),
            (_at(10, 15, 0), 15, _at(10, 30)),
            (_at(10, 59, 59), 15, _at(11, 0)),
            (_at(10, 7), 1, _at(10, 8)),
            (_at(10, 31), 30, _at(11, 0)),
            (_at(10, 5), 7, _at(10, 7)),
            (_at(10, 57), 7, _at(11, 0)),
        ],
    )
    def test_next_minute_divisible_by_interval(self, now, interval, expected):
        assert next_firing(now, interval) == expected

    def test_interval_of_an_hour_or_more_fires_at_minute_zero(self):
        assert next_firing(_at(10, 1), 90) == _at(11, 0)

    def test_rolls_over_midnight(self):
        late = datetime(2024, 1, 15, 23, 50, tzinfo=timezone.utc)

        assert next_firing(late, 15) == datetime(2024, 1, 16, 0, 0, tzinfo=timezone.utc)


class TestCronIntervalTimer:
    async def test_fires_callback_after_aligned_delay(self):
        # Given: a clock at 10:07:30 and a sleep that records its delays
        fired = asyncio.Event()
        delays: list[float] = []

        async def fake_sleep(delay: float) -> None:
            delays.append(delay)
            if len(delays) > 1:
                await asyncio.Event().wait()

        async def callback() -> None:
            fired.set()

        timer = CronIntervalTimer(15, clock=lambda: _at(10, 7, 30), sleep=fake_sleep)

        # When: starting the timer
        timer.start(callback)
        await asyncio.wait_for(fired.wait(), timeout=1)

        # Then: it waited until 10:15 before firing
        assert delays[0] == 450.0
        assert timer.cron_expression == "*/15 * * * *"
        assert timer.is_active

        timer.cancel()
        assert not timer.is_active
        assert timer.next_fire_time is None

    async def test_firing_does_not_wait_for_previous_callback(self):
        # Given: a callback that never finishes on its own
        started = 0
        release = asyncio.Event()
        two_started = asyncio.Event()

        async def slow_callback() -> None:
            nonlocal started
            started += 1
            if started == 2:
                two_started.set()
            await release.wait()

        async def no_wait(delay: float) -> None:
            await asyncio.sleep(0)

        timer = CronIntervalTimer(1, clock=lambda: _at(10, 0, 30), sleep=no_wait)

        # When: the timer fires repeatedly
        timer.start(slow_callback)
        await asyncio.wait_for(two_started.wait(), timeout=1)

        # Then: the second firing started while the first was still running
        timer.cancel()
        release.set()
        assert started >= 2

    async def test_start_twice_raises_runtime_error(self):
        async def never(delay: float) -> None:
            await asyncio.Event().wait()

        async def callback() -> None:
            pass

        timer = CronIntervalTimer(5, sleep=never)
        timer.start(callback)

        with pytest.raises(RuntimeError):
            timer.start(callback)

        timer.cancel()

    async def test_lagging_wall_clock_does_not_refire_same_boundary(self):
        # Given: a wall clock reading 1 ms before 10:15 when the first sleep ends
        readings = iter(
            [_at(10, 7, 30), datetime(2024, 1, 15, 10, 14, 59, 999000, tzinfo=timezone.utc)]
        )
        fired: list[bool] = []
        delays: list[float] = []
        second_sleep = asyncio.Event()

        async def fake_sleep(delay: float) -> None:
            delays.append(delay)
            if len(delays) > 1:
                second_sleep.set()
                await asyncio.Event().wait()

        async def callback() -> None:
            fired.append(True)

        timer = CronIntervalTimer(15, clock=lambda: next(readings), sleep=fake_sleep)

        # When: the timer fires once and schedules the next firing
        timer.start(callback)
        await asyncio.wait_for(second_sleep.wait(), timeout=1)
        await asyncio.sleep(0)

        # Then: the next firing is 10:30, not 10:15 again
        assert len(fired) == 1
        assert timer.next_fire_time == _at(10, 30)
        assert delays[1] == pytest.approx(900.001)

        timer.cancel()
