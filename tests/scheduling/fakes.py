"""Test doubles for timers and scrapers."""
import asyncio

from tests.utils import make_candidate


class FakeTimer:
    """RepeatingTimer double that fires only when the test says so."""

    def __init__(self, interval_minutes: int):
        self.interval_minutes = interval_minutes
        self.callback = None
        self.cancelled = False

    def start(self, callback) -> None:
        self.callback = callback

    def cancel(self) -> None:
        self.cancelled = True

    async def fire(self) -> None:
        await self.callback()


class FakeTimerFactory:
    """Records every timer the scheduler builds."""

    def __init__(self):
        self.timers: list[FakeTimer] = []

    def __call__(self, interval_minutes: int) -> FakeTimer:
        timer = FakeTimer(interval_minutes)
        self.timers.append(timer)
        return timer

    @property
    def latest(self) -> FakeTimer:
        return self.timers[-1]


class StaticScraper:
    """NewsScraper double returning fixed candidates."""

    def __init__(self, candidates=None):
        self.candidates = candidates if candidates is not None else [
            make_candidate(n) for n in range(3)
        ]
        self.calls: list[str] = []

    async def scrape(self, source_url: str):
        self.calls.append(source_url)
        return list(self.candidates)


class BlockingScraper(StaticScraper):
    """NewsScraper double that waits until released."""

    def __init__(self, candidates=None):
        super().__init__(candidates)
        self.entered = asyncio.Event()
        self.release = asyncio.Event()

    async def scrape(self, source_url: str):
        self.calls.append(source_url)
        self.entered.set()
        await self.release.wait()
        return list(self.candidates)
